"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from gatekeeper.application.ports.repositories.override_repository import (
    OverrideRepository,
)
from gatekeeper.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from gatekeeper.application.ports.repositories.role_repository import RoleRepository
from gatekeeper.application.ports.repositories.user_repository import UserRepository


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def users(self) -> UserRepository: ...

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def overrides(self) -> OverrideRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances.

    Entering the returned context starts a transaction; a clean exit commits,
    an exception rolls back.
    """

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
