"""User repository port."""

from typing import Protocol
from uuid import UUID

from gatekeeper.domain.entities import Role, User


class UserRepository(Protocol):
    """Port for users and their role memberships."""

    async def get_by_id(self, user_id: UUID) -> User | None: ...

    async def get_usernames(self, user_ids: set[UUID]) -> dict[UUID, str]: ...

    async def list_roles(self, user_id: UUID) -> list[Role]: ...

    async def add_role(self, user_id: UUID, role_id: UUID, assigned_by: UUID | None) -> bool: ...

    async def remove_role(self, user_id: UUID, role_id: UUID) -> bool: ...
