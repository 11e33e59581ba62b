"""Role repository port."""

from typing import Protocol
from uuid import UUID

from gatekeeper.domain.entities import Role


class RoleRepository(Protocol):
    """Port for roles and their permission links."""

    async def get_by_id(self, role_id: UUID) -> Role | None: ...

    async def get_permission_ids(self, role_id: UUID) -> set[UUID]: ...

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> bool: ...

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> bool: ...

    async def list_member_ids(self, role_id: UUID) -> list[UUID]: ...
