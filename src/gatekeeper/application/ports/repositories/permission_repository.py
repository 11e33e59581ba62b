"""Permission catalog repository port."""

from typing import Protocol
from uuid import UUID

from gatekeeper.domain.entities import Permission


class PermissionRepository(Protocol):
    """Port for the permission catalog."""

    async def get_by_id(self, permission_id: UUID) -> Permission | None: ...

    async def list_all(self) -> list[Permission]: ...
