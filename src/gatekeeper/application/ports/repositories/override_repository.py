"""Permission override repository port."""

from typing import Protocol
from uuid import UUID

from gatekeeper.domain.entities import PermissionOverride


class OverrideRepository(Protocol):
    """Port for the per-user permission override history."""

    async def lock_slot(self, user_id: UUID, permission_id: UUID) -> None: ...

    async def get_active(self, user_id: UUID, permission_id: UUID) -> PermissionOverride | None: ...

    async def list_active(self, user_id: UUID) -> list[PermissionOverride]: ...

    async def list_history(self, user_id: UUID, permission_id: UUID) -> list[PermissionOverride]: ...

    async def create(self, override: PermissionOverride) -> PermissionOverride: ...

    async def mark_revoked(self, override: PermissionOverride) -> None: ...
