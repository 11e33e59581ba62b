"""Get missing permissions use case."""

from uuid import UUID

from gatekeeper.application.dto.permission_dto import (
    MissingPermissionStatistics,
    MissingPermissionsOutput,
)
from gatekeeper.application.services import PermissionCache


class GetMissingPermissionsUseCase:
    """Permissions the user does not hold - candidates for granting."""

    def __init__(self, permission_cache: PermissionCache) -> None:
        self._cache = permission_cache

    async def execute(self, user_id: UUID) -> MissingPermissionsOutput:
        snapshot = await self._cache.get(user_id)
        resolution = snapshot.resolution
        has = len(resolution.effective)
        missing = len(resolution.missing)
        return MissingPermissionsOutput(
            user_id=snapshot.user_id,
            username=snapshot.username,
            permissions=list(resolution.missing),
            statistics=MissingPermissionStatistics(
                total_permissions=has + missing,
                user_has_permissions=has,
                missing_permissions=missing,
            ),
        )
