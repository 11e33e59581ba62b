"""Get effective permissions use case."""

from uuid import UUID

from gatekeeper.application.dto.permission_dto import (
    EffectivePermissionsOutput,
    PermissionStatistics,
)
from gatekeeper.application.services import PermissionCache


class GetEffectivePermissionsUseCase:
    """Permissions the user holds: (roles | grants) - denies."""

    def __init__(self, permission_cache: PermissionCache) -> None:
        self._cache = permission_cache

    async def execute(self, user_id: UUID) -> EffectivePermissionsOutput:
        snapshot = await self._cache.get(user_id)
        resolution = snapshot.resolution
        return EffectivePermissionsOutput(
            user_id=snapshot.user_id,
            username=snapshot.username,
            permissions=list(resolution.effective),
            statistics=PermissionStatistics(
                from_roles=resolution.from_roles,
                from_direct_grants=resolution.from_direct_grants,
                total_unique=len(resolution.effective_ids),
            ),
        )
