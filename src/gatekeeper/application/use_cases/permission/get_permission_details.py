"""Get permission details use case."""

from uuid import UUID

from gatekeeper.application.dto.permission_dto import PermissionDetailsOutput
from gatekeeper.application.services import PermissionCache


class GetPermissionDetailsUseCase:
    """Provenance view: Role, Granted and Denied entries for the user."""

    def __init__(self, permission_cache: PermissionCache) -> None:
        self._cache = permission_cache

    async def execute(self, user_id: UUID) -> PermissionDetailsOutput:
        snapshot = await self._cache.get(user_id)
        return PermissionDetailsOutput(
            user_id=snapshot.user_id,
            username=snapshot.username,
            permissions=list(snapshot.resolution.provenance),
        )
