"""Authorization checks backed by the permission cache."""

from uuid import UUID

from gatekeeper.application.services.permission_cache import PermissionCache
from gatekeeper.domain.exceptions import NotFound


class PermissionAuthorizer:
    """Answers "does this user hold this permission name"."""

    def __init__(self, permission_cache: PermissionCache) -> None:
        self._cache = permission_cache

    async def has_permission(self, user_id: UUID, permission_name: str) -> bool:
        """Unknown and inactive users hold nothing."""
        try:
            snapshot = await self._cache.get(user_id)
        except NotFound:
            return False
        if not snapshot.is_active:
            return False
        return permission_name in snapshot.permission_names
