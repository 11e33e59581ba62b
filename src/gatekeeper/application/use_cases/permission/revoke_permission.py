"""Revoke permission override use case."""

from uuid import UUID

from gatekeeper.application import audit
from gatekeeper.application.services import PermissionCache
from gatekeeper.domain.entities import PermissionOverride
from gatekeeper.domain.exceptions import NotFound


class RevokePermissionUseCase:
    """Retire the active override of a slot; roles decide again."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_cache: PermissionCache,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = permission_cache

    async def execute(
        self,
        actor_id: UUID,
        user_id: UUID,
        permission_id: UUID,
    ) -> PermissionOverride:
        """Mark the active row revoked. No replacement row is written."""
        async with self._uow_factory() as uow:
            await uow.overrides.lock_slot(user_id, permission_id)
            existing = await uow.overrides.get_active(user_id, permission_id)
            if not existing:
                raise NotFound("Permission override", f"{user_id}/{permission_id}")
            existing.revoke(actor_id)
            await uow.overrides.mark_revoked(existing)

        await self._cache.invalidate(user_id)
        audit.record("permission.revoke", actor_id, user=user_id, permission=permission_id)
        return existing
