"""Deny permission use case."""

from uuid import UUID

from gatekeeper.application import audit
from gatekeeper.application.services import PermissionCache
from gatekeeper.application.use_cases.permission.override_writer import (
    ensure_slot_exists,
    supersede,
)
from gatekeeper.domain.entities import PermissionOverride


class DenyPermissionUseCase:
    """Take a permission away from a user even if a role provides it."""

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
        reason: str | None = None,
    ) -> PermissionOverride:
        """Supersede any active override of the slot with a Deny."""
        async with self._uow_factory() as uow:
            await ensure_slot_exists(uow, user_id, permission_id)
            override = PermissionOverride.deny(user_id, permission_id, actor_id, reason)
            superseded = await supersede(uow, override)

        await self._cache.invalidate(user_id)
        audit.record(
            "permission.deny",
            actor_id,
            user=user_id,
            permission=permission_id,
            superseded=superseded.id if superseded else None,
            reason=override.reason,
        )
        return override
