"""Shared write path for Grant and Deny."""

from uuid import UUID

from gatekeeper.application.ports import UnitOfWork
from gatekeeper.domain.entities import PermissionOverride
from gatekeeper.domain.exceptions import NotFound


async def ensure_slot_exists(uow: UnitOfWork, user_id: UUID, permission_id: UUID) -> None:
    """Both ends of the slot must exist before anything is written."""
    if not await uow.users.get_by_id(user_id):
        raise NotFound("User", str(user_id))
    if not await uow.permissions.get_by_id(permission_id):
        raise NotFound("Permission", str(permission_id))


async def supersede(uow: UnitOfWork, override: PermissionOverride) -> PermissionOverride | None:
    """Retire the active row of the slot (if any) and insert `override`.

    Runs inside the caller's transaction with the slot locked, so at most one
    active row is ever visible. Returns the retired row.
    """
    await uow.overrides.lock_slot(override.user_id, override.permission_id)
    existing = await uow.overrides.get_active(override.user_id, override.permission_id)
    if existing:
        existing.revoke(override.assigned_by, now=override.assigned_at)
        await uow.overrides.mark_revoked(existing)
    await uow.overrides.create(override)
    return existing
