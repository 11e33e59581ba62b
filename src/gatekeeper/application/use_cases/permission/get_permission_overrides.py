"""Get permission overrides use case."""

from collections.abc import Mapping
from uuid import UUID

from gatekeeper.application.dto.permission_dto import OverrideOutput
from gatekeeper.domain.entities import Permission, PermissionOverride
from gatekeeper.domain.exceptions import NotFound


class GetPermissionOverridesUseCase:
    """Active override rows for a user, newest first."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: UUID) -> list[OverrideOutput]:
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            if not user:
                raise NotFound("User", str(user_id))

            overrides = await uow.overrides.list_active(user_id)
            catalog = {p.id: p for p in await uow.permissions.list_all()}
            usernames = await uow.users.get_usernames({o.assigned_by for o in overrides})

        overrides.sort(key=lambda o: o.assigned_at, reverse=True)
        return [
            to_output(o, catalog[o.permission_id], usernames)
            for o in overrides
            if o.permission_id in catalog
        ]


def to_output(
    override: PermissionOverride,
    permission: Permission,
    usernames: Mapping[UUID, str],
) -> OverrideOutput:
    """Join an override row with its permission and actor names."""
    return OverrideOutput(
        id=override.id,
        permission_id=override.permission_id,
        permission_name=permission.name,
        resource=permission.resource,
        action=permission.action,
        is_granted=override.is_granted,
        reason=override.reason,
        assigned_at=override.assigned_at,
        assigned_by=override.assigned_by,
        assigned_by_username=usernames.get(override.assigned_by),
        revoked_at=override.revoked_at,
        revoked_by=override.revoked_by,
        revoked_by_username=usernames.get(override.revoked_by) if override.revoked_by else None,
    )
