"""Resolve user permissions use case - the cache-miss path."""

from datetime import UTC, datetime
from uuid import UUID

from gatekeeper.application.dto.permission_snapshot import PermissionSnapshot
from gatekeeper.domain.exceptions import NotFound
from gatekeeper.domain.services import RolePermissions, resolve_permissions


class ResolveUserPermissionsUseCase:
    """Read roles, overrides and catalog, then run the resolver."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: UUID) -> PermissionSnapshot:
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            if not user:
                raise NotFound("User", str(user_id))

            roles = await uow.users.list_roles(user_id)
            role_permissions = [
                RolePermissions(
                    role=role,
                    permission_ids=frozenset(await uow.roles.get_permission_ids(role.id)),
                )
                for role in roles
            ]
            active_overrides = await uow.overrides.list_active(user_id)
            all_permissions = await uow.permissions.list_all()
            usernames = await uow.users.get_usernames(
                {o.assigned_by for o in active_overrides}
            )

        resolution = resolve_permissions(
            all_permissions, role_permissions, active_overrides, usernames
        )
        return PermissionSnapshot(
            user_id=user.id,
            username=user.username,
            is_active=user.is_active,
            resolution=resolution,
            computed_at=datetime.now(UTC),
        )
