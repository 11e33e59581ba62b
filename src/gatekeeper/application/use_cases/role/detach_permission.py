"""Detach permission from role use case."""

from uuid import UUID

from gatekeeper.application import audit
from gatekeeper.application.services import PermissionCache
from gatekeeper.domain.exceptions import NotFound, ValidationError


class DetachRolePermissionUseCase:
    """Unlink a permission from a role and invalidate every member of the role."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_cache: PermissionCache,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = permission_cache

    async def execute(self, actor_id: UUID, role_id: UUID, permission_id: UUID) -> None:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", str(role_id))
            if role.is_system_role:
                raise ValidationError(f"System role {role.name} cannot be modified")
            if not await uow.roles.remove_permission(role_id, permission_id):
                raise NotFound("Role permission", f"{role_id}/{permission_id}")
            members = await uow.roles.list_member_ids(role_id)

        await self._cache.invalidate_many(members)
        audit.record("role.detach_permission", actor_id, role=role_id, permission=permission_id)
