"""Assign role to user use case."""

from uuid import UUID

from gatekeeper.application import audit
from gatekeeper.application.services import PermissionCache
from gatekeeper.domain.exceptions import NotFound


class AssignRoleUseCase:
    """Add a role membership. Assigning a role the user already has is a no-op."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_cache: PermissionCache,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = permission_cache

    async def execute(self, actor_id: UUID, user_id: UUID, role_id: UUID) -> bool:
        """Returns True when a new membership was created."""
        async with self._uow_factory() as uow:
            if not await uow.users.get_by_id(user_id):
                raise NotFound("User", str(user_id))
            if not await uow.roles.get_by_id(role_id):
                raise NotFound("Role", str(role_id))
            added = await uow.users.add_role(user_id, role_id, actor_id)

        if added:
            await self._cache.invalidate(user_id)
            audit.record("role.assign", actor_id, user=user_id, role=role_id)
        return added
