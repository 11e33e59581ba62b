"""Remove role from user use case."""

from uuid import UUID

from gatekeeper.application import audit
from gatekeeper.application.services import PermissionCache
from gatekeeper.domain.exceptions import NotFound


class RemoveRoleUseCase:
    """Drop a role membership."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_cache: PermissionCache,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = permission_cache

    async def execute(self, actor_id: UUID, user_id: UUID, role_id: UUID) -> None:
        async with self._uow_factory() as uow:
            removed = await uow.users.remove_role(user_id, role_id)
            if not removed:
                raise NotFound("User role", f"{user_id}/{role_id}")

        await self._cache.invalidate(user_id)
        audit.record("role.remove", actor_id, user=user_id, role=role_id)
