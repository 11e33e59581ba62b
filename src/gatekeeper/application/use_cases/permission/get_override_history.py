"""Get override history use case."""

from uuid import UUID

from gatekeeper.application.dto.permission_dto import OverrideOutput
from gatekeeper.application.use_cases.permission.get_permission_overrides import to_output
from gatekeeper.domain.exceptions import NotFound


class GetOverrideHistoryUseCase:
    """Every stored row for one (user, permission) slot, oldest first."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: UUID, permission_id: UUID) -> list[OverrideOutput]:
        async with self._uow_factory() as uow:
            if not await uow.users.get_by_id(user_id):
                raise NotFound("User", str(user_id))
            permission = await uow.permissions.get_by_id(permission_id)
            if not permission:
                raise NotFound("Permission", str(permission_id))

            rows = await uow.overrides.list_history(user_id, permission_id)
            actors = {o.assigned_by for o in rows} | {o.revoked_by for o in rows if o.revoked_by}
            usernames = await uow.users.get_usernames(actors)

        rows.sort(key=lambda o: o.assigned_at)
        return [to_output(o, permission, usernames) for o in rows]
