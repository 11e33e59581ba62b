"""User role membership resources."""

import falcon.asgi

from gatekeeper.application.services import PermissionAuthorizer, PermissionCache
from gatekeeper.application.use_cases.role.assign_role import AssignRoleUseCase
from gatekeeper.application.use_cases.role.remove_role import RemoveRoleUseCase
from gatekeeper.domain.exceptions import Conflict, NotFound
from gatekeeper.domain.value_objects import SystemPermission
from gatekeeper.interfaces.api.guard import authorize, parse_uuid, read_body


class UserRolesResource:
    """GET /v1/users/{user_id}/roles - role names; POST - assign a role."""

    def __init__(
        self,
        authorizer: PermissionAuthorizer,
        assign_role: AssignRoleUseCase,
        permission_cache: PermissionCache,
    ) -> None:
        self._authorizer = authorizer
        self._assign = assign_role
        self._cache = permission_cache

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        if not await authorize(req, resp, self._authorizer, SystemPermission.READ_PERMISSIONS):
            return
        uid = parse_uuid(user_id, "user ID", resp)
        if uid is None:
            return
        try:
            roles = await self._cache.get_role_names(uid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        resp.media = {"user_id": str(uid), "roles": roles}

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        actor = await authorize(req, resp, self._authorizer, SystemPermission.ASSIGN_ROLE)
        if not actor:
            return
        uid = parse_uuid(user_id, "user ID", resp)
        if uid is None:
            return
        body = await read_body(req, resp)
        if body is None:
            return
        if "role_id" not in body:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Missing required field: 'role_id'"}
            return
        rid = parse_uuid(body["role_id"], "role ID", resp)
        if rid is None:
            return

        try:
            added = await self._assign.execute(actor.user_id, uid, rid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        except Conflict as e:
            resp.status = falcon.HTTP_409
            resp.media = {"error": str(e)}
            return

        resp.media = {"user_id": str(uid), "role_id": str(rid), "added": added}
        resp.status = falcon.HTTP_201


class UserRoleResource:
    """DELETE /v1/users/{user_id}/roles/{role_id} - remove a role."""

    def __init__(self, authorizer: PermissionAuthorizer, remove_role: RemoveRoleUseCase) -> None:
        self._authorizer = authorizer
        self._remove = remove_role

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        user_id: str,
        role_id: str,
    ) -> None:
        actor = await authorize(req, resp, self._authorizer, SystemPermission.ASSIGN_ROLE)
        if not actor:
            return
        uid = parse_uuid(user_id, "user ID", resp)
        if uid is None:
            return
        rid = parse_uuid(role_id, "role ID", resp)
        if rid is None:
            return

        try:
            await self._remove.execute(actor.user_id, uid, rid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        resp.status = falcon.HTTP_204
