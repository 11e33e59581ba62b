"""Role permission link resources."""

import falcon.asgi

from gatekeeper.application.services import PermissionAuthorizer
from gatekeeper.application.use_cases.role.attach_permission import AttachRolePermissionUseCase
from gatekeeper.application.use_cases.role.detach_permission import DetachRolePermissionUseCase
from gatekeeper.domain.exceptions import NotFound, ValidationError
from gatekeeper.domain.value_objects import SystemPermission
from gatekeeper.interfaces.api.guard import authorize, parse_uuid, read_body


class RolePermissionsResource:
    """POST /v1/roles/{role_id}/permissions - attach a permission."""

    def __init__(
        self,
        authorizer: PermissionAuthorizer,
        attach: AttachRolePermissionUseCase,
    ) -> None:
        self._authorizer = authorizer
        self._attach = attach

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        actor = await authorize(req, resp, self._authorizer, SystemPermission.UPDATE_ROLE)
        if not actor:
            return
        rid = parse_uuid(role_id, "role ID", resp)
        if rid is None:
            return
        body = await read_body(req, resp)
        if body is None:
            return
        if "permission_id" not in body:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Missing required field: 'permission_id'"}
            return
        pid = parse_uuid(body["permission_id"], "permission ID", resp)
        if pid is None:
            return

        try:
            added = await self._attach.execute(actor.user_id, rid, pid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        resp.media = {"role_id": str(rid), "permission_id": str(pid), "added": added}
        resp.status = falcon.HTTP_201


class RolePermissionResource:
    """DELETE /v1/roles/{role_id}/permissions/{permission_id} - detach a permission."""

    def __init__(
        self,
        authorizer: PermissionAuthorizer,
        detach: DetachRolePermissionUseCase,
    ) -> None:
        self._authorizer = authorizer
        self._detach = detach

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: str,
        permission_id: str,
    ) -> None:
        actor = await authorize(req, resp, self._authorizer, SystemPermission.UPDATE_ROLE)
        if not actor:
            return
        rid = parse_uuid(role_id, "role ID", resp)
        if rid is None:
            return
        pid = parse_uuid(permission_id, "permission ID", resp)
        if pid is None:
            return

        try:
            await self._detach.execute(actor.user_id, rid, pid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.status = falcon.HTTP_204
