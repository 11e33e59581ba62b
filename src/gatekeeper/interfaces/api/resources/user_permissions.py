"""User permission API resources - views and overrides."""

import falcon.asgi

from gatekeeper.application.services import PermissionAuthorizer
from gatekeeper.application.use_cases.permission.deny_permission import DenyPermissionUseCase
from gatekeeper.application.use_cases.permission.get_effective_permissions import (
    GetEffectivePermissionsUseCase,
)
from gatekeeper.application.use_cases.permission.get_missing_permissions import (
    GetMissingPermissionsUseCase,
)
from gatekeeper.application.use_cases.permission.get_override_history import (
    GetOverrideHistoryUseCase,
)
from gatekeeper.application.use_cases.permission.get_permission_details import (
    GetPermissionDetailsUseCase,
)
from gatekeeper.application.use_cases.permission.get_permission_overrides import (
    GetPermissionOverridesUseCase,
)
from gatekeeper.application.use_cases.permission.grant_permission import GrantPermissionUseCase
from gatekeeper.application.use_cases.permission.revoke_permission import (
    RevokePermissionUseCase,
)
from gatekeeper.domain.exceptions import Conflict, NotFound, ValidationError
from gatekeeper.domain.value_objects import SystemPermission
from gatekeeper.interfaces.api.guard import authorize, parse_uuid, read_body
from gatekeeper.interfaces.api.resources.serializers import (
    effective_to_dict,
    override_output_to_dict,
    override_to_dict,
    permission_to_dict,
    provenance_to_dict,
)


class EffectivePermissionsResource:
    """GET /v1/users/{user_id}/permissions/effective"""

    def __init__(
        self,
        authorizer: PermissionAuthorizer,
        get_effective: GetEffectivePermissionsUseCase,
    ) -> None:
        self._authorizer = authorizer
        self._get_effective = get_effective

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        if not await authorize(req, resp, self._authorizer, SystemPermission.READ_PERMISSIONS):
            return
        uid = parse_uuid(user_id, "user ID", resp)
        if uid is None:
            return

        try:
            result = await self._get_effective.execute(uid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return

        resp.media = {
            "user_id": str(result.user_id),
            "username": result.username,
            "permissions": [effective_to_dict(p) for p in result.permissions],
            "statistics": {
                "from_roles": result.statistics.from_roles,
                "from_direct_grants": result.statistics.from_direct_grants,
                "total_unique": result.statistics.total_unique,
            },
        }
        resp.status = falcon.HTTP_200


class MissingPermissionsResource:
    """GET /v1/users/{user_id}/permissions/missing"""

    def __init__(
        self,
        authorizer: PermissionAuthorizer,
        get_missing: GetMissingPermissionsUseCase,
    ) -> None:
        self._authorizer = authorizer
        self._get_missing = get_missing

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        if not await authorize(req, resp, self._authorizer, SystemPermission.READ_PERMISSIONS):
            return
        uid = parse_uuid(user_id, "user ID", resp)
        if uid is None:
            return

        try:
            result = await self._get_missing.execute(uid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return

        resp.media = {
            "user_id": str(result.user_id),
            "username": result.username,
            "permissions": [permission_to_dict(p) for p in result.permissions],
            "statistics": {
                "total_permissions": result.statistics.total_permissions,
                "user_has_permissions": result.statistics.user_has_permissions,
                "missing_permissions": result.statistics.missing_permissions,
            },
        }
        resp.status = falcon.HTTP_200


class PermissionDetailsResource:
    """GET /v1/users/{user_id}/permissions/details"""

    def __init__(
        self,
        authorizer: PermissionAuthorizer,
        get_details: GetPermissionDetailsUseCase,
    ) -> None:
        self._authorizer = authorizer
        self._get_details = get_details

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        if not await authorize(req, resp, self._authorizer, SystemPermission.READ_PERMISSIONS):
            return
        uid = parse_uuid(user_id, "user ID", resp)
        if uid is None:
            return

        try:
            result = await self._get_details.execute(uid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return

        resp.media = {
            "user_id": str(result.user_id),
            "username": result.username,
            "permissions": [provenance_to_dict(p) for p in result.permissions],
        }
        resp.status = falcon.HTTP_200


class PermissionOverridesResource:
    """GET /v1/users/{user_id}/permissions/overrides - active rows."""

    def __init__(
        self,
        authorizer: PermissionAuthorizer,
        get_overrides: GetPermissionOverridesUseCase,
    ) -> None:
        self._authorizer = authorizer
        self._get_overrides = get_overrides

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        if not await authorize(req, resp, self._authorizer, SystemPermission.READ_PERMISSIONS):
            return
        uid = parse_uuid(user_id, "user ID", resp)
        if uid is None:
            return

        try:
            overrides = await self._get_overrides.execute(uid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return

        resp.media = {"items": [override_output_to_dict(o) for o in overrides]}
        resp.status = falcon.HTTP_200


class OverrideHistoryResource:
    """GET /v1/users/{user_id}/permissions/{permission_id}/history"""

    def __init__(
        self,
        authorizer: PermissionAuthorizer,
        get_history: GetOverrideHistoryUseCase,
    ) -> None:
        self._authorizer = authorizer
        self._get_history = get_history

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        user_id: str,
        permission_id: str,
    ) -> None:
        if not await authorize(req, resp, self._authorizer, SystemPermission.READ_PERMISSIONS):
            return
        uid = parse_uuid(user_id, "user ID", resp)
        if uid is None:
            return
        pid = parse_uuid(permission_id, "permission ID", resp)
        if pid is None:
            return

        try:
            history = await self._get_history.execute(uid, pid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return

        resp.media = {"items": [override_output_to_dict(o) for o in history]}
        resp.status = falcon.HTTP_200


class _OverrideWriteResource:
    """POST body {permission_id, reason} -> 201 with the new override row."""

    required_permission: str

    def __init__(self, authorizer: PermissionAuthorizer, use_case) -> None:
        self._authorizer = authorizer
        self._use_case = use_case

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        actor = await authorize(req, resp, self._authorizer, self.required_permission)
        if not actor:
            return
        uid = parse_uuid(user_id, "user ID", resp)
        if uid is None:
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
            override = await self._use_case.execute(actor.user_id, uid, pid, body.get("reason"))
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        except Conflict as e:
            resp.status = falcon.HTTP_409
            resp.media = {"error": str(e)}
            return

        resp.media = override_to_dict(override)
        resp.status = falcon.HTTP_201


class GrantPermissionResource(_OverrideWriteResource):
    """POST /v1/users/{user_id}/permissions/grant"""

    required_permission = SystemPermission.GRANT_PERMISSION

    def __init__(self, authorizer: PermissionAuthorizer, grant: GrantPermissionUseCase) -> None:
        super().__init__(authorizer, grant)


class DenyPermissionResource(_OverrideWriteResource):
    """POST /v1/users/{user_id}/permissions/deny"""

    required_permission = SystemPermission.DENY_PERMISSION

    def __init__(self, authorizer: PermissionAuthorizer, deny: DenyPermissionUseCase) -> None:
        super().__init__(authorizer, deny)


class RevokePermissionResource:
    """DELETE /v1/users/{user_id}/permissions/{permission_id} - remove the active override."""

    def __init__(
        self,
        authorizer: PermissionAuthorizer,
        revoke: RevokePermissionUseCase,
    ) -> None:
        self._authorizer = authorizer
        self._revoke = revoke

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        user_id: str,
        permission_id: str,
    ) -> None:
        actor = await authorize(req, resp, self._authorizer, SystemPermission.REVOKE_PERMISSION)
        if not actor:
            return
        uid = parse_uuid(user_id, "user ID", resp)
        if uid is None:
            return
        pid = parse_uuid(permission_id, "permission ID", resp)
        if pid is None:
            return

        try:
            await self._revoke.execute(actor.user_id, uid, pid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        except Conflict as e:
            resp.status = falcon.HTTP_409
            resp.media = {"error": str(e)}
            return
        resp.status = falcon.HTTP_204
