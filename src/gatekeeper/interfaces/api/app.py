"""Falcon ASGI application."""

import logging
from dataclasses import dataclass

import falcon.asgi
from falcon.asgi import App

from gatekeeper.interfaces.api.resources.health import HealthResource
from gatekeeper.interfaces.api.resources.role_permissions import (
    RolePermissionResource,
    RolePermissionsResource,
)
from gatekeeper.interfaces.api.resources.user_permissions import (
    DenyPermissionResource,
    EffectivePermissionsResource,
    GrantPermissionResource,
    MissingPermissionsResource,
    OverrideHistoryResource,
    PermissionDetailsResource,
    PermissionOverridesResource,
    RevokePermissionResource,
)
from gatekeeper.interfaces.api.resources.user_roles import UserRoleResource, UserRolesResource

logger = logging.getLogger(__name__)


@dataclass
class Resources:
    """Every routed resource, built by the composition root."""

    health: HealthResource
    effective: EffectivePermissionsResource
    missing: MissingPermissionsResource
    details: PermissionDetailsResource
    overrides: PermissionOverridesResource
    history: OverrideHistoryResource
    grant: GrantPermissionResource
    deny: DenyPermissionResource
    revoke: RevokePermissionResource
    user_roles: UserRolesResource
    user_role: UserRoleResource
    role_permissions: RolePermissionsResource
    role_permission: RolePermissionResource


async def handle_unexpected(req, resp, ex, params) -> None:
    """Log unhandled exceptions with traceback and answer 500."""
    logger.exception("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"error": "Internal server error"}


def create_app(resources: Resources, middleware: list | None = None) -> App:
    """Create Falcon ASGI app with routes."""
    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, handle_unexpected)

    app.add_route("/v1/health", resources.health)
    app.add_route("/v1/health/ready", resources.health, suffix="ready")

    users = "/v1/users/{user_id}"
    app.add_route(f"{users}/permissions/effective", resources.effective)
    app.add_route(f"{users}/permissions/missing", resources.missing)
    app.add_route(f"{users}/permissions/details", resources.details)
    app.add_route(f"{users}/permissions/overrides", resources.overrides)
    app.add_route(f"{users}/permissions/grant", resources.grant)
    app.add_route(f"{users}/permissions/deny", resources.deny)
    app.add_route(f"{users}/permissions/{{permission_id}}", resources.revoke)
    app.add_route(f"{users}/permissions/{{permission_id}}/history", resources.history)
    app.add_route(f"{users}/roles", resources.user_roles)
    app.add_route(f"{users}/roles/{{role_id}}", resources.user_role)

    app.add_route("/v1/roles/{role_id}/permissions", resources.role_permissions)
    app.add_route("/v1/roles/{role_id}/permissions/{permission_id}", resources.role_permission)
    return app
