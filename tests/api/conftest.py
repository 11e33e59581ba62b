"""Fixtures for API tests."""

from uuid import UUID

import pytest
from falcon.testing import TestClient

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
from gatekeeper.application.use_cases.role.assign_role import AssignRoleUseCase
from gatekeeper.application.use_cases.role.attach_permission import (
    AttachRolePermissionUseCase,
)
from gatekeeper.application.use_cases.role.detach_permission import (
    DetachRolePermissionUseCase,
)
from gatekeeper.application.use_cases.role.remove_role import RemoveRoleUseCase
from gatekeeper.interfaces.api.app import Resources, create_app
from gatekeeper.interfaces.api.middleware.auth import RequestUser
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

from tests.conftest import Seed


class AuthBypassMiddleware:
    """Middleware that sets context.user from the X-Test-User header."""

    async def process_request(self, req, resp):
        user_id = req.get_header("X-Test-User")
        req.context.user = RequestUser(user_id=UUID(user_id)) if user_id else None


@pytest.fixture
def app(uow_factory, permission_cache, authorizer):
    """Falcon ASGI app with every route wired to fakes."""
    cache = permission_cache
    resources = Resources(
        health=HealthResource(),
        effective=EffectivePermissionsResource(authorizer, GetEffectivePermissionsUseCase(cache)),
        missing=MissingPermissionsResource(authorizer, GetMissingPermissionsUseCase(cache)),
        details=PermissionDetailsResource(authorizer, GetPermissionDetailsUseCase(cache)),
        overrides=PermissionOverridesResource(
            authorizer, GetPermissionOverridesUseCase(uow_factory)
        ),
        history=OverrideHistoryResource(authorizer, GetOverrideHistoryUseCase(uow_factory)),
        grant=GrantPermissionResource(authorizer, GrantPermissionUseCase(uow_factory, cache)),
        deny=DenyPermissionResource(authorizer, DenyPermissionUseCase(uow_factory, cache)),
        revoke=RevokePermissionResource(authorizer, RevokePermissionUseCase(uow_factory, cache)),
        user_roles=UserRolesResource(authorizer, AssignRoleUseCase(uow_factory, cache), cache),
        user_role=UserRoleResource(authorizer, RemoveRoleUseCase(uow_factory, cache)),
        role_permissions=RolePermissionsResource(
            authorizer, AttachRolePermissionUseCase(uow_factory, cache)
        ),
        role_permission=RolePermissionResource(
            authorizer, DetachRolePermissionUseCase(uow_factory, cache)
        ),
    )
    return create_app(resources, middleware=[AuthBypassMiddleware()])


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)


@pytest.fixture
def as_admin(seed: Seed) -> dict[str, str]:
    return {"X-Test-User": str(seed.user["admin"])}


@pytest.fixture
def as_alice(seed: Seed) -> dict[str, str]:
    """Manager without any administration permission."""
    return {"X-Test-User": str(seed.user["alice"])}
