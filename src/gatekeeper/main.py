"""Application entry point and composition root."""

import argparse
import asyncio
import logging
import sys
from uuid import UUID

from gatekeeper import __version__
from gatekeeper.application.services import PermissionAuthorizer, PermissionCache
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
from gatekeeper.application.use_cases.permission.resolve_user_permissions import (
    ResolveUserPermissionsUseCase,
)
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
from gatekeeper.config import Settings, get_settings
from gatekeeper.infrastructure.auth.keycloak_provider import KeycloakProvider
from gatekeeper.infrastructure.cache.memory_backend import InMemoryCacheBackend
from gatekeeper.infrastructure.cache.redis_backend import RedisCacheBackend
from gatekeeper.infrastructure.persistence.postgres.connection import create_pool
from gatekeeper.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from gatekeeper.interfaces.api.app import Resources, create_app
from gatekeeper.interfaces.api.middleware.auth import AuthMiddleware
from gatekeeper.interfaces.api.middleware.cors import CORSMiddleware
from gatekeeper.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
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

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    level = "DEBUG" if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout)


def create_cache_backend(settings: Settings):
    """Redis when configured, otherwise a process-local store."""
    if settings.redis_url:
        logger.info("Permission cache: redis")
        return RedisCacheBackend(settings.redis_url)
    logger.info("Permission cache: in-memory (per process)")
    return InMemoryCacheBackend()


def create_gatekeeper_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings)

    pool = create_pool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("Keycloak client secret not set; bearer tokens are not introspected")

    cache_backend = create_cache_backend(settings)
    resolve = ResolveUserPermissionsUseCase(unit_of_work_factory=uow_factory)
    permission_cache = PermissionCache(
        backend=cache_backend,
        loader=resolve.execute,
        ttl_seconds=settings.permission_cache_ttl_seconds,
        prefix=settings.permission_cache_prefix,
    )
    authorizer = PermissionAuthorizer(permission_cache)

    resources = Resources(
        health=HealthResource(pool, cache_backend),
        effective=EffectivePermissionsResource(
            authorizer, GetEffectivePermissionsUseCase(permission_cache)
        ),
        missing=MissingPermissionsResource(
            authorizer, GetMissingPermissionsUseCase(permission_cache)
        ),
        details=PermissionDetailsResource(
            authorizer, GetPermissionDetailsUseCase(permission_cache)
        ),
        overrides=PermissionOverridesResource(
            authorizer, GetPermissionOverridesUseCase(unit_of_work_factory=uow_factory)
        ),
        history=OverrideHistoryResource(
            authorizer, GetOverrideHistoryUseCase(unit_of_work_factory=uow_factory)
        ),
        grant=GrantPermissionResource(
            authorizer, GrantPermissionUseCase(uow_factory, permission_cache)
        ),
        deny=DenyPermissionResource(
            authorizer, DenyPermissionUseCase(uow_factory, permission_cache)
        ),
        revoke=RevokePermissionResource(
            authorizer, RevokePermissionUseCase(uow_factory, permission_cache)
        ),
        user_roles=UserRolesResource(
            authorizer, AssignRoleUseCase(uow_factory, permission_cache), permission_cache
        ),
        user_role=UserRoleResource(authorizer, RemoveRoleUseCase(uow_factory, permission_cache)),
        role_permissions=RolePermissionsResource(
            authorizer, AttachRolePermissionUseCase(uow_factory, permission_cache)
        ),
        role_permission=RolePermissionResource(
            authorizer, DetachRolePermissionUseCase(uow_factory, permission_cache)
        ),
    )

    cors_origins = [
        o.strip() for o in settings.cors_origins.split(",") if o.strip()
    ]
    return create_app(
        resources,
        middleware=[
            CORSMiddleware(cors_origins),
            PoolLifespanMiddleware(pool, cache_backend),
            AuthMiddleware(
                keycloak,
                allow_uuid_tokens=keycloak is None and settings.environment == "development",
            ),
        ],
    )


def run_server(settings: Settings) -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(
        "gatekeeper.main:create_gatekeeper_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


async def run_seed(settings: Settings, admin_user_id: UUID | None, admin_username: str) -> None:
    """Provision catalog and built-in roles."""
    from psycopg import AsyncConnection

    from gatekeeper.infrastructure.persistence.postgres.seed import seed

    async with await AsyncConnection.connect(settings.database_url) as conn:
        await seed(conn, admin_user_id=admin_user_id, admin_username=admin_username)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(prog="gatekeeper", description=f"Gatekeeper v{__version__}")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("serve", help="Run the HTTP API")
    seed_parser = sub.add_parser("seed", help="Provision permission catalog and built-in roles")
    seed_parser.add_argument(
        "--admin-user-id",
        type=UUID,
        default=None,
        help="Create this user (if missing) and give it the Admin role",
    )
    seed_parser.add_argument("--admin-username", default="admin", help="Username for --admin-user-id")
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.command == "serve":
        run_server(settings)
        return 0

    configure_logging(settings)
    asyncio.run(run_seed(settings, args.admin_user_id, args.admin_username))
    return 0


if __name__ == "__main__":
    sys.exit(main())
