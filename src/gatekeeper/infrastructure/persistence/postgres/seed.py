"""Idempotent seed of the permission catalog and built-in roles."""

import logging
from uuid import UUID, uuid4

from psycopg import AsyncConnection

from gatekeeper.domain.value_objects import ADMIN_ROLE

logger = logging.getLogger(__name__)

# (resource, action, description)
PERMISSIONS: list[tuple[str, str, str]] = [
    ("Product", "Read", "View products"),
    ("Product", "Create", "Create products"),
    ("Product", "Update", "Edit products"),
    ("Product", "Delete", "Delete products"),
    ("Category", "Read", "View categories"),
    ("Category", "Create", "Create categories"),
    ("Category", "Update", "Edit categories"),
    ("Category", "Delete", "Delete categories"),
    ("User", "Read", "View users"),
    ("User", "Create", "Create users"),
    ("User", "Update", "Edit users"),
    ("User", "Delete", "Delete users"),
    ("User", "ReadPermissions", "View a user's effective permissions"),
    ("User", "GrantPermission", "Grant a permission directly to a user"),
    ("User", "DenyPermission", "Deny a permission to a user"),
    ("User", "RevokePermission", "Remove a user's permission override"),
    ("User", "AssignRole", "Add or remove a user's roles"),
    ("Role", "Read", "View roles"),
    ("Role", "Create", "Create roles"),
    ("Role", "Update", "Edit roles and their permissions"),
    ("Role", "Delete", "Delete roles"),
    ("Permission", "Read", "View the permission catalog"),
    ("AuditLog", "Read", "View audit logs"),
]

# role name -> (description, is_system_role, permission names); None means all
ROLES: dict[str, tuple[str, bool, list[str] | None]] = {
    ADMIN_ROLE: ("Full access", True, None),
    "User": ("Standard user", True, ["Product.Read"]),
    "Manager": (
        "Manages the product catalog",
        False,
        ["Product.Read", "Product.Create", "Product.Update", "Product.Delete"],
    ),
}


async def _upsert_permissions(conn: AsyncConnection) -> dict[str, UUID]:
    for resource, action, description in PERMISSIONS:
        await conn.execute(
            "INSERT INTO permission (id, name, resource, action, description) "
            "VALUES (%s, %s, %s, %s, %s) ON CONFLICT (name) DO NOTHING",
            (uuid4(), f"{resource}.{action}", resource, action, description),
        )
    cur = await conn.execute("SELECT name, id FROM permission")
    return {r[0]: r[1] for r in await cur.fetchall()}


async def _upsert_roles(conn: AsyncConnection, permission_ids: dict[str, UUID]) -> dict[str, UUID]:
    for name, (description, is_system, _) in ROLES.items():
        await conn.execute(
            "INSERT INTO role (id, name, description, is_system_role) "
            "VALUES (%s, %s, %s, %s) ON CONFLICT (name) DO NOTHING",
            (uuid4(), name, description, is_system),
        )
    cur = await conn.execute("SELECT name, id FROM role")
    role_ids = {r[0]: r[1] for r in await cur.fetchall()}

    for name, (_, _, names) in ROLES.items():
        wanted = permission_ids.values() if names is None else [permission_ids[n] for n in names]
        for permission_id in wanted:
            await conn.execute(
                "INSERT INTO role_permission (role_id, permission_id) VALUES (%s, %s) "
                "ON CONFLICT DO NOTHING",
                (role_ids[name], permission_id),
            )
    return role_ids


async def seed(
    conn: AsyncConnection,
    admin_user_id: UUID | None = None,
    admin_username: str = "admin",
) -> None:
    """Insert catalog, roles and links that are missing; commits once.

    With admin_user_id, the user is created if absent and given the Admin role.
    """
    permission_ids = await _upsert_permissions(conn)
    role_ids = await _upsert_roles(conn, permission_ids)

    if admin_user_id is not None:
        await conn.execute(
            "INSERT INTO app_user (id, username) VALUES (%s, %s) ON CONFLICT DO NOTHING",
            (admin_user_id, admin_username),
        )
        await conn.execute(
            "INSERT INTO user_role (user_id, role_id) VALUES (%s, %s) ON CONFLICT DO NOTHING",
            (admin_user_id, role_ids[ADMIN_ROLE]),
        )
    await conn.commit()
    logger.info(
        "Seeded %d permissions and %d roles%s",
        len(permission_ids),
        len(role_ids),
        f", admin user {admin_user_id}" if admin_user_id else "",
    )
