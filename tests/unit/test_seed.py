"""Unit tests for the catalog seed."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from gatekeeper.infrastructure.persistence.postgres.seed import PERMISSIONS, ROLES, seed


def _conn() -> MagicMock:
    """Connection whose SELECTs return one id per seeded name."""
    permission_ids = {f"{r}.{a}": uuid4() for r, a, _ in PERMISSIONS}
    role_ids = {name: uuid4() for name in ROLES}

    async def execute(sql, params=None):
        cur = MagicMock()
        if sql == "SELECT name, id FROM permission":
            cur.fetchall = AsyncMock(return_value=list(permission_ids.items()))
        elif sql == "SELECT name, id FROM role":
            cur.fetchall = AsyncMock(return_value=list(role_ids.items()))
        return cur

    conn = MagicMock()
    conn.execute = AsyncMock(side_effect=execute)
    conn.commit = AsyncMock()
    conn.permission_ids = permission_ids
    conn.role_ids = role_ids
    return conn


def _role_links(conn) -> set[tuple]:
    return {
        c.args[1]
        for c in conn.execute.await_args_list
        if c.args[0].startswith("INSERT INTO role_permission")
    }


def test_catalog_contains_gate_permissions() -> None:
    names = {f"{r}.{a}" for r, a, _ in PERMISSIONS}
    assert {
        "User.ReadPermissions",
        "User.GrantPermission",
        "User.DenyPermission",
        "User.RevokePermission",
        "User.AssignRole",
        "Role.Update",
        "Product.Read",
        "AuditLog.Read",
    } <= names


@pytest.mark.asyncio
async def test_seed_links_roles_and_commits() -> None:
    conn = _conn()
    await seed(conn)

    links = _role_links(conn)
    admin = conn.role_ids["Admin"]
    assert {(admin, pid) for pid in conn.permission_ids.values()} <= links
    assert (conn.role_ids["User"], conn.permission_ids["Product.Read"]) in links
    assert (conn.role_ids["User"], conn.permission_ids["Product.Create"]) not in links
    conn.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_seed_with_admin_user() -> None:
    conn = _conn()
    admin_user = uuid4()
    await seed(conn, admin_user_id=admin_user, admin_username="root")

    params = [c.args[1] for c in conn.execute.await_args_list if len(c.args) > 1]
    assert (admin_user, "root") in params
    assert (admin_user, conn.role_ids["Admin"]) in params
