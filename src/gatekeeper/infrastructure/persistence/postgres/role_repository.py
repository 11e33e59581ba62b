"""PostgreSQL role repository."""

from uuid import UUID

from psycopg import AsyncConnection

from gatekeeper.domain.entities import Role

_COLUMNS = "id, name, description, is_active, is_system_role"


def _row_to_role(r: tuple) -> Role:
    return Role(id=r[0], name=r[1], description=r[2], is_active=r[3], is_system_role=r[4])


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: UUID) -> Role | None:
        """Get role by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM role WHERE id = %s",
            (role_id,),
        )
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def get_permission_ids(self, role_id: UUID) -> set[UUID]:
        """Permission ids attached to the role."""
        cur = await self._conn.execute(
            "SELECT permission_id FROM role_permission WHERE role_id = %s",
            (role_id,),
        )
        rows = await cur.fetchall()
        return {r[0] for r in rows}

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        """Link permission to role. False if the link already existed."""
        cur = await self._conn.execute(
            "INSERT INTO role_permission (role_id, permission_id) VALUES (%s, %s) "
            "ON CONFLICT DO NOTHING",
            (role_id, permission_id),
        )
        return cur.rowcount > 0

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        """Unlink permission from role. False if there was no link."""
        cur = await self._conn.execute(
            "DELETE FROM role_permission WHERE role_id = %s AND permission_id = %s",
            (role_id, permission_id),
        )
        return cur.rowcount > 0

    async def list_member_ids(self, role_id: UUID) -> list[UUID]:
        """Ids of users holding the role."""
        cur = await self._conn.execute(
            "SELECT user_id FROM user_role WHERE role_id = %s",
            (role_id,),
        )
        rows = await cur.fetchall()
        return [r[0] for r in rows]
