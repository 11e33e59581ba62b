"""PostgreSQL permission catalog repository."""

from uuid import UUID

from psycopg import AsyncConnection

from gatekeeper.domain.entities import Permission

_COLUMNS = "id, name, resource, action, description"


def _row_to_permission(r: tuple) -> Permission:
    return Permission(id=r[0], name=r[1], resource=r[2], action=r[3], description=r[4])


class PostgresPermissionRepository:
    """Permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        """Get permission by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE id = %s",
            (permission_id,),
        )
        r = await cur.fetchone()
        return _row_to_permission(r) if r else None

    async def list_all(self) -> list[Permission]:
        """List the whole catalog."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission ORDER BY resource, action"
        )
        rows = await cur.fetchall()
        return [_row_to_permission(r) for r in rows]
