"""PostgreSQL user repository."""

from uuid import UUID

from psycopg import AsyncConnection

from gatekeeper.domain.entities import Role, User


class PostgresUserRepository:
    """User and role membership repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get user by id."""
        cur = await self._conn.execute(
            "SELECT id, username, is_active FROM app_user WHERE id = %s",
            (user_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return User(id=r[0], username=r[1], is_active=r[2])

    async def get_usernames(self, user_ids: set[UUID]) -> dict[UUID, str]:
        """Map ids to usernames; unknown ids are left out."""
        if not user_ids:
            return {}
        cur = await self._conn.execute(
            "SELECT id, username FROM app_user WHERE id = ANY(%s)",
            (list(user_ids),),
        )
        rows = await cur.fetchall()
        return {r[0]: r[1] for r in rows}

    async def list_roles(self, user_id: UUID) -> list[Role]:
        """Roles currently assigned to the user."""
        cur = await self._conn.execute(
            "SELECT r.id, r.name, r.description, r.is_active, r.is_system_role "
            "FROM role r JOIN user_role ur ON ur.role_id = r.id "
            "WHERE ur.user_id = %s ORDER BY r.name",
            (user_id,),
        )
        rows = await cur.fetchall()
        return [
            Role(id=r[0], name=r[1], description=r[2], is_active=r[3], is_system_role=r[4])
            for r in rows
        ]

    async def add_role(self, user_id: UUID, role_id: UUID, assigned_by: UUID | None) -> bool:
        """Add membership. False if the user already had the role."""
        cur = await self._conn.execute(
            "INSERT INTO user_role (user_id, role_id, assigned_by) VALUES (%s, %s, %s) "
            "ON CONFLICT DO NOTHING",
            (user_id, role_id, assigned_by),
        )
        return cur.rowcount > 0

    async def remove_role(self, user_id: UUID, role_id: UUID) -> bool:
        """Remove membership. False if there was none."""
        cur = await self._conn.execute(
            "DELETE FROM user_role WHERE user_id = %s AND role_id = %s",
            (user_id, role_id),
        )
        return cur.rowcount > 0
