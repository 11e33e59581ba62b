"""PostgreSQL permission override repository."""

from uuid import UUID

from psycopg import AsyncConnection

from gatekeeper.domain.entities import PermissionOverride

_COLUMNS = (
    "id, user_id, permission_id, is_granted, reason, "
    "assigned_at, assigned_by, revoked_at, revoked_by"
)


def _row_to_override(r: tuple) -> PermissionOverride:
    return PermissionOverride(
        id=r[0],
        user_id=r[1],
        permission_id=r[2],
        is_granted=r[3],
        reason=r[4],
        assigned_at=r[5],
        assigned_by=r[6],
        revoked_at=r[7],
        revoked_by=r[8],
    )


class PostgresOverrideRepository:
    """Override history repository implementation.

    The partial unique index ux_permission_override_active backs the
    one-active-row-per-slot rule; lock_slot serializes writers on a slot
    for the rest of the transaction.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def lock_slot(self, user_id: UUID, permission_id: UUID) -> None:
        """Take a transaction-scoped advisory lock on the slot."""
        await self._conn.execute(
            "SELECT pg_advisory_xact_lock(hashtextextended(%s, 0))",
            (f"permission_override:{user_id}:{permission_id}",),
        )

    async def get_active(self, user_id: UUID, permission_id: UUID) -> PermissionOverride | None:
        """Active row of the slot, locked for update."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission_override "
            "WHERE user_id = %s AND permission_id = %s AND revoked_at IS NULL "
            "FOR UPDATE",
            (user_id, permission_id),
        )
        r = await cur.fetchone()
        return _row_to_override(r) if r else None

    async def list_active(self, user_id: UUID) -> list[PermissionOverride]:
        """Active rows for user."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission_override "
            "WHERE user_id = %s AND revoked_at IS NULL ORDER BY assigned_at DESC",
            (user_id,),
        )
        rows = await cur.fetchall()
        return [_row_to_override(r) for r in rows]

    async def list_history(self, user_id: UUID, permission_id: UUID) -> list[PermissionOverride]:
        """All rows of the slot, active and retired."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission_override "
            "WHERE user_id = %s AND permission_id = %s ORDER BY assigned_at",
            (user_id, permission_id),
        )
        rows = await cur.fetchall()
        return [_row_to_override(r) for r in rows]

    async def create(self, override: PermissionOverride) -> PermissionOverride:
        """Insert a new row."""
        await self._conn.execute(
            f"INSERT INTO permission_override ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                override.id,
                override.user_id,
                override.permission_id,
                override.is_granted,
                override.reason,
                override.assigned_at,
                override.assigned_by,
                override.revoked_at,
                override.revoked_by,
            ),
        )
        return override

    async def mark_revoked(self, override: PermissionOverride) -> None:
        """Persist revoked_at/revoked_by; the only update a row ever gets."""
        await self._conn.execute(
            "UPDATE permission_override SET revoked_at = %s, revoked_by = %s "
            "WHERE id = %s AND revoked_at IS NULL",
            (override.revoked_at, override.revoked_by, override.id),
        )
