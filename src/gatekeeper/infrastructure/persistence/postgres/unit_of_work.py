"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import errors
from psycopg_pool import AsyncConnectionPool

from gatekeeper.domain.exceptions import Conflict
from gatekeeper.infrastructure.persistence.postgres.override_repository import (
    PostgresOverrideRepository,
)
from gatekeeper.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from gatekeeper.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)
from gatekeeper.infrastructure.persistence.postgres.user_repository import (
    PostgresUserRepository,
)

# Raised when two writers race on the same row or slot.
_CONFLICT_ERRORS = (
    errors.UniqueViolation,
    errors.SerializationFailure,
    errors.DeadlockDetected,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._users = PostgresUserRepository(self._conn)
        self._roles = PostgresRoleRepository(self._conn)
        self._permissions = PostgresPermissionRepository(self._conn)
        self._overrides = PostgresOverrideRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def users(self) -> PostgresUserRepository:
        return self._users

    @property
    def roles(self) -> PostgresRoleRepository:
        return self._roles

    @property
    def permissions(self) -> PostgresPermissionRepository:
        return self._permissions

    @property
    def overrides(self) -> PostgresOverrideRepository:
        return self._overrides

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager).

    Concurrent-write failures from PostgreSQL surface as Conflict after
    the transaction has been rolled back.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        uow = PostgresUnitOfWork(pool)
        try:
            async with uow:
                try:
                    yield uow
                    await uow.commit()
                except BaseException:
                    await uow.rollback()
                    raise
        except _CONFLICT_ERRORS as e:
            raise Conflict(f"Concurrent modification, retry the request ({e.sqlstate})") from e

    return factory
