"""Lifespan middleware - opens the pool on startup, releases resources on shutdown."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


class PoolLifespanMiddleware:
    """Opens the connection pool on startup; closes it and the cache backend on shutdown."""

    def __init__(self, pool: AsyncConnectionPool, cache_backend=None) -> None:
        self._pool = pool
        self._cache_backend = cache_backend

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Open pool when ASGI server starts."""
        await self._pool.open()
        logger.info("Database pool opened (min=%d, max=%d)", self._pool.min_size, self._pool.max_size)

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Close pool and cache backend when ASGI server shuts down."""
        await self._pool.close()
        close = getattr(self._cache_backend, "close", None)
        if close is not None:
            await close()
        logger.info("Database pool closed")
