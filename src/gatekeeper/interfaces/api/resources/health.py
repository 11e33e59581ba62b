"""Health check endpoints."""

import logging

import falcon.asgi

from gatekeeper.application.ports import CacheError

logger = logging.getLogger(__name__)


class HealthResource:
    """Liveness and readiness endpoints."""

    def __init__(self, pool=None, cache_backend=None) -> None:
        self._pool = pool
        self._cache_backend = cache_backend

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - database reachable; cache state is reported only."""
        checks = {"database": "skipped", "cache": "skipped"}
        ready = True
        if self._pool is not None:
            try:
                async with self._pool.connection() as conn:
                    await conn.execute("SELECT 1")
                checks["database"] = "ok"
            except Exception as e:
                logger.warning("Readiness: database check failed: %s", e)
                checks["database"] = "unavailable"
                ready = False
        if self._cache_backend is not None:
            try:
                await self._cache_backend.get("gatekeeper:health")
                checks["cache"] = "ok"
            except CacheError as e:
                logger.warning("Readiness: cache check failed: %s", e)
                checks["cache"] = "degraded"
        resp.media = {"status": "ready" if ready else "unavailable", "checks": checks}
        resp.status = falcon.HTTP_200 if ready else falcon.HTTP_503
