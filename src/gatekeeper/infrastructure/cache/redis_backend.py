"""Redis cache backend shared by all API workers."""

import redis.asyncio as aioredis
from redis import RedisError

from gatekeeper.application.ports import CacheError


class RedisCacheBackend:
    """redis.asyncio client; every Redis failure is raised as CacheError."""

    def __init__(self, url: str, client: aioredis.Redis | None = None) -> None:
        self._redis = client or aioredis.from_url(url, decode_responses=True)

    async def get(self, key: str) -> str | None:
        try:
            return await self._redis.get(key)
        except RedisError as e:
            raise CacheError(f"Redis GET failed: {e}") from e

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._redis.setex(key, ttl_seconds, value)
        except RedisError as e:
            raise CacheError(f"Redis SETEX failed: {e}") from e

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self._redis.delete(*keys)
        except RedisError as e:
            raise CacheError(f"Redis DEL failed: {e}") from e

    async def close(self) -> None:
        await self._redis.aclose()
