"""Cache backend port - key/value store with per-entry TTL."""

from typing import Protocol


class CacheError(Exception):
    """Cache backend is unreachable or failed; callers fall back to the stores."""

    pass


class CacheBackend(Protocol):
    """Concurrent-safe string key/value store."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, *keys: str) -> None: ...
