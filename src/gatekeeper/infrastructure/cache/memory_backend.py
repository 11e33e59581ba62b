"""Process-local cache backend."""

import asyncio
import time
from collections.abc import Callable


class InMemoryCacheBackend:
    """Dict-backed store with per-entry expiry on a monotonic clock.

    Entries are only visible to the current process, so with several
    workers an invalidation reaches just the worker that performed it.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        async with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)

    async def delete(self, *keys: str) -> None:
        async with self._lock:
            for key in keys:
                self._entries.pop(key, None)

    async def close(self) -> None:
        async with self._lock:
            self._entries.clear()
