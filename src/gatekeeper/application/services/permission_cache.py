"""Per-user permission cache.

Stores the resolved snapshot of each user for a fixed TTL. Every mutation of a
user's roles or overrides must call `invalidate` after its transaction commits.
A broken backend never fails a read: the snapshot is recomputed and returned
uncached, and a failed invalidation leaves staleness bounded by the TTL.

A load that is still resolving when `invalidate` runs for the same user is not
stored. This holds within one process; with a shared backend, a load in another
process can still store a pre-write snapshot, stale for at most the TTL.
"""

import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from uuid import UUID

from gatekeeper.application.dto.permission_snapshot import PermissionSnapshot
from gatekeeper.application.ports import CacheBackend, CacheError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60

SnapshotLoader = Callable[[UUID], Awaitable[PermissionSnapshot]]


class _Load:
    """One in-flight resolution; marked stale by a concurrent invalidate."""

    __slots__ = ("stale",)

    def __init__(self) -> None:
        self.stale = False


class PermissionCache:
    """Time-bounded memoization of resolved permissions, keyed per user."""

    def __init__(
        self,
        backend: CacheBackend,
        loader: SnapshotLoader,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        prefix: str = "gatekeeper",
    ) -> None:
        self._backend = backend
        self._loader = loader
        self._ttl = ttl_seconds
        self._prefix = prefix
        self._loads: dict[UUID, list[_Load]] = {}

    def permissions_key(self, user_id: UUID) -> str:
        return f"{self._prefix}:user_perms:{user_id}"

    def roles_key(self, user_id: UUID) -> str:
        return f"{self._prefix}:user_roles:{user_id}"

    async def get(self, user_id: UUID) -> PermissionSnapshot:
        """Return the cached snapshot, resolving and storing it on a miss."""
        key = self.permissions_key(user_id)
        raw = await self._read(user_id, key)
        if raw is not None:
            try:
                snapshot = PermissionSnapshot.from_json(raw)
            except (ValueError, KeyError) as e:
                logger.warning("Discarding unreadable cache entry %s: %s", key, e)
            else:
                logger.debug("Permission cache HIT for user %s", user_id)
                return snapshot

        logger.debug("Permission cache MISS for user %s, resolving from stores", user_id)
        load = _Load()
        self._loads.setdefault(user_id, []).append(load)
        try:
            snapshot = await self._loader(user_id)
        finally:
            pending = self._loads[user_id]
            pending.remove(load)
            if not pending:
                del self._loads[user_id]

        if load.stale:
            logger.debug("User %s invalidated while resolving, result not cached", user_id)
            return snapshot
        try:
            await self._backend.set(key, snapshot.to_json(), self._ttl)
            await self._backend.set(
                self.roles_key(user_id), json.dumps(snapshot.role_names), self._ttl
            )
        except CacheError as e:
            logger.warning("Permission cache write failed for user %s: %s", user_id, e)
        return snapshot

    async def get_role_names(self, user_id: UUID) -> list[str]:
        """Names of the roles assigned to the user."""
        key = self.roles_key(user_id)
        raw = await self._read(user_id, key)
        if raw is not None:
            try:
                names = json.loads(raw)
            except ValueError as e:
                logger.warning("Discarding unreadable cache entry %s: %s", key, e)
            else:
                if isinstance(names, list):
                    logger.debug("Roles cache HIT for user %s", user_id)
                    return names
                logger.warning("Discarding unreadable cache entry %s: not a list", key)
        snapshot = await self.get(user_id)
        return snapshot.role_names

    async def invalidate(self, user_id: UUID) -> None:
        """Drop any cached entry for the user. Idempotent."""
        for load in self._loads.get(user_id, ()):
            load.stale = True
        try:
            await self._backend.delete(self.permissions_key(user_id), self.roles_key(user_id))
        except CacheError as e:
            logger.warning(
                "Cache invalidation failed for user %s, stale for up to %ss: %s",
                user_id,
                self._ttl,
                e,
            )
            return
        logger.info("Cache invalidated for user %s", user_id)

    async def invalidate_many(self, user_ids: Iterable[UUID]) -> None:
        """Invalidate each user in turn (role structure changes)."""
        for user_id in user_ids:
            await self.invalidate(user_id)

    async def _read(self, user_id: UUID, key: str) -> str | None:
        try:
            return await self._backend.get(key)
        except CacheError as e:
            logger.warning("Permission cache read failed for user %s: %s", user_id, e)
            return None
