"""Pytest fixtures for Gatekeeper tests."""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from uuid import UUID, uuid4

import pytest

from gatekeeper.application.ports import CacheError
from gatekeeper.application.services import PermissionAuthorizer, PermissionCache
from gatekeeper.application.use_cases.permission.resolve_user_permissions import (
    ResolveUserPermissionsUseCase,
)
from gatekeeper.domain.entities import Permission, PermissionOverride, Role, User
from gatekeeper.domain.exceptions import Conflict
from gatekeeper.infrastructure.cache.memory_backend import InMemoryCacheBackend


# --- Fake database ---


@dataclass
class FakeDatabase:
    """All tables in memory; repositories read it at call time."""

    users: dict[UUID, User] = field(default_factory=dict)
    roles: dict[UUID, Role] = field(default_factory=dict)
    permissions: dict[UUID, Permission] = field(default_factory=dict)
    role_permissions: set[tuple[UUID, UUID]] = field(default_factory=set)
    user_roles: set[tuple[UUID, UUID]] = field(default_factory=set)
    overrides: dict[UUID, PermissionOverride] = field(default_factory=dict)


# --- Fake repositories ---


class FakePermissionRepository:
    """In-memory permission catalog."""

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        return self._db.permissions.get(permission_id)

    async def list_all(self) -> list[Permission]:
        return sorted(self._db.permissions.values(), key=lambda p: (p.resource, p.action))


class FakeRoleRepository:
    """In-memory roles with role_permission links."""

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def add_role(self, role: Role, permission_ids: set[UUID] | None = None) -> Role:
        """Test helper - add role with links."""
        self._db.roles[role.id] = role
        for permission_id in permission_ids or ():
            self._db.role_permissions.add((role.id, permission_id))
        return role

    async def get_by_id(self, role_id: UUID) -> Role | None:
        return self._db.roles.get(role_id)

    async def get_permission_ids(self, role_id: UUID) -> set[UUID]:
        return {p for r, p in self._db.role_permissions if r == role_id}

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        if (role_id, permission_id) in self._db.role_permissions:
            return False
        self._db.role_permissions.add((role_id, permission_id))
        return True

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        if (role_id, permission_id) not in self._db.role_permissions:
            return False
        self._db.role_permissions.discard((role_id, permission_id))
        return True

    async def list_member_ids(self, role_id: UUID) -> list[UUID]:
        return [u for u, r in self._db.user_roles if r == role_id]


class FakeUserRepository:
    """In-memory users with user_role memberships."""

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def add_user(self, user: User, role_ids: set[UUID] | None = None) -> User:
        """Test helper - add user with memberships."""
        self._db.users[user.id] = user
        for role_id in role_ids or ():
            self._db.user_roles.add((user.id, role_id))
        return user

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self._db.users.get(user_id)

    async def get_usernames(self, user_ids: set[UUID]) -> dict[UUID, str]:
        return {u: self._db.users[u].username for u in user_ids if u in self._db.users}

    async def list_roles(self, user_id: UUID) -> list[Role]:
        roles = [self._db.roles[r] for u, r in self._db.user_roles if u == user_id]
        return sorted(roles, key=lambda r: r.name)

    async def add_role(self, user_id: UUID, role_id: UUID, assigned_by: UUID | None) -> bool:
        if (user_id, role_id) in self._db.user_roles:
            return False
        self._db.user_roles.add((user_id, role_id))
        return True

    async def remove_role(self, user_id: UUID, role_id: UUID) -> bool:
        if (user_id, role_id) not in self._db.user_roles:
            return False
        self._db.user_roles.discard((user_id, role_id))
        return True


class FakeOverrideRepository:
    """In-memory override rows; a second active row for a slot is a Conflict."""

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db
        self.locked_slots: list[tuple[UUID, UUID]] = []

    def rows(self, user_id: UUID, permission_id: UUID) -> list[PermissionOverride]:
        """Test helper - stored rows of a slot, oldest first."""
        rows = [
            o
            for o in self._db.overrides.values()
            if o.user_id == user_id and o.permission_id == permission_id
        ]
        return sorted(rows, key=lambda o: o.assigned_at)

    async def lock_slot(self, user_id: UUID, permission_id: UUID) -> None:
        self.locked_slots.append((user_id, permission_id))

    async def get_active(self, user_id: UUID, permission_id: UUID) -> PermissionOverride | None:
        active = [o for o in self.rows(user_id, permission_id) if o.is_active]
        return copy.deepcopy(active[0]) if active else None

    async def list_active(self, user_id: UUID) -> list[PermissionOverride]:
        return [
            copy.deepcopy(o)
            for o in self._db.overrides.values()
            if o.user_id == user_id and o.is_active
        ]

    async def list_history(self, user_id: UUID, permission_id: UUID) -> list[PermissionOverride]:
        return [copy.deepcopy(o) for o in self.rows(user_id, permission_id)]

    async def create(self, override: PermissionOverride) -> PermissionOverride:
        if any(o.is_active for o in self.rows(override.user_id, override.permission_id)):
            raise Conflict("Concurrent modification, retry the request")
        self._db.overrides[override.id] = copy.deepcopy(override)
        return override

    async def mark_revoked(self, override: PermissionOverride) -> None:
        stored = self._db.overrides[override.id]
        if stored.is_active:
            stored.revoked_at = override.revoked_at
            stored.revoked_by = override.revoked_by


class FakeUnitOfWork:
    """In-memory Unit of Work; rollback restores the state seen at begin()."""

    def __init__(self, db: FakeDatabase | None = None) -> None:
        self.db = db or FakeDatabase()
        self.users = FakeUserRepository(self.db)
        self.roles = FakeRoleRepository(self.db)
        self.permissions = FakePermissionRepository(self.db)
        self.overrides = FakeOverrideRepository(self.db)
        self.commits = 0
        self.rollbacks = 0
        self._snapshot: dict | None = None

    def begin(self) -> None:
        self._snapshot = copy.deepcopy(self.db.__dict__)

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot = None

    async def rollback(self) -> None:
        self.rollbacks += 1
        if self._snapshot is not None:
            self.db.__dict__.update(self._snapshot)
            self._snapshot = None


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory sharing one UoW across calls, with commit/rollback semantics."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[FakeUnitOfWork]:
        uow.begin()
        try:
            yield uow
            await uow.commit()
        except BaseException:
            await uow.rollback()
            raise

    return factory


# --- Seed data ---


PERMISSION_NAMES = [
    "Product.Read",
    "Product.Create",
    "Product.Update",
    "Product.Delete",
    "Category.Read",
    "User.ReadPermissions",
    "User.GrantPermission",
    "User.DenyPermission",
    "User.RevokePermission",
    "User.AssignRole",
    "Role.Update",
]


@dataclass
class Seed:
    """Ids of the seeded rows, by name."""

    permission: dict[str, UUID]
    role: dict[str, UUID]
    user: dict[str, UUID]


def seed_uow(uow: FakeUnitOfWork) -> Seed:
    """Catalog, Admin/User/Manager roles and a few users.

    admin: Admin; alice: Manager; bob: no roles; carol: Manager, inactive.
    """
    permission: dict[str, UUID] = {}
    for name in PERMISSION_NAMES:
        resource, action = name.split(".")
        p = Permission(id=uuid4(), name=name, resource=resource, action=action)
        uow.db.permissions[p.id] = p
        permission[name] = p.id

    product = {permission[n] for n in PERMISSION_NAMES if n.startswith("Product.")}
    roles = [
        (Role(id=uuid4(), name="Admin", is_system_role=True), set(permission.values())),
        (Role(id=uuid4(), name="User", is_system_role=True), {permission["Product.Read"]}),
        (Role(id=uuid4(), name="Manager"), product),
    ]
    role: dict[str, UUID] = {}
    for r, ids in roles:
        uow.roles.add_role(r, ids)
        role[r.name] = r.id

    user: dict[str, UUID] = {}
    for username, role_names, active in [
        ("admin", ["Admin"], True),
        ("alice", ["Manager"], True),
        ("bob", [], True),
        ("carol", ["Manager"], False),
    ]:
        u = User(id=uuid4(), username=username, is_active=active)
        uow.users.add_user(u, {role[n] for n in role_names})
        user[username] = u.id

    return Seed(permission=permission, role=role, user=user)


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingCacheBackend:
    """Backend whose every call fails, like an unreachable Redis."""

    def __init__(self) -> None:
        self.calls = 0

    async def get(self, key: str) -> str | None:
        self.calls += 1
        raise CacheError("connection refused")

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.calls += 1
        raise CacheError("connection refused")

    async def delete(self, *keys: str) -> None:
        self.calls += 1
        raise CacheError("connection refused")


class CountingLoader:
    """Wraps the resolve use case and counts store reads."""

    def __init__(self, uow_factory) -> None:
        self._resolve = ResolveUserPermissionsUseCase(unit_of_work_factory=uow_factory)
        self.calls = 0

    async def __call__(self, user_id: UUID):
        self.calls += 1
        return await self._resolve.execute(user_id)


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh seeded in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def seed(fake_uow: FakeUnitOfWork) -> Seed:
    return seed_uow(fake_uow)


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork, seed: Seed):
    """Factory returning async context manager over the seeded FakeUnitOfWork."""
    return make_uow_factory(fake_uow)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_backend(clock: FakeClock) -> InMemoryCacheBackend:
    return InMemoryCacheBackend(clock=clock)


@pytest.fixture
def loader(uow_factory) -> CountingLoader:
    return CountingLoader(uow_factory)


@pytest.fixture
def permission_cache(cache_backend, loader) -> PermissionCache:
    return PermissionCache(backend=cache_backend, loader=loader, ttl_seconds=1800)


@pytest.fixture
def authorizer(permission_cache: PermissionCache) -> PermissionAuthorizer:
    return PermissionAuthorizer(permission_cache)
