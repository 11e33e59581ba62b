"""Effective permission resolution.

Combines role-based grants with per-user overrides:

    effective = (role permissions | granted) - denied
    missing   = all permissions - effective

A denial dominates both roles and grants. The function is pure: it only
looks at the state passed in, so the same inputs always give the same
result regardless of ordering.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from gatekeeper.domain.entities import Permission, PermissionOverride, Role
from gatekeeper.domain.value_objects import EffectiveSource, ProvenanceSource

_PROVENANCE_ORDER = {
    ProvenanceSource.ROLE: 0,
    ProvenanceSource.GRANTED: 1,
    ProvenanceSource.DENIED: 2,
}


@dataclass(frozen=True)
class RolePermissions:
    """A role assigned to the user and the permission ids attached to it."""

    role: Role
    permission_ids: frozenset[UUID]


@dataclass(frozen=True)
class EffectivePermission:
    """Permission the user actually holds, with its winning source."""

    permission_id: UUID
    name: str
    resource: str
    action: str
    source: EffectiveSource
    roles: tuple[str, ...] = ()


@dataclass(frozen=True)
class PermissionProvenance:
    """Why a permission is (or is not) held, for administrators."""

    permission_id: UUID
    name: str
    resource: str
    action: str
    source: ProvenanceSource
    detail: str | None
    reason: str | None = None
    actor_id: UUID | None = None
    actor_username: str | None = None
    assigned_at: datetime | None = None


@dataclass(frozen=True)
class PermissionResolution:
    """Result of resolving one user's permissions."""

    effective: list[EffectivePermission] = field(default_factory=list)
    missing: list[Permission] = field(default_factory=list)
    provenance: list[PermissionProvenance] = field(default_factory=list)
    role_names: list[str] = field(default_factory=list)

    @property
    def effective_ids(self) -> set[UUID]:
        return {p.permission_id for p in self.effective}

    @property
    def denied_ids(self) -> set[UUID]:
        return {
            p.permission_id
            for p in self.provenance
            if p.source is ProvenanceSource.DENIED
        }

    @property
    def from_roles(self) -> int:
        return sum(1 for p in self.effective if p.source is EffectiveSource.ROLE)

    @property
    def from_direct_grants(self) -> int:
        return sum(1 for p in self.effective if p.source is EffectiveSource.GRANT)


def resolve_permissions(
    all_permissions: Iterable[Permission],
    roles: Iterable[RolePermissions],
    active_overrides: Iterable[PermissionOverride],
    usernames: Mapping[UUID, str] | None = None,
) -> PermissionResolution:
    """Resolve effective, missing and provenance sets for one user."""
    usernames = usernames or {}
    catalog = {p.id: p for p in all_permissions}
    roles = sorted(roles, key=lambda r: r.role.name)

    contributors: dict[UUID, list[str]] = {}
    for assigned in roles:
        for permission_id in assigned.permission_ids:
            contributors.setdefault(permission_id, []).append(assigned.role.name)

    granted: dict[UUID, PermissionOverride] = {}
    denied: dict[UUID, PermissionOverride] = {}
    for override in active_overrides:
        if not override.is_active or override.permission_id not in catalog:
            continue
        target = granted if override.is_granted else denied
        target[override.permission_id] = override

    role_ids = set(contributors) & set(catalog)
    effective_ids = (role_ids | set(granted)) - set(denied)

    effective: list[EffectivePermission] = []
    provenance: list[PermissionProvenance] = []
    for permission_id in effective_ids:
        permission = catalog[permission_id]
        grant = granted.get(permission_id)
        if grant is not None:
            effective.append(
                EffectivePermission(
                    permission_id=permission.id,
                    name=permission.name,
                    resource=permission.resource,
                    action=permission.action,
                    source=EffectiveSource.GRANT,
                )
            )
            provenance.append(_override_provenance(permission, grant, usernames))
        else:
            role_names = tuple(contributors[permission_id])
            effective.append(
                EffectivePermission(
                    permission_id=permission.id,
                    name=permission.name,
                    resource=permission.resource,
                    action=permission.action,
                    source=EffectiveSource.ROLE,
                    roles=role_names,
                )
            )
            provenance.append(
                PermissionProvenance(
                    permission_id=permission.id,
                    name=permission.name,
                    resource=permission.resource,
                    action=permission.action,
                    source=ProvenanceSource.ROLE,
                    detail=", ".join(role_names),
                )
            )

    for permission_id, deny in denied.items():
        provenance.append(_override_provenance(catalog[permission_id], deny, usernames))

    missing = [p for p in catalog.values() if p.id not in effective_ids]

    effective.sort(key=lambda p: (p.resource, p.action, p.name))
    missing.sort(key=lambda p: (p.resource, p.action, p.name))
    provenance.sort(key=lambda p: (p.resource, p.action, _PROVENANCE_ORDER[p.source], p.name))

    return PermissionResolution(
        effective=effective,
        missing=missing,
        provenance=provenance,
        role_names=[r.role.name for r in roles],
    )


def _override_provenance(
    permission: Permission,
    override: PermissionOverride,
    usernames: Mapping[UUID, str],
) -> PermissionProvenance:
    actor = usernames.get(override.assigned_by)
    return PermissionProvenance(
        permission_id=permission.id,
        name=permission.name,
        resource=permission.resource,
        action=permission.action,
        source=ProvenanceSource.GRANTED if override.is_granted else ProvenanceSource.DENIED,
        detail=override.reason or f"By {actor or override.assigned_by}",
        reason=override.reason,
        actor_id=override.assigned_by,
        actor_username=actor,
        assigned_at=override.assigned_at,
    )
