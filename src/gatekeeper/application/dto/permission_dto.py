"""Permission view DTOs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from gatekeeper.domain.entities import Permission
from gatekeeper.domain.services import EffectivePermission, PermissionProvenance


@dataclass
class PermissionStatistics:
    """Counts for the effective set, derived from the items."""

    from_roles: int
    from_direct_grants: int
    total_unique: int


@dataclass
class EffectivePermissionsOutput:
    """Permissions the user holds."""

    user_id: UUID
    username: str
    permissions: list[EffectivePermission]
    statistics: PermissionStatistics


@dataclass
class MissingPermissionStatistics:
    """Counts for the complement set."""

    total_permissions: int
    user_has_permissions: int
    missing_permissions: int


@dataclass
class MissingPermissionsOutput:
    """Permissions the user does not hold."""

    user_id: UUID
    username: str
    permissions: list[Permission]
    statistics: MissingPermissionStatistics


@dataclass
class PermissionDetailsOutput:
    """Provenance of every effective or denied permission."""

    user_id: UUID
    username: str
    permissions: list[PermissionProvenance]


@dataclass
class OverrideOutput:
    """One stored override row with its permission descriptor."""

    id: UUID
    permission_id: UUID
    permission_name: str
    resource: str
    action: str
    is_granted: bool
    reason: str | None
    assigned_at: datetime
    assigned_by: UUID
    assigned_by_username: str | None
    revoked_at: datetime | None = None
    revoked_by: UUID | None = None
    revoked_by_username: str | None = None
