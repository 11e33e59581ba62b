"""Domain services."""

from gatekeeper.domain.services.permission_resolver import (
    EffectivePermission,
    PermissionProvenance,
    PermissionResolution,
    RolePermissions,
    resolve_permissions,
)

__all__ = [
    "EffectivePermission",
    "PermissionProvenance",
    "PermissionResolution",
    "RolePermissions",
    "resolve_permissions",
]
