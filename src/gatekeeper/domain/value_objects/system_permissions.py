"""Permission names that gate the administration endpoints."""

from enum import StrEnum

ADMIN_ROLE = "Admin"


class SystemPermission(StrEnum):
    """Permissions checked by the API itself."""

    READ_PERMISSIONS = "User.ReadPermissions"
    GRANT_PERMISSION = "User.GrantPermission"
    DENY_PERMISSION = "User.DenyPermission"
    REVOKE_PERMISSION = "User.RevokePermission"
    ASSIGN_ROLE = "User.AssignRole"
    UPDATE_ROLE = "Role.Update"
