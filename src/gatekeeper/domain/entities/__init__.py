"""Domain entities."""

from gatekeeper.domain.entities.permission import Permission
from gatekeeper.domain.entities.permission_override import PermissionOverride
from gatekeeper.domain.entities.role import Role
from gatekeeper.domain.entities.user import User

__all__ = [
    "Permission",
    "PermissionOverride",
    "Role",
    "User",
]
