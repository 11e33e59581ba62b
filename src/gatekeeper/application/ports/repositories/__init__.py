"""Repository ports."""

from gatekeeper.application.ports.repositories.override_repository import (
    OverrideRepository,
)
from gatekeeper.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from gatekeeper.application.ports.repositories.role_repository import RoleRepository
from gatekeeper.application.ports.repositories.user_repository import UserRepository

__all__ = [
    "OverrideRepository",
    "PermissionRepository",
    "RoleRepository",
    "UserRepository",
]
