"""Application services."""

from gatekeeper.application.services.permission_authorizer import PermissionAuthorizer
from gatekeeper.application.services.permission_cache import PermissionCache

__all__ = [
    "PermissionAuthorizer",
    "PermissionCache",
]
