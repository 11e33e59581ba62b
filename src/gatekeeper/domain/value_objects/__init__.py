"""Domain value objects."""

from gatekeeper.domain.value_objects.permission_source import (
    EffectiveSource,
    ProvenanceSource,
)
from gatekeeper.domain.value_objects.system_permissions import (
    ADMIN_ROLE,
    SystemPermission,
)

__all__ = [
    "ADMIN_ROLE",
    "EffectiveSource",
    "ProvenanceSource",
    "SystemPermission",
]
