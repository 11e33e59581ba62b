"""Where a resolved permission comes from."""

from enum import StrEnum


class EffectiveSource(StrEnum):
    """Source of a permission in the effective set."""

    ROLE = "Role"
    GRANT = "Grant"


class ProvenanceSource(StrEnum):
    """Source shown in the provenance view, including denied permissions."""

    ROLE = "Role"
    GRANTED = "Granted"
    DENIED = "Denied"
