"""Permission override entity - per-user grant or deny with audit trail."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from gatekeeper.domain.exceptions import ValidationError

REASON_MAX_LENGTH = 500


@dataclass
class PermissionOverride:
    """One historical exception record for a (user, permission) slot.

    At most one row per slot is active (revoked_at is None). Rows are retired
    by setting revoked_at/revoked_by and are never deleted.
    """

    id: UUID
    user_id: UUID
    permission_id: UUID
    is_granted: bool
    assigned_at: datetime
    assigned_by: UUID
    reason: str | None = None
    revoked_at: datetime | None = None
    revoked_by: UUID | None = None

    @classmethod
    def grant(
        cls,
        user_id: UUID,
        permission_id: UUID,
        assigned_by: UUID,
        reason: str | None,
        now: datetime | None = None,
    ) -> "PermissionOverride":
        """Create an active Grant adding the permission regardless of roles."""
        return cls._create(user_id, permission_id, assigned_by, reason, True, now)

    @classmethod
    def deny(
        cls,
        user_id: UUID,
        permission_id: UUID,
        assigned_by: UUID,
        reason: str | None,
        now: datetime | None = None,
    ) -> "PermissionOverride":
        """Create an active Deny removing the permission even if a role provides it."""
        return cls._create(user_id, permission_id, assigned_by, reason, False, now)

    @classmethod
    def _create(
        cls,
        user_id: UUID,
        permission_id: UUID,
        assigned_by: UUID,
        reason: str | None,
        is_granted: bool,
        now: datetime | None,
    ) -> "PermissionOverride":
        return cls(
            id=uuid4(),
            user_id=user_id,
            permission_id=permission_id,
            is_granted=is_granted,
            reason=validate_reason(reason),
            assigned_at=now or datetime.now(UTC),
            assigned_by=assigned_by,
        )

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None

    def revoke(self, revoked_by: UUID, now: datetime | None = None) -> None:
        """Retire this row; the slot falls back to role-based resolution."""
        if self.revoked_at is not None:
            raise ValidationError("Permission override already revoked")
        self.revoked_at = now or datetime.now(UTC)
        self.revoked_by = revoked_by


def validate_reason(reason: object) -> str:
    """Reason is mandatory for grants and denies, trimmed, max 500 chars."""
    if reason is not None and not isinstance(reason, str):
        raise ValidationError("Reason must be a string")
    if reason is None or not reason.strip():
        raise ValidationError("Reason is required")
    reason = reason.strip()
    if len(reason) > REASON_MAX_LENGTH:
        raise ValidationError(f"Reason cannot exceed {REASON_MAX_LENGTH} characters")
    return reason
