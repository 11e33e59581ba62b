"""Response body builders for permission views."""

from datetime import datetime

from gatekeeper.application.dto.permission_dto import OverrideOutput
from gatekeeper.domain.entities import Permission, PermissionOverride
from gatekeeper.domain.services import EffectivePermission, PermissionProvenance


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _str(value: object) -> str | None:
    return str(value) if value is not None else None


def effective_to_dict(p: EffectivePermission) -> dict:
    return {
        "permission_id": str(p.permission_id),
        "name": p.name,
        "resource": p.resource,
        "action": p.action,
        "source": p.source.value,
        "roles": list(p.roles),
    }


def permission_to_dict(p: Permission) -> dict:
    return {
        "permission_id": str(p.id),
        "name": p.name,
        "resource": p.resource,
        "action": p.action,
        "description": p.description,
    }


def provenance_to_dict(p: PermissionProvenance) -> dict:
    return {
        "permission_id": str(p.permission_id),
        "name": p.name,
        "resource": p.resource,
        "action": p.action,
        "source": p.source.value,
        "detail": p.detail,
        "reason": p.reason,
        "assigned_by": _str(p.actor_id),
        "assigned_by_username": p.actor_username,
        "assigned_at": _iso(p.assigned_at),
    }


def override_output_to_dict(o: OverrideOutput) -> dict:
    return {
        "id": str(o.id),
        "permission_id": str(o.permission_id),
        "permission_name": o.permission_name,
        "resource": o.resource,
        "action": o.action,
        "is_granted": o.is_granted,
        "reason": o.reason,
        "assigned_at": _iso(o.assigned_at),
        "assigned_by": _str(o.assigned_by),
        "assigned_by_username": o.assigned_by_username,
        "revoked_at": _iso(o.revoked_at),
        "revoked_by": _str(o.revoked_by),
        "revoked_by_username": o.revoked_by_username,
    }


def override_to_dict(o: PermissionOverride) -> dict:
    return {
        "id": str(o.id),
        "user_id": str(o.user_id),
        "permission_id": str(o.permission_id),
        "is_granted": o.is_granted,
        "reason": o.reason,
        "assigned_at": _iso(o.assigned_at),
        "assigned_by": _str(o.assigned_by),
    }
