"""Cached result of resolving one user's permissions."""

import json
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from gatekeeper.domain.entities import Permission
from gatekeeper.domain.services import (
    EffectivePermission,
    PermissionProvenance,
    PermissionResolution,
)
from gatekeeper.domain.value_objects import EffectiveSource, ProvenanceSource


@dataclass
class PermissionSnapshot:
    """User identity plus its resolved permissions at `computed_at`."""

    user_id: UUID
    username: str
    is_active: bool
    resolution: PermissionResolution
    computed_at: datetime

    @property
    def permission_names(self) -> list[str]:
        return [p.name for p in self.resolution.effective]

    @property
    def role_names(self) -> list[str]:
        return list(self.resolution.role_names)

    def to_json(self) -> str:
        """Serialize for a string cache backend."""
        r = self.resolution
        return json.dumps(
            {
                "user_id": str(self.user_id),
                "username": self.username,
                "is_active": self.is_active,
                "computed_at": self.computed_at.isoformat(),
                "role_names": r.role_names,
                "effective": [
                    {
                        "permission_id": str(p.permission_id),
                        "name": p.name,
                        "resource": p.resource,
                        "action": p.action,
                        "source": p.source.value,
                        "roles": list(p.roles),
                    }
                    for p in r.effective
                ],
                "missing": [
                    {
                        "id": str(p.id),
                        "name": p.name,
                        "resource": p.resource,
                        "action": p.action,
                        "description": p.description,
                    }
                    for p in r.missing
                ],
                "provenance": [
                    {
                        "permission_id": str(p.permission_id),
                        "name": p.name,
                        "resource": p.resource,
                        "action": p.action,
                        "source": p.source.value,
                        "detail": p.detail,
                        "reason": p.reason,
                        "actor_id": str(p.actor_id) if p.actor_id else None,
                        "actor_username": p.actor_username,
                        "assigned_at": p.assigned_at.isoformat() if p.assigned_at else None,
                    }
                    for p in r.provenance
                ],
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "PermissionSnapshot":
        """Inverse of to_json."""
        data = json.loads(raw)
        resolution = PermissionResolution(
            effective=[
                EffectivePermission(
                    permission_id=UUID(p["permission_id"]),
                    name=p["name"],
                    resource=p["resource"],
                    action=p["action"],
                    source=EffectiveSource(p["source"]),
                    roles=tuple(p["roles"]),
                )
                for p in data["effective"]
            ],
            missing=[
                Permission(
                    id=UUID(p["id"]),
                    name=p["name"],
                    resource=p["resource"],
                    action=p["action"],
                    description=p["description"],
                )
                for p in data["missing"]
            ],
            provenance=[
                PermissionProvenance(
                    permission_id=UUID(p["permission_id"]),
                    name=p["name"],
                    resource=p["resource"],
                    action=p["action"],
                    source=ProvenanceSource(p["source"]),
                    detail=p["detail"],
                    reason=p["reason"],
                    actor_id=UUID(p["actor_id"]) if p["actor_id"] else None,
                    actor_username=p["actor_username"],
                    assigned_at=(
                        datetime.fromisoformat(p["assigned_at"]) if p["assigned_at"] else None
                    ),
                )
                for p in data["provenance"]
            ],
            role_names=list(data["role_names"]),
        )
        return cls(
            user_id=UUID(data["user_id"]),
            username=data["username"],
            is_active=data["is_active"],
            resolution=resolution,
            computed_at=datetime.fromisoformat(data["computed_at"]),
        )
