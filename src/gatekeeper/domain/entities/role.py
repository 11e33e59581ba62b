"""Role entity for RBAC."""

from dataclasses import dataclass
from uuid import UUID


@dataclass
class Role:
    """Role - named group of permissions attached to users.

    System roles cannot be deleted; the administration surface enforces that.
    """

    id: UUID
    name: str
    description: str | None = None
    is_active: bool = True
    is_system_role: bool = False
