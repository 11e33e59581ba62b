"""Permission entity - catalog entry."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Permission:
    """Permission - one `resource.action` capability from the fixed catalog."""

    id: UUID
    name: str
    resource: str
    action: str
    description: str | None = None

    @property
    def permission_string(self) -> str:
        return f"{self.resource}.{self.action}"
