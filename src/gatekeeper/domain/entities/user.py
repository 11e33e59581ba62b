"""User entity as consumed by permission resolution."""

from dataclasses import dataclass
from uuid import UUID


@dataclass
class User:
    """User - identity that holds roles and permission overrides."""

    id: UUID
    username: str
    is_active: bool = True
