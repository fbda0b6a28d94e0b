"""User domain entity."""

from enum import Enum
from typing import Any

from pydantic import Field

from src.marketplace.entities._base import Entity


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(Entity):
    """User entity representing an account in the marketplace.

    ``password`` holds the bcrypt hash, never the plaintext. It is excluded
    from serialization so it cannot leak through an API response.
    """

    email: str = Field(description="Unique login email")
    name: str = Field(description="Display name")
    password: str = Field(exclude=True, repr=False, description="Password hash")
    role: Role = Field(default=Role.USER, description="Authorization role")

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.email == other.email
            and self.name == other.name
            and self.role == other.role
        )

    def __hash__(self) -> int:
        return hash((self.id, self.email, self.name, self.role))
