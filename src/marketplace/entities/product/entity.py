"""Entity: Product."""

from typing import Any

from pydantic import Field

from src.marketplace.entities._base import Entity
from src.marketplace.entities.user.entity import User


class Product(Entity):
    """Product listed by a user.

    An empty ``status`` means "not chosen yet"; the product service replaces it
    with the configured default before the product is stored.
    """

    code: str = Field(min_length=1, max_length=50, description="Unique product code")
    name: str = Field(min_length=1, max_length=100, description="Product name")
    description: str | None = Field(default=None, description="Free-form description")
    price: int = Field(ge=0, description="Price in minor currency units")
    status: str = Field(default="", max_length=20, description="Lifecycle status label")
    user_id: int = Field(description="Identifier of the owning user")
    user: User | None = Field(default=None, description="Owning user, when loaded")

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps and the loaded owner."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.code == other.code
            and self.name == other.name
            and self.description == other.description
            and self.price == other.price
            and self.status == other.status
            and self.user_id == other.user_id
        )

    def __hash__(self) -> int:
        return hash((self.id, self.code, self.user_id))
