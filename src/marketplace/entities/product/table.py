"""Product database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.marketplace.entities._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    ``user_id`` references ``users.id``; the owner is checked by the product
    service before insert as well.
    """

    __tablename__ = "products"
    __table_args__ = (sa.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),)

    code: str = Field(max_length=50, unique=True, index=True, nullable=False)
    name: str = Field(max_length=100, nullable=False)
    description: str | None = Field(default=None, sa_type=sa.Text)
    price: int = Field(nullable=False)
    status: str = Field(default="active", max_length=20, nullable=False)
    user_id: int = Field(foreign_key="users.id", index=True, nullable=False)
