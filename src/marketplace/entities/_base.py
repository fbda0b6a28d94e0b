from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlalchemy.exc import IntegrityError
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base entity class with a store-assigned numeric identifier."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = PydanticField(
        default=None, description="Identifier assigned by the store on insert"
    )

    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)
    deleted_at: datetime | None = PydanticField(
        default=None, description="Soft-delete marker; set once, never cleared"
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class EntityTable(SQLModel, table=False):
    """Base table with autoincrement id, timestamps and soft-delete column."""

    id: int | None = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )
    deleted_at: datetime | None = Field(default=None, index=True)


def is_unique_violation(error: IntegrityError) -> bool:
    """True when ``error`` comes from a unique index rather than another constraint."""
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    return "unique" in str(error.orig).lower()
