"""User database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.marketplace.entities._base import EntityTable
from src.marketplace.entities.user.entity import Role


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    This represents how the User entity is stored in the database.
    """

    __tablename__ = "users"

    email: str = Field(max_length=100, unique=True, index=True, nullable=False)
    name: str = Field(max_length=100, nullable=False)
    password: str = Field(max_length=255, nullable=False)
    role: Role = Field(
        default=Role.USER,
        sa_column=sa.Column(
            sa.Enum(Role, values_callable=lambda roles: [r.value for r in roles],
                    name="user_role", native_enum=False, length=10),
            nullable=False,
            server_default=Role.USER.value,
        ),
    )
