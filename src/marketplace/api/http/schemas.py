"""Request and response bodies of the HTTP API."""

from datetime import datetime
from typing import Annotated, Any, ClassVar

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from src.marketplace.entities.user.entity import Role


def _check_email(value: str) -> str:
    """Reject malformed addresses but keep the value exactly as sent."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}") from e
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class RegisterRequest(BaseModel):
    """Length limits on name and password are checked by the user service."""

    name: str = Field(min_length=1)
    email: Email
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: Email
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


class UserCreateRequest(RegisterRequest):
    role: Role = Role.USER


class _PartialUpdate(BaseModel):
    """Partial update body: only the fields the client sent are applied."""

    _nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_empty_and_nulls(self):
        if not self.model_fields_set:
            raise ValueError("no fields to update")
        for field in self.model_fields_set:
            if getattr(self, field) is None and field not in self._nullable:
                raise ValueError(f"{field} cannot be null")
        return self

    def to_updates(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class UserUpdateRequest(_PartialUpdate):
    name: str | None = Field(default=None, min_length=1)
    email: Email | None = None
    password: str | None = Field(default=None, min_length=1)
    role: Role | None = None


class ProductCreateRequest(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    price: int = Field(ge=0)
    status: str = Field(default="", max_length=20)
    user_id: int | None = Field(
        default=None, description="Owner; defaults to the authenticated user"
    )


class ProductUpdateRequest(_PartialUpdate):
    _nullable: ClassVar[frozenset[str]] = frozenset({"description"})

    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    price: int | None = Field(default=None, ge=0)
    status: str | None = Field(default=None, min_length=1, max_length=20)


class UserResponse(BaseModel):
    """Public view of a user; the password hash is never part of it."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: Role
    created_at: datetime
    updated_at: datetime


class ProductResponse(BaseModel):
    """Product as returned by the API, with its owner embedded when visible."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    description: str | None
    price: int
    status: str
    user_id: int
    user: UserResponse | None = None
    created_at: datetime
    updated_at: datetime
