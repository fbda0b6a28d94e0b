"""User data access layer."""

from typing import Any

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from src.marketplace.core.errors import ConflictError, InvalidInputError
from src.marketplace.core.models.pagination import PaginationParams, UserFilter
from src.marketplace.entities._base import is_unique_violation, utcnow
from src.marketplace.entities.user.entity import User
from src.marketplace.entities.user.table import UserTable

UPDATABLE_FIELDS = frozenset({"email", "name", "password", "role"})


class UserRepository:
    """Data-access layer for users.

    Every read skips soft-deleted rows. Writes commit immediately.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _active(self):
        return select(UserTable).where(col(UserTable.deleted_at).is_(None))

    def _get_row(self, user_id: int) -> UserTable | None:
        return self._session.exec(self._active().where(UserTable.id == user_id)).first()

    def _commit(self, email: str) -> None:
        try:
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            logger.warning("Integrity error writing user {}: {}", email, e.orig)
            if is_unique_violation(e):
                raise ConflictError(f"user with email {email} already exists") from e
            raise InvalidInputError("user violates a data constraint") from e

    def create(self, user: User) -> User:
        row = UserTable(
            email=user.email,
            name=user.name,
            password=user.password,
            role=user.role,
        )
        self._session.add(row)
        self._commit(user.email)
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def get(self, user_id: int) -> User | None:
        row = self._get_row(user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_by_email(self, email: str) -> User | None:
        row = self._session.exec(self._active().where(UserTable.email == email)).first()
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def list(
        self, filter: UserFilter | None, pagination: PaginationParams
    ) -> tuple[list[User], int]:
        conditions = [col(UserTable.deleted_at).is_(None)]
        if filter is not None:
            if filter.email:
                conditions.append(col(UserTable.email).contains(filter.email, autoescape=True))
            if filter.name:
                conditions.append(col(UserTable.name).contains(filter.name, autoescape=True))

        total = self._session.exec(
            select(func.count()).select_from(UserTable).where(*conditions)
        ).one()
        rows = self._session.exec(
            select(UserTable)
            .where(*conditions)
            .order_by(col(UserTable.id))
            .offset(pagination.offset)
            .limit(pagination.page_size)
        ).all()
        return [User.model_validate(row, from_attributes=True) for row in rows], total

    def update(self, user_id: int, updates: dict[str, Any]) -> User | None:
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"cannot update user fields: {', '.join(sorted(unknown))}")

        row = self._get_row(user_id)
        if row is None:
            return None
        for field, value in updates.items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        self._session.add(row)
        self._commit(updates.get("email", row.email))
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def delete(self, user_id: int) -> bool:
        """Soft-delete the user. Returns False when no active row matched."""
        row = self._get_row(user_id)
        if row is None:
            return False
        row.deleted_at = utcnow()
        self._session.add(row)
        self._session.commit()
        return True
