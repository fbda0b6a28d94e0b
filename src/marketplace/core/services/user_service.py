from typing import Any

from loguru import logger
from pydantic import ValidationError

from src.marketplace.core.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from src.marketplace.core.models.pagination import (
    PaginatedResponse,
    PaginationParams,
    UserFilter,
    normalize_pagination,
)
from src.marketplace.core.services.auth_service import AuthService
from src.marketplace.entities.user.entity import Role, User
from src.marketplace.entities.user.repository import UserRepository
from src.marketplace.runtime.config.config_data import ConstantsConfig

# users.email column width
MAX_EMAIL_LENGTH = 100


class UserService:
    """Business rules for user accounts.

    Email uniqueness is a check-then-insert; two concurrent requests can both
    pass the check. The unique index on ``users.email`` rejects the loser and
    the repository reports it as a conflict.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        auth_service: AuthService,
        constants: ConstantsConfig,
    ):
        self._user_repo = user_repo
        self._auth_service = auth_service
        self._constants = constants

    def _check_name(self, name: str) -> None:
        limit = self._constants.validation.max_name_length
        if len(name) > limit:
            raise InvalidInputError(f"name must be at most {limit} characters")

    def _check_email(self, email: str) -> None:
        if len(email) > MAX_EMAIL_LENGTH:
            raise InvalidInputError(f"email must be at most {MAX_EMAIL_LENGTH} characters")

    def _check_password(self, password: str) -> None:
        minimum = self._constants.validation.min_password_length
        if len(password) < minimum:
            raise InvalidInputError(f"password must be at least {minimum} characters")

    def create_user(self, user: User) -> User:
        self._check_name(user.name)
        self._check_email(user.email)
        if self._user_repo.get_by_email(user.email) is not None:
            raise ConflictError(f"user with email {user.email} already exists")

        created = self._user_repo.create(user)
        logger.info("User created", user_id=created.id, role=created.role.value)
        return created

    def register(self, name: str, email: str, password: str, role: Role = Role.USER) -> User:
        """Hash ``password`` and create the account."""
        self._check_password(password)
        user = User(
            name=name,
            email=email,
            password=self._auth_service.hash_password(password),
            role=role,
        )
        return self.create_user(user)

    def authenticate(self, email: str, password: str) -> User:
        """Return the user owning ``email`` if ``password`` matches.

        Unknown email and wrong password fail with the same message.
        """
        user = self._user_repo.get_by_email(email)
        if user is None or not self._auth_service.verify_password(password, user.password):
            logger.info("Failed login attempt")
            raise UnauthorizedError("invalid credentials")
        return user

    def get_user(self, user_id: int) -> User:
        user = self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def get_user_by_email(self, email: str) -> User:
        user = self._user_repo.get_by_email(email)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def list_users(
        self,
        filter: UserFilter | None = None,
        pagination: PaginationParams | None = None,
    ) -> PaginatedResponse[User]:
        params = normalize_pagination(pagination, self._constants.pagination)
        users, total = self._user_repo.list(filter, params)
        return PaginatedResponse[User].build(users, params, total)

    def update_user(self, user_id: int, updates: dict[str, Any]) -> User:
        """Apply a partial update; a new email must not belong to another user."""
        current = self._user_repo.get(user_id)
        if current is None:
            raise NotFoundError("user not found")

        try:
            User.model_validate({**current.model_dump(), "password": current.password, **updates})
        except ValidationError as e:
            raise InvalidInputError.from_validation(e) from e

        if "email" in updates:
            self._check_email(updates["email"])
            existing = self._user_repo.get_by_email(updates["email"])
            if existing is not None and existing.id != user_id:
                raise ConflictError(f"user with email {updates['email']} already exists")

        if "name" in updates:
            self._check_name(updates["name"])

        if "password" in updates:
            self._check_password(updates["password"])
            updates = {**updates, "password": self._auth_service.hash_password(updates["password"])}

        updated = self._user_repo.update(user_id, updates)
        if updated is None:
            raise NotFoundError("user not found")
        logger.info("User updated", user_id=user_id, fields=sorted(updates))
        return updated

    def delete_user(self, user_id: int) -> None:
        """Soft-delete the user. Their products are left untouched."""
        if not self._user_repo.delete(user_id):
            raise NotFoundError("user not found")
        logger.info("User deleted", user_id=user_id)
