"""User administration endpoints, restricted to admins."""

from fastapi import APIRouter, Depends, Query, status

from src.marketplace.api.http.deps import get_user_service, require_roles
from src.marketplace.api.http.schemas import (
    MessageResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from src.marketplace.core.models import PaginatedResponse, PaginationParams, UserFilter
from src.marketplace.core.services import UserService
from src.marketplace.entities.user import Role, User

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreateRequest,
    user_service: UserService = Depends(get_user_service),
) -> User:
    return user_service.register(
        name=body.name, email=body.email, password=body.password, role=body.role
    )


@router.get("", response_model=PaginatedResponse[UserResponse])
def list_users(
    page: int = Query(1),
    page_size: int = Query(0),
    email: str | None = Query(None, description="Substring match on email"),
    name: str | None = Query(None, description="Substring match on name"),
    user_service: UserService = Depends(get_user_service),
) -> PaginatedResponse[User]:
    return user_service.list_users(
        UserFilter(email=email, name=name),
        PaginationParams(page=page, page_size=page_size),
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
) -> User:
    return user_service.get_user(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    user_service: UserService = Depends(get_user_service),
) -> User:
    """Apply a partial update; a new password is hashed before storage."""
    return user_service.update_user(user_id, body.to_updates())


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    user_service.delete_user(user_id)
    return MessageResponse(message="user deleted successfully")
