"""Public registration and login endpoints."""

from fastapi import APIRouter, Depends, status

from src.marketplace.api.http.deps import get_auth_service, get_user_service
from src.marketplace.api.http.schemas import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
)
from src.marketplace.core.services import AuthService, UserService

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Create a regular user account."""
    user_service.register(name=body.name, email=body.email, password=body.password)
    return MessageResponse(message="user registered successfully")


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    user_service: UserService = Depends(get_user_service),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Exchange email and password for a bearer token."""
    user = user_service.authenticate(body.email, body.password)
    return TokenResponse(token=auth_service.issue_token(user))
