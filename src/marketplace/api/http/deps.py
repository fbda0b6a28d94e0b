"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.marketplace.api.http.app_data import ApplicationDependencies
from src.marketplace.core.errors import ForbiddenError, UnauthorizedError
from src.marketplace.core.models.claims import TokenClaims
from src.marketplace.core.services import AuthService, ProductService, UserService
from src.marketplace.entities.product import ProductRepository
from src.marketplace.entities.user import Role, UserRepository


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Yield a database session scoped to the request."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_auth_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> AuthService:
    """Get the credential service instance."""
    return app_deps.auth_service


def get_user_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
    db: Session = Depends(get_db_session),
) -> UserService:
    return UserService(UserRepository(db), app_deps.auth_service, app_deps.config.constants)


def get_product_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
    db: Session = Depends(get_db_session),
) -> ProductService:
    return ProductService(ProductRepository(db), UserRepository(db), app_deps.config.constants)


def get_current_claims(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenClaims:
    """Authenticate the request using a Bearer token."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise UnauthorizedError("Authorization header missing")

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise UnauthorizedError("Invalid authorization format")

    claims = auth_service.validate_token(parts[1])
    request.state.user_id = claims.user_id
    request.state.role = claims.role
    return claims


def require_roles(*allowed: Role) -> Callable[..., TokenClaims]:
    """Create a dependency that admits only the listed roles."""

    def dep(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        if not claims.has_role(*allowed):
            raise ForbiddenError("Insufficient permissions")
        return claims

    return dep
