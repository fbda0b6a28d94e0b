"""Core services exports."""

# Credential Service
from .auth_service import AuthService

# Database Services
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# Business Services
from .product_service import ProductService
from .user_service import UserService

__all__ = [
    "AuthService",
    "DbManageService",
    "DbSessionService",
    "ProductService",
    "UserService",
]
