"""Shared service-layer models."""

from .claims import TokenClaims
from .pagination import (
    PaginatedResponse,
    PaginationParams,
    ProductFilter,
    UserFilter,
    normalize_pagination,
)

__all__ = [
    "PaginatedResponse",
    "PaginationParams",
    "ProductFilter",
    "TokenClaims",
    "UserFilter",
    "normalize_pagination",
]
