"""Pagination and filter models shared by the list operations."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from src.marketplace.runtime.config.config_data import PaginationConfig

T = TypeVar("T")

# Pages past this are clamped so the row offset stays within a 64-bit integer.
MAX_PAGE = 1_000_000_000


class PaginationParams(BaseModel):
    """1-based page number and requested page size, as sent by the client."""

    page: int = Field(default=1, description="1-based page number")
    page_size: int = Field(default=0, description="Requested page size; <1 means default")

    def normalized(self, config: PaginationConfig) -> "PaginationParams":
        """Return a copy with page within [1, MAX_PAGE] and page_size within [1, max_page_size].

        A page size below 1 falls back to the configured default; one above the
        maximum is clamped to the maximum.
        """
        page = min(max(self.page, 1), MAX_PAGE)
        page_size = self.page_size
        if page_size < 1:
            page_size = config.default_page_size
        if page_size > config.max_page_size:
            page_size = config.max_page_size
        return PaginationParams(page=page, page_size=page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def normalize_pagination(
    pagination: PaginationParams | None, config: PaginationConfig
) -> PaginationParams:
    if pagination is None:
        pagination = PaginationParams(page=1, page_size=config.default_page_size)
    return pagination.normalized(config)


class PaginatedResponse(BaseModel, Generic[T]):
    data: list[T]
    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, data: list[T], pagination: PaginationParams, total: int) -> "PaginatedResponse[T]":
        return cls(
            data=data,
            page=pagination.page,
            page_size=pagination.page_size,
            total=total,
            total_pages=math.ceil(total / pagination.page_size),
        )


class UserFilter(BaseModel):
    """Substring filters for listing users."""

    email: str | None = None
    name: str | None = None


class ProductFilter(BaseModel):
    """Substring match on code/name, exact match on status/owner."""

    code: str | None = None
    name: str | None = None
    status: str | None = None
    user_id: int | None = None
