"""Unit tests for pagination normalization and paginated envelopes."""

import pytest

from src.marketplace.core.models import (
    PaginatedResponse,
    PaginationParams,
    normalize_pagination,
)
from src.marketplace.core.models.pagination import MAX_PAGE
from src.marketplace.runtime.config.config_data import PaginationConfig

CONFIG = PaginationConfig(default_page_size=10, max_page_size=100)


class TestNormalizePagination:
    def test_none_means_first_page_default_size(self):
        params = normalize_pagination(None, CONFIG)

        assert (params.page, params.page_size) == (1, 10)

    @pytest.mark.parametrize(
        ("page", "page_size", "expected"),
        [
            (0, 0, (1, 10)),
            (-3, -1, (1, 10)),
            (2, 25, (2, 25)),
            (1, 100, (1, 100)),
            (1, 101, (1, 100)),
            (4, 10_000, (4, 100)),
        ],
    )
    def test_bounds(self, page, page_size, expected):
        params = normalize_pagination(PaginationParams(page=page, page_size=page_size), CONFIG)

        assert (params.page, params.page_size) == expected

    def test_offset(self):
        assert PaginationParams(page=3, page_size=20).offset == 40

    def test_huge_page_is_clamped(self):
        params = normalize_pagination(PaginationParams(page=10**18, page_size=100), CONFIG)

        assert params.page == MAX_PAGE
        assert params.offset < 2**63


class TestPaginatedResponse:
    @pytest.mark.parametrize(("total", "pages"), [(0, 0), (1, 1), (10, 1), (11, 2), (95, 10)])
    def test_total_pages_rounds_up(self, total, pages):
        response = PaginatedResponse[int].build([], PaginationParams(page=1, page_size=10), total)

        assert response.total_pages == pages
        assert response.total == total

    def test_serialized_shape(self):
        response = PaginatedResponse[str].build(["a", "b"], PaginationParams(page=2, page_size=2), 4)

        assert response.model_dump() == {
            "data": ["a", "b"],
            "page": 2,
            "page_size": 2,
            "total": 4,
            "total_pages": 2,
        }
