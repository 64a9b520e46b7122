"""Tests for sb_common.pagination."""

import pytest

from src.sb_common.pagination import (
    MAX_PAGE_SIZE,
    PageMeta,
    clamp_limit,
    page_offset,
    total_pages,
)


@pytest.mark.parametrize(
    ("total", "limit", "expected"),
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (250, 100, 3)],
)
def test_total_pages_is_ceiling(total: int, limit: int, expected: int) -> None:
    assert total_pages(total, limit) == expected


def test_clamp_limit_caps_at_max() -> None:
    assert clamp_limit(500) == MAX_PAGE_SIZE
    assert clamp_limit(0) == 1
    assert clamp_limit(25) == 25


def test_page_offset() -> None:
    assert page_offset(1, 10) == 0
    assert page_offset(3, 10) == 20
    assert page_offset(0, 10) == 0


def test_pages_cover_total_exactly() -> None:
    """Walking every page visits each index once."""
    total, limit = 37, 10
    meta = PageMeta.build(1, limit, total)
    seen: list[int] = []
    for page in range(1, meta.total_pages + 1):
        start = page_offset(page, limit)
        seen.extend(range(start, min(start + limit, total)))
    assert seen == list(range(total))


def test_page_meta_build() -> None:
    meta = PageMeta.build(2, 10, 25)
    assert meta.model_dump() == {"page": 2, "limit": 10, "total": 25, "total_pages": 3}
