"""Page/limit pagination shared by event, bet and ledger listings."""

from pydantic import BaseModel

MAX_PAGE_SIZE = 100


def clamp_limit(limit: int) -> int:
    return max(1, min(limit, MAX_PAGE_SIZE))


def page_offset(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * limit


def total_pages(total: int, limit: int) -> int:
    # ceil(total / limit) without floats
    return (total + limit - 1) // limit if total > 0 else 0


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PageMeta":
        return cls(page=page, limit=limit, total=total, total_pages=total_pages(total, limit))
