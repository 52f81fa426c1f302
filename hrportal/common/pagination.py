"""Pagination helpers shared by list endpoints."""


import math
from typing import Any, Sequence

from fastapi import Query
from pydantic import BaseModel

from hrportal.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


# ── FastAPI dependency ──────────────────────────────────────────────

class PaginationParams:
    """Inject via ``Depends(PaginationParams)`` on any list endpoint."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
        page_size: int = Query(
            default=DEFAULT_PAGE_SIZE,
            ge=1,
            le=MAX_PAGE_SIZE,
            description="Items per page (max 100)",
        ),
    ) -> None:
        self.page = page
        self.page_size = page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


# ── Pydantic response models ───────────────────────────────────────

class PaginationMeta(BaseModel):
    """Metadata block embedded in every paginated response."""

    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


def build_meta(total: int, page: int, page_size: int) -> PaginationMeta:
    total_pages = math.ceil(total / page_size) if total else 0
    return PaginationMeta(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


# ── Repository helper ───────────────────────────────────────────────

async def paginate(
    repository: Any,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    **filters: Any,
) -> tuple[Sequence[Any], PaginationMeta]:
    """
    Fetch one page through ``repository.list_page`` so the store applies
    OFFSET/LIMIT and counts the filtered total itself.
    """
    result = await repository.list_page(
        offset=(page - 1) * page_size,
        limit=page_size,
        **filters,
    )
    return result.items, build_meta(result.total, page, page_size)
