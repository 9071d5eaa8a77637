import math
import logging
from typing import Any, Callable, Dict, Generic, List, Tuple, TypeVar

from postgrest.exceptions import APIError
from pydantic import BaseModel

logger = logging.getLogger(__name__)

PAGE_SIZE = 10
RANGE_NOT_SATISFIABLE = "PGRST103"
# Supabase's default max-rows
FETCH_ALL_BATCH = 1000

T = TypeVar("T")


def page_range(page: int, page_size: int = PAGE_SIZE) -> Tuple[int, int]:
    """Zero-indexed inclusive row range for a 1-indexed page."""
    if page < 1:
        raise ValueError("page must be >= 1")
    start = (page - 1) * page_size
    return start, start + page_size - 1


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(count / page_size) if count > 0 else 0


def fetch_page(
    make_query: Callable[[], Any],
    page: int,
    page_size: int = PAGE_SIZE,
    order_by: str = "created_at",
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Run one counted, ordered, range-bounded select and return (rows, exact count).

    make_query must build a fresh select with count="exact" and any filters.
    PostgREST rejects a range that starts past the last row; that page is
    answered with zero rows and the count from a one-row window instead.
    """
    start, end = page_range(page, page_size)
    try:
        result = make_query().order(order_by, desc=True).range(start, end).execute()
    except APIError as e:
        if getattr(e, "code", None) != RANGE_NOT_SATISFIABLE:
            raise
        logger.debug(f"Page {page} is past the end of the result set")
        result = make_query().order(order_by, desc=True).range(0, 0).execute()
        return [], result.count or 0
    return result.data or [], result.count or 0


def fetch_all(
    make_query: Callable[[], Any],
    order_by: str = "id",
    desc: bool = False,
    batch_size: int = FETCH_ALL_BATCH,
) -> List[Dict[str, Any]]:
    """
    Read every matching row, one window at a time.

    PostgREST silently truncates a response at the server's max-rows, so a
    single unbounded select is not a full read. Each window starts where the
    previous one actually ended, and reading stops once the exact count is
    reached. make_query must select with count="exact".
    """
    rows: List[Dict[str, Any]] = []
    while True:
        start = len(rows)
        try:
            result = make_query().order(order_by, desc=desc).range(start, start + batch_size - 1).execute()
        except APIError as e:
            if getattr(e, "code", None) != RANGE_NOT_SATISFIABLE:
                raise
            break
        batch = result.data or []
        rows.extend(batch)
        if not batch or len(rows) >= (result.count or 0):
            break
    return rows


class Page(BaseModel, Generic[T]):
    items: List[T]
    count: int
    page: int
    page_size: int = PAGE_SIZE
    total_pages: int

    @classmethod
    def build(cls, items: List[T], count: int, page: int, page_size: int = PAGE_SIZE) -> "Page[T]":
        return cls(
            items=items,
            count=count,
            page=page,
            page_size=page_size,
            total_pages=total_pages(count, page_size),
        )
