"""Tests for page ranges and the PostgREST past-the-end handling."""
import pytest

from postgrest.exceptions import APIError

from app.core.pagination import PAGE_SIZE, Page, fetch_all, fetch_page, page_range, total_pages
from tests.fakes import FakeSupabase


def seeded(n):
    supabase = FakeSupabase()
    supabase.tables["items"] = [
        {"id": i, "created_at": supabase.next_timestamp()} for i in range(n)
    ]
    return supabase


@pytest.mark.parametrize("page,expected", [(1, (0, 9)), (2, (10, 19)), (5, (40, 49))])
def test_page_range_is_inclusive_and_zero_indexed(page, expected):
    assert page_range(page) == expected


def test_page_range_rejects_page_zero():
    with pytest.raises(ValueError):
        page_range(0)


@pytest.mark.parametrize("count,pages", [(0, 0), (1, 1), (10, 1), (11, 2), (23, 3)])
def test_total_pages_is_ceiling(count, pages):
    assert total_pages(count) == pages


def test_fetch_page_returns_window_and_exact_count():
    supabase = seeded(23)
    rows, count = fetch_page(lambda: supabase.table("items").select("*", count="exact"), 3)
    assert count == 23
    assert len(rows) == 3
    # newest first: the third page holds the three oldest rows
    assert [r["id"] for r in rows] == [2, 1, 0]


def test_page_past_the_end_is_empty_not_an_error():
    supabase = seeded(23)
    rows, count = fetch_page(lambda: supabase.table("items").select("*", count="exact"), 4)
    assert rows == []
    assert count == 23


def test_empty_table_first_page():
    supabase = seeded(0)
    rows, count = fetch_page(lambda: supabase.table("items").select("*", count="exact"), 1)
    assert rows == []
    assert count == 0


def test_page_model_build():
    page = Page[int].build([1, 2], count=12, page=2)
    assert page.page_size == PAGE_SIZE
    assert page.total_pages == 2
    assert page.items == [1, 2]


def test_fetch_page_reraises_other_backend_errors():
    supabase = seeded(3)
    supabase.fail_tables["items"] = APIError({
        "code": "57014", "message": "canceling statement due to statement timeout", "details": None, "hint": None,
    })
    with pytest.raises(APIError):
        fetch_page(lambda: supabase.table("items").select("*", count="exact"), 1)


def test_fetch_all_reads_past_the_server_row_cap():
    supabase = seeded(25)
    supabase.row_cap = 10
    rows = fetch_all(lambda: supabase.table("items").select("*", count="exact"))
    assert sorted(r["id"] for r in rows) == list(range(25))


def test_fetch_all_exact_multiple_of_batch():
    supabase = seeded(20)
    rows = fetch_all(lambda: supabase.table("items").select("*", count="exact"), batch_size=10)
    assert len(rows) == 20


def test_fetch_all_empty():
    supabase = seeded(0)
    assert fetch_all(lambda: supabase.table("items").select("*", count="exact")) == []
