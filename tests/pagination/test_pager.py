from __future__ import annotations

from math import ceil

import pytest

from src.attendance_dashboard.attendance_dashboard.attendance.model import RosterEntry
from src.attendance_dashboard.attendance_dashboard.core.exceptions import ValidationError
from src.attendance_dashboard.attendance_dashboard.pagination.pager import (
    AdoptedPagination,
    ComputedPagination,
    PaginationState,
    empty_page,
    paginate,
    roster_fallback_records,
    select_pagination,
)


def server_paginated(records: list[dict], page: int, page_size: int) -> dict:
    """What an offset/limit server returns for the same data."""
    total_pages = max(1, ceil(len(records) / page_size))
    start = (page - 1) * page_size
    return {
        "rows": records[start:start + page_size],
        "count": len(records),
        "currentPage": page,
        "pageSize": page_size,
        "totalPages": total_pages,
        "hasNextPage": page < total_pages,
        "hasPreviousPage": page > 1,
    }


def test_adopts_server_metadata_and_defaults_missing_fields(raw):
    payload = {"count": 12, "rows": [raw(i) for i in range(10)], "currentPage": 1, "pageSize": 10}

    result = paginate(payload, page=1, page_size=10)

    assert len(result.records) == 10
    assert result.pagination == PaginationState(
        current_page=1,
        page_size=10,
        total_items=12,
        total_pages=2,
        has_next_page=True,
        has_previous_page=False,
    )


def test_computes_slice_for_unpaginated_payload(raw):
    payload = [raw(i) for i in range(25)]

    result = paginate(payload, page=3, page_size=10)

    assert [r.student_id for r in result.records] == [20, 21, 22, 23, 24]
    assert result.pagination.total_pages == 3
    assert result.pagination.total_items == 25
    assert result.pagination.has_next_page is False
    assert result.pagination.has_previous_page is True


@pytest.mark.parametrize("total", [0, 1, 9, 10, 11, 25, 40])
@pytest.mark.parametrize("page_size", [1, 3, 10, 50])
@pytest.mark.parametrize("page", [1, 2, 3, 5])
def test_computed_and_adopted_pagination_agree(raw, total, page_size, page):
    full = [raw(i, "PRESENT" if i % 2 else None) for i in range(total)]

    computed = paginate(full, page=page, page_size=page_size)
    adopted = paginate(server_paginated(full, page, page_size), page=page, page_size=page_size)

    assert computed.records == adopted.records
    assert computed.pagination == adopted.pagination


def test_page_past_the_end_is_empty_not_clamped(raw):
    result = paginate([raw(i) for i in range(5)], page=4, page_size=2)

    assert result.records == ()
    assert result.pagination.current_page == 4
    assert result.pagination.total_pages == 3
    assert result.pagination.has_next_page is False
    assert result.pagination.has_previous_page is True


def test_mode_is_selected_by_rows_key(raw):
    assert isinstance(select_pagination({"rows": []}), AdoptedPagination)
    assert isinstance(select_pagination([raw(1)]), ComputedPagination)
    assert isinstance(select_pagination({"records": [raw(1)]}), ComputedPagination)


def test_wrapped_full_set_is_paged_client_side(raw):
    result = paginate({"attendance": [raw(i) for i in range(4)]}, page=2, page_size=3)

    assert [r.student_id for r in result.records] == [3]
    assert result.pagination.total_items == 4


def test_adopted_without_count_estimates_from_position(raw):
    result = paginate({"rows": [raw(1), raw(2)], "currentPage": 3, "pageSize": 5}, page=1, page_size=10)

    assert result.pagination.current_page == 3
    assert result.pagination.page_size == 5
    assert result.pagination.total_items == 12
    assert result.pagination.total_pages == 3


@pytest.mark.parametrize("page, page_size", [(0, 10), (1, 0), (-1, 5)])
def test_invalid_page_parameters_are_rejected(page, page_size):
    with pytest.raises(ValidationError):
        paginate([], page=page, page_size=page_size)


def test_empty_set_still_has_one_page():
    state = paginate([], page=1, page_size=10).pagination

    assert state.total_pages == 1
    assert state.has_next_page is False
    assert empty_page(10).pagination == state


def test_roster_fallback_is_all_unset_and_pages_normally():
    roster = [RosterEntry(id=i, name=f"S{i}", roll_number=str(i)) for i in range(1, 13)]

    records = roster_fallback_records(roster)
    result = paginate(records, page=2, page_size=10)

    assert all(r.status is None and r.remarks is None for r in records)
    assert [r.student_id for r in result.records] == [11, 12]
    assert result.pagination.total_pages == 2
