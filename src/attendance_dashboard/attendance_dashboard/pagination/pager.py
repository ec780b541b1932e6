"""Uniform paging over server-paginated and unpaginated attendance payloads.

Pages past the last one are not clamped: they come back empty with the
requested page number, exactly like an offset/limit query on the server.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from math import ceil
from typing import Any, Iterable, Mapping

from ..attendance.model import AttendanceRecord, RosterEntry
from ..attendance.normalizer import normalize_records
from ..common.validators import require_positive_int


@dataclass(frozen=True)
class PaginationState:
    current_page: int
    page_size: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def derive(cls, *, current_page: int, page_size: int, total_items: int) -> "PaginationState":
        total_pages = max(1, ceil(total_items / page_size))
        return cls(
            current_page=current_page,
            page_size=page_size,
            total_items=total_items,
            total_pages=total_pages,
            has_next_page=current_page < total_pages,
            has_previous_page=current_page > 1,
        )

    def to_dict(self) -> dict:
        return {
            "currentPage": self.current_page,
            "pageSize": self.page_size,
            "totalItems": self.total_items,
            "totalPages": self.total_pages,
            "hasNextPage": self.has_next_page,
            "hasPreviousPage": self.has_previous_page,
        }


@dataclass(frozen=True)
class Page:
    records: tuple[AttendanceRecord, ...]
    pagination: PaginationState
    from_fallback: bool = field(default=False, compare=False)


def _positive_or(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def _count_or(value: Any, default: int) -> int:
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 0 else default


def _bool_or(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


class Pagination(ABC):
    """Produce one page of records plus its PaginationState."""

    @abstractmethod
    def paginate(self, payload: Any, *, page: int, page_size: int) -> Page:
        raise NotImplementedError


class AdoptedPagination(Pagination):
    """The server already paginated: take ``rows`` and its metadata as given."""

    def paginate(self, payload: Any, *, page: int, page_size: int) -> Page:
        meta: Mapping = payload if isinstance(payload, Mapping) else {}
        records = normalize_records(meta.get("rows") or [])

        current_page = _positive_or(meta.get("currentPage"), page)
        size = _positive_or(meta.get("pageSize"), page_size)
        # Without a count, everything before this page plus this page is all we know.
        total_items = _count_or(meta.get("count"), (current_page - 1) * size + len(records))

        derived = PaginationState.derive(current_page=current_page, page_size=size, total_items=total_items)
        total_pages = _positive_or(meta.get("totalPages"), derived.total_pages)
        state = PaginationState(
            current_page=current_page,
            page_size=size,
            total_items=total_items,
            total_pages=total_pages,
            has_next_page=_bool_or(meta.get("hasNextPage"), current_page < total_pages),
            has_previous_page=_bool_or(meta.get("hasPreviousPage"), current_page > 1),
        )
        return Page(records=tuple(records), pagination=state)


class ComputedPagination(Pagination):
    """The payload is the full record set: slice it here."""

    def paginate(self, payload: Any, *, page: int, page_size: int) -> Page:
        records = normalize_records(payload)
        start = (page - 1) * page_size
        end = start + page_size
        state = PaginationState.derive(current_page=page, page_size=page_size, total_items=len(records))
        return Page(records=tuple(records[start:end]), pagination=state)


def is_server_paginated(payload: Any) -> bool:
    return isinstance(payload, Mapping) and "rows" in payload


def select_pagination(payload: Any) -> Pagination:
    return AdoptedPagination() if is_server_paginated(payload) else ComputedPagination()


def paginate(payload: Any, *, page: int, page_size: int) -> Page:
    page = require_positive_int(page, "page")
    page_size = require_positive_int(page_size, "page_size")
    return select_pagination(payload).paginate(payload, page=page, page_size=page_size)


def roster_fallback_records(roster: Iterable[RosterEntry]) -> list[AttendanceRecord]:
    """One unmarked record per roster entry, used when the attendance query fails."""
    return [
        AttendanceRecord(student_id=s.id, student_name=s.name, roll_number=s.roll_number)
        for s in roster
    ]


def empty_page(page_size: int) -> Page:
    state = PaginationState.derive(current_page=1, page_size=page_size, total_items=0)
    return Page(records=(), pagination=state)
