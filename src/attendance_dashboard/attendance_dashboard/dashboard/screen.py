from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Optional

from ..attendance.model import DayBucket
from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import StaleResultError
from ..pagination.pager import Page
from .service import DashboardService

logger = logging.getLogger(__name__)

# Passed as class_id to keep the current class filter; None means all classes.
KEEP = object()


class FetchGeneration:
    """Monotonic token: only the most recently issued fetch may apply its result."""

    def __init__(self) -> None:
        self._current = 0

    def issue(self) -> int:
        self._current += 1
        return self._current

    def is_current(self, token: int) -> bool:
        return token == self._current


@dataclass(frozen=True)
class Selection:
    day: date
    class_id: Optional[int] = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


class DashboardScreen:
    """State of one viewer's attendance screen.

    Every selection change issues a new generation; a fetch that completes
    after a newer one was issued raises ``StaleResultError`` instead of
    overwriting what is on screen.
    """

    def __init__(self, service: DashboardService, *, today: date, page_size: int = DEFAULT_PAGE_SIZE):
        self._service = service
        self._page_generation = FetchGeneration()
        self._week_generation = FetchGeneration()
        self.selection = Selection(day=today, page_size=require_positive_int(page_size, "page_size"))
        self.page: Optional[Page] = None
        self.week: list[DayBucket] = []

    async def select(
        self,
        *,
        day: Optional[date] = None,
        class_id: Any = KEEP,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> Page:
        """Change date/class/page/size and load the matching page.

        Changing the date, class or size goes back to page 1. A class change
        also invalidates any week fetch still in flight.
        """
        current = self.selection
        if class_id is KEEP:
            class_id = current.class_id
        changed_filter = (day or current.day) != current.day or class_id != current.class_id
        changed_size = page_size is not None and page_size != current.page_size
        if changed_filter or changed_size:
            page = page or 1
        selection = replace(
            current,
            day=day or current.day,
            class_id=class_id,
            page=require_positive_int(page or current.page, "page"),
            page_size=require_positive_int(page_size or current.page_size, "page_size"),
        )
        if class_id != current.class_id:
            self._week_generation.issue()
        self.selection = selection

        token = self._page_generation.issue()
        result = await self._service.load_attendance_page(
            selection.day,
            class_id=selection.class_id,
            page=selection.page,
            page_size=selection.page_size,
        )
        if not self._page_generation.is_current(token):
            logger.debug("Discarding stale attendance page for %s", selection)
            raise StaleResultError("Attendance page superseded by a newer selection")
        self.page = result
        return result

    async def refresh_week(self, *, today: Optional[date] = None) -> list[DayBucket]:
        token = self._week_generation.issue()
        class_id = self.selection.class_id
        buckets = await self._service.load_week(class_id=class_id, today=today)
        if not self._week_generation.is_current(token):
            logger.debug("Discarding stale week fetch for class %s", class_id)
            raise StaleResultError("Week fetch superseded by a newer selection")
        self.week = buckets
        return buckets
