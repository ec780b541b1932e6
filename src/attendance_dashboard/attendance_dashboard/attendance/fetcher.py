from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta
from typing import Optional

from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_WINDOW_DAYS
from .model import DayBucket
from .normalizer import build_bucket, normalize_records
from .repository import AttendanceSource

logger = logging.getLogger(__name__)


def window_dates(today: date, days: int) -> list[date]:
    """The ``days`` calendar dates strictly before ``today``, oldest first.

    Today is excluded so an in-progress day never mixes into historical data.
    """
    days = require_positive_int(days, "days")
    return [today - timedelta(days=offset) for offset in range(days, 0, -1)]


def date_range(today: date, days: int) -> tuple[date, date]:
    dates = window_dates(today, days)
    return dates[0], dates[-1]


class DateWindowFetcher:
    def __init__(self, source: AttendanceSource, *, window_days: int = DEFAULT_WINDOW_DAYS):
        self._source = source
        self._window_days = require_positive_int(window_days, "window_days")

    async def fetch_day(self, day: date, *, class_id: Optional[int] = None) -> DayBucket:
        """Single-day fetch. Errors propagate: the caller owns the fallback."""
        payload = await self._source.get_attendance_for_date(day, class_id=class_id)
        return build_bucket(day, normalize_records(payload))

    async def fetch_window(
        self,
        today: date,
        *,
        days: Optional[int] = None,
        class_id: Optional[int] = None,
    ) -> list[DayBucket]:
        """Fetch every day of the window concurrently, one bucket per date.

        All queries are awaited to settlement; a failing day becomes an empty
        bucket instead of failing the window. Buckets come back oldest first
        regardless of completion order.
        """

        dates = window_dates(today, days if days is not None else self._window_days)
        outcomes = await asyncio.gather(
            *(self._source.get_attendance_for_date(day, class_id=class_id) for day in dates),
            return_exceptions=True,
        )

        buckets: list[DayBucket] = []
        for day, outcome in zip(dates, outcomes):
            if isinstance(outcome, Exception):
                logger.warning("Attendance fetch for %s failed, using an empty day: %s", day.isoformat(), outcome)
                buckets.append(DayBucket(date=day))
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            buckets.append(self._settle(day, outcome))
        return buckets

    def _settle(self, day: date, payload: object) -> DayBucket:
        try:
            return build_bucket(day, normalize_records(payload))
        except Exception as e:
            logger.warning("Attendance payload for %s could not be read, using an empty day: %s", day.isoformat(), e)
            return DayBucket(date=day)
