from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Mapping, Optional, Sequence

from ..attendance.fetcher import DateWindowFetcher
from ..attendance.model import AttendanceRecord, ClassInfo, DayBucket
from ..attendance.normalizer import build_bucket
from ..attendance.repository import AttendanceSource
from ..common.datetime_utils import now_local
from ..common.validators import lenient_int
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_STATS_DAYS
from ..core.enums import ExportFormat, Role
from ..core.exceptions import RemoteServiceError
from ..pagination.pager import Page, empty_page, paginate, roster_fallback_records
from ..reports.model import ExportResult, ReportMeta
from ..reports.service import ReportExporter
from ..stats.aggregator import StatsAggregator
from ..stats.model import ClassRollup, DashboardStats, TrendPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsView:
    weekly_attendance: list[TrendPoint]
    class_comparison: list[ClassRollup]
    stats: DashboardStats

    def to_dict(self) -> dict:
        return {
            "weeklyAttendance": [p.to_dict() for p in self.weekly_attendance],
            "classComparison": [c.to_dict() for c in self.class_comparison],
            "stats": self.stats.to_dict(),
        }


class DashboardService:
    """Fetch → normalize → aggregate → page or export, for one selection at a time."""

    def __init__(
        self,
        source: AttendanceSource,
        *,
        fetcher: Optional[DateWindowFetcher] = None,
        stats: Optional[StatsAggregator] = None,
        exporter: Optional[ReportExporter] = None,
        stats_days: int = 7,
    ):
        self._source = source
        self._fetcher = fetcher or DateWindowFetcher(source)
        self._stats = stats or StatsAggregator()
        self._exporter = exporter or ReportExporter(stats=self._stats)
        self._stats_days = max(1, min(MAX_STATS_DAYS, int(stats_days)))

    @property
    def exporter(self) -> ReportExporter:
        return self._exporter

    async def load_attendance_page(
        self,
        day: date,
        *,
        class_id: Optional[int] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page:
        """One page of the day's attendance, whichever way the service paginates.

        If the query fails the roster is paged instead (every student unmarked);
        if the roster is unavailable too, an empty first page is returned.
        """
        try:
            payload = await self._source.get_attendance_for_date(day, class_id=class_id, page=page, page_size=page_size)
        except RemoteServiceError as e:
            logger.warning("Attendance for %s unavailable, falling back to roster: %s", day.isoformat(), e)
            roster = await self._roster_records(class_id)
            if not roster:
                return empty_page(page_size)
            return replace(paginate(roster, page=page, page_size=page_size), from_fallback=True)
        return paginate(payload, page=page, page_size=page_size)

    async def load_day(self, day: date, *, class_id: Optional[int] = None) -> DayBucket:
        """The full record set for one day, with the same roster fallback as paging."""
        try:
            return await self._fetcher.fetch_day(day, class_id=class_id)
        except RemoteServiceError as e:
            logger.warning("Attendance for %s unavailable, falling back to roster: %s", day.isoformat(), e)
            return build_bucket(day, await self._roster_records(class_id))

    async def load_week(self, *, class_id: Optional[int] = None, today: Optional[date] = None) -> list[DayBucket]:
        return await self._fetcher.fetch_window(today or now_local().date(), class_id=class_id)

    async def load_classes(self, *, department_id: Optional[int] = None) -> list[ClassInfo]:
        """Classes enriched with their recent attendance rate.

        A class whose stats call fails keeps an unknown rate rather than 0%.
        """
        try:
            classes = list(await self._source.list_classes(department_id=department_id))
        except RemoteServiceError as e:
            logger.warning("Class list unavailable: %s", e)
            return []
        outcomes = await asyncio.gather(
            *(self._source.get_class_stats(c.id, days=self._stats_days) for c in classes),
            return_exceptions=True,
        )
        enriched = []
        for cls, outcome in zip(classes, outcomes):
            if isinstance(outcome, Exception):
                logger.warning("Stats for class %s unavailable: %s", cls.id, outcome)
                enriched.append(cls)
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            rate = lenient_int(outcome.get("attendanceRate")) if isinstance(outcome, Mapping) else None
            if rate is None:
                logger.warning("Stats for class %s carried no usable attendance rate", cls.id)
                enriched.append(cls)
                continue
            enriched.append(replace(cls, attendance_rate=rate))
        return enriched

    async def load_analytics(
        self,
        *,
        class_id: Optional[int] = None,
        department_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> AnalyticsView:
        today = today or now_local().date()
        week, classes, today_bucket, roster = await asyncio.gather(
            self.load_week(class_id=class_id, today=today),
            self.load_classes(department_id=department_id),
            self.load_day(today, class_id=class_id),
            self._roster_records(class_id),
        )
        return AnalyticsView(
            weekly_attendance=self._stats.weekly_trend(week),
            class_comparison=self._stats.class_rollups(classes),
            stats=self._stats.dashboard_stats(today_bucket.records, classes, roster_size=len(roster)),
        )

    async def class_label(self, class_id: Optional[int]) -> Optional[str]:
        if class_id is None:
            return None
        try:
            classes = await self._source.list_classes()
        except RemoteServiceError as e:
            logger.warning("Class list unavailable for labelling: %s", e)
            return "Class"
        return next((c.name for c in classes if c.id == class_id), "Class")

    async def export_day(
        self,
        day: date,
        fmt: ExportFormat,
        *,
        class_id: Optional[int] = None,
        viewer_role: Optional[Role] = None,
    ) -> ExportResult:
        bucket, label = await asyncio.gather(self.load_day(day, class_id=class_id), self.class_label(class_id))
        meta = ReportMeta(generated_at=now_local(), class_label=label, viewer_role=viewer_role)
        return self._exporter.export_day(bucket, meta, fmt)

    async def export_last_week(
        self,
        fmt: ExportFormat,
        *,
        class_id: Optional[int] = None,
        viewer_role: Optional[Role] = None,
        today: Optional[date] = None,
    ) -> ExportResult:
        buckets, label = await asyncio.gather(self.load_week(class_id=class_id, today=today), self.class_label(class_id))
        meta = ReportMeta(generated_at=now_local(), class_label=label, viewer_role=viewer_role)
        return self._exporter.export_window(buckets, meta, fmt)

    async def _roster_records(self, class_id: Optional[int]) -> Sequence[AttendanceRecord]:
        try:
            roster = await self._source.list_students(class_id=class_id)
        except RemoteServiceError as e:
            logger.warning("Roster unavailable: %s", e)
            return []
        return roster_fallback_records(roster)
