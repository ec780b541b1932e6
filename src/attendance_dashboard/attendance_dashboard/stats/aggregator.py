from __future__ import annotations

from typing import Iterable, Sequence

from ..attendance.model import AttendanceRecord, ClassInfo, DayBucket
from ..core.enums import AttendanceStatus
from .model import ClassRollup, DashboardStats, SummaryStats, TrendPoint


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounding .5 upwards (dashboard figures never use banker's rounding)."""
    if denominator <= 0:
        return 0
    return (2 * numerator + denominator) // (2 * denominator)


def attendance_rate(present: int, absent: int) -> int:
    """Percentage of marked records that are present, 0 when nothing is marked."""
    return round_half_up(present * 100, present + absent)


class StatsAggregator:
    """Reduce normalized buckets into summary figures. Never renders anything."""

    def summarize(self, records: Iterable[AttendanceRecord]) -> SummaryStats:
        present = absent = 0
        for r in records:
            if r.status is AttendanceStatus.PRESENT:
                present += 1
            elif r.status is AttendanceStatus.ABSENT:
                absent += 1
        return SummaryStats(present_count=present, absent_count=absent, rate=attendance_rate(present, absent))

    def window_stats(self, buckets: Iterable[DayBucket]) -> SummaryStats:
        return self.summarize(r for b in buckets for r in b.records)

    def weekly_trend(self, buckets: Sequence[DayBucket]) -> list[TrendPoint]:
        points = []
        for bucket in buckets:
            stats = self.summarize(bucket.records)
            points.append(
                TrendPoint(
                    date=bucket.date,
                    present=stats.present_count,
                    absent=stats.absent_count,
                    total=len(bucket.records),
                )
            )
        return points

    def class_rollups(self, classes: Iterable[ClassInfo]) -> list[ClassRollup]:
        return [
            ClassRollup(class_name=c.name, rate=c.attendance_rate or 0, total_students=c.student_count or 0)
            for c in classes
        ]

    def average_attendance(self, classes: Sequence[ClassInfo], today_records: Iterable[AttendanceRecord]) -> int:
        """Average class rate across classes that reported something.

        A zero or unknown class rate means "no signal", not 0%; when no class
        has a signal, the raw rate of today's records is used instead.
        """

        rates = [c.attendance_rate for c in classes if c.attendance_rate]
        if rates:
            return round_half_up(sum(rates), len(rates))
        return self.summarize(today_records).rate

    def dashboard_stats(
        self,
        today_records: Sequence[AttendanceRecord],
        classes: Sequence[ClassInfo],
        *,
        roster_size: int,
    ) -> DashboardStats:
        today = self.summarize(today_records)
        return DashboardStats(
            total_students=roster_size,
            present_today=today.present_count,
            absent_today=today.absent_count,
            average_attendance=self.average_attendance(classes, today_records),
            active_classes=sum(1 for c in classes if c.student_count > 0),
        )
