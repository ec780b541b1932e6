from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from ..attendance.model import AttendanceRecord, DayBucket
from ..core.constants import EMPTY_REMARKS_LABEL, NOT_MARKED_LABEL, SHEET_NAME_MAX_LENGTH
from ..core.enums import AttendanceStatus, ExportFormat
from ..stats.aggregator import attendance_rate
from ..stats.model import TrendPoint
from .model import ReportMeta

DAY_TABLE_COLUMNS = ["Name", "Roll Number", "Status", "Remarks"]
SUMMARY_COLUMNS = ["Date", "Present", "Absent", "Total", "Attendance %"]
CONSOLIDATED_COLUMNS = ["Date", "Name", "Roll Number", "Status", "Remarks"]


def status_label(record: AttendanceRecord) -> str:
    return record.status.value if record.status else NOT_MARKED_LABEL


def remarks_label(record: AttendanceRecord) -> str:
    if record.status is AttendanceStatus.ABSENT and record.remarks and record.remarks.strip():
        return record.remarks.strip()
    return EMPTY_REMARKS_LABEL


def day_table_rows(records: Iterable[AttendanceRecord]) -> list[list[str]]:
    return [[r.student_name, r.roll_number, status_label(r), remarks_label(r)] for r in records]


def summary_rows(trend: Sequence[TrendPoint]) -> list[list]:
    return [
        [p.date.isoformat(), p.present, p.absent, p.total, f"{attendance_rate(p.present, p.absent)}%"]
        for p in trend
    ]


def consolidated_rows(buckets: Iterable[DayBucket]) -> list[list[str]]:
    return [[b.iso_date, *row] for b in buckets for row in day_table_rows(b.records)]


def day_sheet_name(index: int, day: date) -> str:
    """Excel rejects ``/ \\ ? * [ ] :`` and names over 31 chars; ISO dates only need the dashes swapped."""
    return f"Day_{index}_{day.isoformat().replace('-', '_')}"[:SHEET_NAME_MAX_LENGTH]


def day_filename(day: date, meta: ReportMeta, fmt: ExportFormat) -> str:
    return f"attendance-{day.isoformat()}-{meta.file_suffix}.{fmt.value}"


def window_filename(start: date, end: date, meta: ReportMeta, fmt: ExportFormat) -> str:
    return f"last-week-attendance-{meta.file_suffix}-{start.isoformat()}-to-{end.isoformat()}.{fmt.value}"
