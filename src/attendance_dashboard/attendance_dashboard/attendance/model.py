from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One student's mark for one day. ``status=None`` means not marked yet.

    ``student_id`` is None only for malformed payload elements.
    """

    student_id: Optional[int]
    student_name: str
    roll_number: str
    status: Optional[AttendanceStatus] = None
    remarks: Optional[str] = None

    @property
    def is_marked(self) -> bool:
        return self.status is not None

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "studentName": self.student_name,
            "rollNumber": self.roll_number,
            "status": self.status.value if self.status else None,
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class DayBucket:
    """All records fetched for a single calendar date, in roster order."""

    date: date
    records: tuple[AttendanceRecord, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def iso_date(self) -> str:
        return self.date.isoformat()


@dataclass(frozen=True)
class RosterEntry:
    id: int
    name: str
    roll_number: str


@dataclass(frozen=True)
class ClassInfo:
    """Class as listed by the remote service, enriched with its recent attendance rate."""

    id: int
    name: str
    student_count: int = 0
    attendance_rate: Optional[int] = None
    last_activity: Optional[date] = None
