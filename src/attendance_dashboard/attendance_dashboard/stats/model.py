from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class SummaryStats:
    present_count: int = 0
    absent_count: int = 0
    rate: int = 0

    @property
    def total_marked(self) -> int:
        return self.present_count + self.absent_count


@dataclass(frozen=True)
class ClassRollup:
    class_name: str
    rate: int
    total_students: int

    def to_dict(self) -> dict:
        return {"className": self.class_name, "attendanceRate": self.rate, "totalStudents": self.total_students}


@dataclass(frozen=True)
class TrendPoint:
    """One chart/report row per day of the window."""

    date: date
    present: int
    absent: int
    total: int

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "present": self.present, "absent": self.absent, "total": self.total}


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    present_today: int
    absent_today: int
    average_attendance: int
    active_classes: int

    def to_dict(self) -> dict:
        return {
            "totalStudents": self.total_students,
            "presentToday": self.present_today,
            "absentToday": self.absent_today,
            "averageAttendance": self.average_attendance,
            "activeClasses": self.active_classes,
        }
