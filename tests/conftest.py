from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

import pytest

from src.attendance_dashboard.attendance_dashboard.attendance.model import AttendanceRecord, ClassInfo, RosterEntry
from src.attendance_dashboard.attendance_dashboard.core.enums import AttendanceStatus
from src.attendance_dashboard.attendance_dashboard.core.exceptions import RemoteServiceError


class FakeAttendanceSource:
    """In-memory stand-in for the remote attendance service.

    ``payloads`` maps a date to the raw payload returned for it; dates listed
    in ``failing`` raise ``RemoteServiceError``.
    """

    def __init__(
        self,
        payloads: Optional[dict[date, Any]] = None,
        *,
        failing: Optional[set[date]] = None,
        roster: Optional[list[RosterEntry]] = None,
        roster_fails: bool = False,
        classes: Optional[list[ClassInfo]] = None,
        class_stats: Optional[dict[int, dict]] = None,
    ):
        self.payloads = payloads or {}
        self.failing = failing or set()
        self.roster = roster or []
        self.roster_fails = roster_fails
        self.classes = classes or []
        self.class_stats = class_stats or {}
        self.calls: list[dict] = []

    async def get_attendance_for_date(self, day, *, class_id=None, page=None, page_size=None):
        self.calls.append({"day": day, "class_id": class_id, "page": page, "page_size": page_size})
        if day in self.failing:
            raise RemoteServiceError(f"boom on {day}")
        return self.payloads.get(day, [])

    async def get_class_stats(self, class_id, *, days):
        if class_id not in self.class_stats:
            raise RemoteServiceError("no stats", status_code=500)
        return self.class_stats[class_id]

    async def list_classes(self, *, department_id=None):
        return list(self.classes)

    async def list_students(self, *, class_id=None):
        if self.roster_fails:
            raise RemoteServiceError("roster down")
        return list(self.roster)


def make_record(student_id: int, status: Optional[str] = None, remarks: Optional[str] = None) -> AttendanceRecord:
    return AttendanceRecord(
        student_id=student_id,
        student_name=f"Student {student_id}",
        roll_number=f"R{student_id:03d}",
        status=AttendanceStatus(status) if status else None,
        remarks=remarks,
    )


def raw_record(student_id: int, status: Optional[str] = None, remarks: Optional[str] = None) -> dict:
    return {
        "studentId": student_id,
        "studentName": f"Student {student_id}",
        "rollNumber": f"R{student_id:03d}",
        "status": status,
        "remarks": remarks,
    }


@pytest.fixture
def fake_source_cls():
    return FakeAttendanceSource


@pytest.fixture
def record():
    return make_record


@pytest.fixture
def raw():
    return raw_record


@pytest.fixture
def anchor_day() -> date:
    return date(2024, 6, 10)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 10, 9, 30, 0)
