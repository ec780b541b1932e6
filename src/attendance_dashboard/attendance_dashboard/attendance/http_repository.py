from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..api.connection import ApiConnection
from ..api.http_base import get_json, normalize_api_date
from ..common.validators import lenient_int
from ..core.constants import MISSING_VALUE_LABEL, ROSTER_PAGE_SIZE
from .model import ClassInfo, RosterEntry
from .normalizer import classify_payload
from .repository import AttendanceSource


def _unwrap_rows(payload: Any) -> Sequence[Any]:
    """Listing endpoints answer either ``{rows: [...], count}`` or a bare list."""
    return classify_payload(payload).items


class HttpAttendanceRepository(AttendanceSource):
    def __init__(self, conn_factory: ApiConnection):
        self._conn_factory = conn_factory

    async def get_attendance_for_date(
        self,
        day: date,
        *,
        class_id: Optional[int] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> Any:
        return await get_json(
            self._conn_factory,
            f"/attendance/date/{day.isoformat()}",
            {"classId": class_id, "page": page, "pageSize": page_size},
        )

    async def get_class_stats(self, class_id: int, *, days: int) -> dict:
        payload = await get_json(self._conn_factory, f"/attendance/stats/{int(class_id)}", {"days": int(days)})
        if not isinstance(payload, dict):
            return {}
        return payload

    async def list_classes(self, *, department_id: Optional[int] = None) -> Sequence[ClassInfo]:
        payload = await get_json(self._conn_factory, "/users/classes", {"departmentId": department_id})
        classes = []
        for r in _unwrap_rows(payload):
            class_id = lenient_int(r.get("id")) if isinstance(r, dict) else None
            if class_id is None:
                continue
            classes.append(
                ClassInfo(
                    id=class_id,
                    name=str(r.get("name") or "Class"),
                    student_count=max(0, lenient_int(r.get("studentCount")) or 0),
                    attendance_rate=lenient_int(r.get("attendanceRate")),
                    last_activity=normalize_api_date(r.get("lastActivity")),
                )
            )
        return classes

    async def list_students(self, *, class_id: Optional[int] = None) -> Sequence[RosterEntry]:
        payload = await get_json(
            self._conn_factory,
            "/users/students",
            {"classId": class_id, "page": 1, "pageSize": ROSTER_PAGE_SIZE},
        )
        roster = []
        for r in _unwrap_rows(payload):
            student_id = lenient_int(r.get("id")) if isinstance(r, dict) else None
            if student_id is None:
                continue
            roster.append(
                RosterEntry(
                    id=student_id,
                    name=str(r.get("name") or MISSING_VALUE_LABEL),
                    roll_number=str(r.get("rollNumber") or MISSING_VALUE_LABEL),
                )
            )
        return roster
