from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from .model import ClassInfo, RosterEntry


class AttendanceSource(Protocol):
    """Remote attendance service, seen from the dashboard.

    Implementations raise ``RemoteServiceError`` on transport or HTTP errors.
    """

    async def get_attendance_for_date(
        self,
        day: date,
        *,
        class_id: Optional[int] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> Any:
        """Return the decoded payload as-is; its shape is not guaranteed."""

        raise NotImplementedError

    async def get_class_stats(self, class_id: int, *, days: int) -> dict:
        raise NotImplementedError

    async def list_classes(self, *, department_id: Optional[int] = None) -> Sequence[ClassInfo]:
        raise NotImplementedError

    async def list_students(self, *, class_id: Optional[int] = None) -> Sequence[RosterEntry]:
        raise NotImplementedError
