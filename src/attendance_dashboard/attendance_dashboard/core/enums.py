from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Viewer role, only used to label staff-scoped reports."""

    SUPER_ADMIN = "SUPER_ADMIN"
    STAFF = "STAFF"


class AttendanceStatus(str, Enum):
    """Attendance mark as stored by the remote service. Unset is ``None``."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"


class ExportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"
    PDF = "pdf"

    @property
    def mimetype(self) -> str:
        return {
            ExportFormat.CSV: "text/csv",
            ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            ExportFormat.PDF: "application/pdf",
        }[self]
