"""Turn whatever the attendance endpoint returned into a flat record list.

The "attendance on date X" response differs by call site and API version:
a paginated ``rows`` envelope, a bare list, or a ``records``/``attendance``
wrapper. Everything downstream only ever sees ``list[AttendanceRecord]``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..common.validators import lenient_int
from ..core.constants import MISSING_VALUE_LABEL
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, DayBucket

logger = logging.getLogger(__name__)


class PayloadShape(str, Enum):
    """Known response shapes, plus ``UNKNOWN`` for everything else."""

    BARE_LIST = "bare_list"
    RECORDS_FIELD = "records_field"
    ATTENDANCE_FIELD = "attendance_field"
    FIRST_LIST_FIELD = "first_list_field"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClassifiedPayload:
    shape: PayloadShape
    items: Sequence[Any] = ()


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _probe_bare_list(payload: Any) -> Optional[Sequence[Any]]:
    return payload if _is_sequence(payload) else None


def _probe_field(name: str) -> Callable[[Any], Optional[Sequence[Any]]]:
    def probe(payload: Any) -> Optional[Sequence[Any]]:
        if isinstance(payload, Mapping) and _is_sequence(payload.get(name)):
            return payload[name]
        return None

    return probe


def _probe_first_list_field(payload: Any) -> Optional[Sequence[Any]]:
    if not isinstance(payload, Mapping):
        return None
    for value in payload.values():
        if _is_sequence(value):
            return value
    return None


# Probing order matters: first match wins.
PAYLOAD_PROBES: tuple[tuple[PayloadShape, Callable[[Any], Optional[Sequence[Any]]]], ...] = (
    (PayloadShape.BARE_LIST, _probe_bare_list),
    (PayloadShape.RECORDS_FIELD, _probe_field("records")),
    (PayloadShape.ATTENDANCE_FIELD, _probe_field("attendance")),
    (PayloadShape.FIRST_LIST_FIELD, _probe_first_list_field),
)


def classify_payload(payload: Any) -> ClassifiedPayload:
    for shape, probe in PAYLOAD_PROBES:
        items = probe(payload)
        if items is not None:
            return ClassifiedPayload(shape=shape, items=items)
    return ClassifiedPayload(shape=PayloadShape.UNKNOWN)


def _first_present(raw: Mapping, *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _as_text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def parse_status(value: Any) -> Optional[AttendanceStatus]:
    if not isinstance(value, str):
        return None
    try:
        return AttendanceStatus(value.strip().upper())
    except ValueError:
        return None


def coerce_record(raw: Any) -> AttendanceRecord:
    """Best-effort conversion of one payload element; never raises."""
    if isinstance(raw, AttendanceRecord):
        return raw
    if not isinstance(raw, Mapping):
        return AttendanceRecord(student_id=None, student_name=MISSING_VALUE_LABEL, roll_number=MISSING_VALUE_LABEL)

    remarks = _first_present(raw, "remarks", "remark")
    return AttendanceRecord(
        student_id=lenient_int(_first_present(raw, "studentId", "student_id", "id")),
        student_name=_as_text(_first_present(raw, "studentName", "student_name", "name"), MISSING_VALUE_LABEL),
        roll_number=_as_text(_first_present(raw, "rollNumber", "roll_number"), MISSING_VALUE_LABEL),
        status=parse_status(raw.get("status")),
        remarks=str(remarks) if remarks is not None else None,
    )


def normalize_records(payload: Any) -> list[AttendanceRecord]:
    """Extract the attendance records from a decoded response payload.

    Pure function: returns ``[]`` for anything it does not recognise.
    """
    classified = classify_payload(payload)
    if classified.shape is PayloadShape.UNKNOWN:
        logger.debug("Unrecognised attendance payload of type %s", type(payload).__name__)
        return []
    return [coerce_record(item) for item in classified.items]


def build_bucket(day: date, records: Iterable[AttendanceRecord]) -> DayBucket:
    """Wrap records for one date, keeping the first record seen per student."""
    seen: set[int] = set()
    kept: list[AttendanceRecord] = []
    for record in records:
        if record.student_id is not None:
            if record.student_id in seen:
                continue
            seen.add(record.student_id)
        kept.append(record)
    return DayBucket(date=day, records=tuple(kept))
