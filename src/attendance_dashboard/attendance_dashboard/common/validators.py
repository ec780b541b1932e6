from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if number < 1:
        raise ValidationError(f"{field_name} must be at least 1")
    return number


def optional_int(value: Any, field_name: str) -> int | None:
    """Query-string helper: empty and ``ALL`` mean no filter."""
    if value is None or value == "" or str(value).upper() == "ALL":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None


def lenient_int(value: Any) -> int | None:
    """Integer from a remote field, or None when it is missing or unusable.

    Covers non-numeric strings, booleans and JSON's non-finite numbers.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None
