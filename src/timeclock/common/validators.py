from __future__ import annotations

from ..core.exceptions import InvalidDateRange, ValidationError
from .datetime_utils import parse_iso_date


def require_iso_date(value: str) -> str:
    parse_iso_date(value)
    return value


def require_date_range(start: str | None, end: str | None) -> tuple[str, str]:
    if not start or not end:
        raise InvalidDateRange("Start date and end date are required")
    require_iso_date(start)
    require_iso_date(end)
    if start > end:
        raise InvalidDateRange("Start date must be before or equal to end date")
    return start, end


def require_year_month(year: int, month: int) -> tuple[int, int]:
    try:
        year, month = int(year), int(month)
    except (TypeError, ValueError):
        raise ValidationError("Year and month must be numbers")
    if not 1 <= year <= 9999:
        raise ValidationError("Year is out of range")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    return year, month
