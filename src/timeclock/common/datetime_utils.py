from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.constants import DATE_FORMAT
from ..core.exceptions import InvalidDateFormat

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        raise InvalidDateFormat()
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise InvalidDateFormat()


def format_iso_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Services take this as their default clock so tests can inject another.
    """
    return datetime.now()


def truncate_to_millis(value: datetime) -> datetime:
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def today_string(now: datetime) -> str:
    return format_iso_date(now.date())


def month_window(year: int, month: int) -> tuple[str, str]:
    """Return ``[first-of-month, first-of-next-month)`` as ISO strings.

    Work dates are fixed-width, so comparing the strings is the same as
    comparing the dates.
    """
    start = f"{year:04d}-{month:02d}-01"
    if month == 12:
        end = f"{year + 1:04d}-01-01"
    else:
        end = f"{year:04d}-{month + 1:02d}-01"
    return start, end


def iter_dates(start: str, end: str) -> Iterator[str]:
    """Yield every ISO date from start to end, both inclusive."""
    current = parse_iso_date(start)
    last = parse_iso_date(end)
    while current <= last:
        yield format_iso_date(current)
        current += timedelta(days=1)


def parse_timestamp(value) -> datetime | None:
    """Accept datetime, ISO-8601 string (optionally ``Z`` suffixed) or None."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        v = value.strip()
        if v.endswith("Z"):
            v = v[:-1]
        try:
            return datetime.fromisoformat(v)
        except ValueError:
            raise InvalidDateFormat(f"Invalid timestamp: {value!r}")
    raise InvalidDateFormat(f"Invalid timestamp: {value!r}")
