from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from ...core.constants import HALF_DAY_THRESHOLD_MINUTES
from ...core.enums import AttendanceStatus
from ..model import BreakPeriod
from .base import WorkTimeCalculator

_MS_PER_MINUTE = 60_000


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, rounded half-up on millisecond deltas."""
    ms = (end - start) // timedelta(milliseconds=1)
    return (ms + _MS_PER_MINUTE // 2) // _MS_PER_MINUTE


class StandardWorkTimeCalculator(WorkTimeCalculator):
    """Standard rule: (out - in) - closed breaks, not below 0; half-day under 4h."""

    def __init__(self, *, half_day_threshold_minutes: int = HALF_DAY_THRESHOLD_MINUTES):
        self._threshold = int(half_day_threshold_minutes)

    def break_minutes(self, breaks: Iterable[BreakPeriod]) -> int:
        # Open breaks are not counted until they are closed.
        return sum(minutes_between(b.start, b.end) for b in breaks if b.end is not None)

    def work_minutes(self, punch_in: datetime, punch_out: datetime, break_minutes: int) -> int:
        shift = minutes_between(punch_in, punch_out)
        return max(shift - int(break_minutes or 0), 0)

    def decide_status(self, work_minutes: int) -> AttendanceStatus:
        if work_minutes < self._threshold:
            return AttendanceStatus.HALF_DAY
        return AttendanceStatus.PRESENT
