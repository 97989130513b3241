from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable

from ...core.enums import AttendanceStatus
from ..model import BreakPeriod


class WorkTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for time aggregation)."""

    @abstractmethod
    def break_minutes(self, breaks: Iterable[BreakPeriod]) -> int:
        raise NotImplementedError

    @abstractmethod
    def work_minutes(self, punch_in: datetime, punch_out: datetime, break_minutes: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def decide_status(self, work_minutes: int) -> AttendanceStatus:
        raise NotImplementedError
