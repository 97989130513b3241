from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="milliseconds") if value else None


@dataclass(frozen=True)
class BreakPeriod:
    start: datetime
    end: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.end is None

    def to_dict(self) -> dict:
        return {"start": _iso(self.start), "end": _iso(self.end)}


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day.

    ``total_break_minutes``, ``total_work_minutes`` and ``is_on_break`` are
    denormalized from ``breaks``/``punch_in``/``punch_out``; the service
    recomputes them on every guarded transition. ``version`` is bumped on
    every write and used for compare-and-swap updates.
    """

    employee_id: int
    work_date: str
    punch_in: Optional[datetime] = None
    punch_out: Optional[datetime] = None
    breaks: tuple[BreakPeriod, ...] = field(default_factory=tuple)
    total_break_minutes: int = 0
    total_work_minutes: int = 0
    status: AttendanceStatus = AttendanceStatus.PRESENT
    is_on_break: bool = False
    attendance_id: Optional[int] = None
    version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "userId": self.employee_id,
            "date": self.work_date,
            "punchIn": _iso(self.punch_in),
            "punchOut": _iso(self.punch_out),
            "breaks": [b.to_dict() for b in self.breaks],
            "totalBreakMinutes": self.total_break_minutes,
            "totalWorkMinutes": self.total_work_minutes,
            "status": self.status.value,
            "isOnBreak": self.is_on_break,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class MonthlySummary:
    total_days: int
    present_days: int
    absent_days: int
    half_days: int
    total_work_hours: float
    total_break_hours: float
    average_work_hours: float

    def to_dict(self) -> dict:
        return {
            "totalDays": self.total_days,
            "presentDays": self.present_days,
            "absentDays": self.absent_days,
            "halfDays": self.half_days,
            "totalWorkHours": self.total_work_hours,
            "totalBreakHours": self.total_break_hours,
            "averageWorkHours": self.average_work_hours,
        }
