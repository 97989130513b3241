from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Mapping, Optional

from ..common.datetime_utils import month_window, now_local, parse_timestamp, today_string, truncate_to_millis
from ..common.validators import require_date_range, require_iso_date, require_year_month
from ..core.constants import MAX_WRITE_ATTEMPTS
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyOnBreak,
    AlreadyPunchedIn,
    AlreadyPunchedOut,
    ConcurrentModificationError,
    DuplicateRecordError,
    NoRecordFound,
    NotOnBreak,
    NotPunchedIn,
    OnBreakMustEndFirst,
    ValidationError,
)
from .calculator import StandardWorkTimeCalculator, WorkTimeCalculator
from .model import AttendanceRecord, BreakPeriod, MonthlySummary
from .repository import AttendanceRepository
from .summary import summarize_month

logger = logging.getLogger(__name__)

ADMIN_FIELDS = frozenset(
    {
        "punch_in",
        "punch_out",
        "breaks",
        "total_break_minutes",
        "total_work_minutes",
        "status",
        "is_on_break",
    }
)

Transition = Callable[[Optional[AttendanceRecord], datetime], AttendanceRecord]


class AttendanceService:
    """Per-employee, per-day punch/break state machine.

    NotStarted -> Working -> (OnBreak -> Working)* -> Done. "Today" is taken
    from the injected clock once per operation; a record left open at
    midnight stays under its old date until an admin corrects it.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: WorkTimeCalculator | None = None,
        clock: Callable[[], datetime] = now_local,
        max_attempts: int = MAX_WRITE_ATTEMPTS,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardWorkTimeCalculator()
        self._clock = clock
        self._max_attempts = max(int(max_attempts), 1)

    def _now(self) -> datetime:
        return truncate_to_millis(self._clock())

    # ---- guarded transitions -------------------------------------------

    def punch_in(self, employee_id: int) -> AttendanceRecord:
        now = self._now()
        today = today_string(now)

        if self._attendance.get_for_employee_and_date(employee_id, today):
            raise AlreadyPunchedIn()

        record = AttendanceRecord(
            employee_id=employee_id,
            work_date=today,
            punch_in=now,
            status=AttendanceStatus.PRESENT,
        )
        try:
            attendance_id = self._attendance.create(record)
        except DuplicateRecordError:
            # Lost the race against another punch-in (or the sweeper).
            raise AlreadyPunchedIn()

        logger.info("Punch in employee=%s date=%s", employee_id, today)
        return replace(record, attendance_id=attendance_id)

    def start_break(self, employee_id: int) -> AttendanceRecord:
        return self._transition(employee_id, self._apply_start_break, action="Break start")

    def end_break(self, employee_id: int) -> AttendanceRecord:
        return self._transition(employee_id, self._apply_end_break, action="Break end")

    def punch_out(self, employee_id: int) -> AttendanceRecord:
        return self._transition(employee_id, self._apply_punch_out, action="Punch out")

    def _transition(self, employee_id: int, apply: Transition, *, action: str) -> AttendanceRecord:
        now = self._now()
        today = today_string(now)

        for attempt in range(1, self._max_attempts + 1):
            current = self._attendance.get_for_employee_and_date(employee_id, today)
            updated = apply(current, now)
            updated = replace(updated, version=current.version + 1)
            if self._attendance.update(updated, expected_version=current.version):
                logger.info("%s employee=%s date=%s", action, employee_id, today)
                return updated
            logger.warning(
                "%s lost a concurrent update employee=%s date=%s attempt=%d",
                action,
                employee_id,
                today,
                attempt,
            )

        raise ConcurrentModificationError("Attendance record changed concurrently, please retry")

    def _apply_start_break(self, record: Optional[AttendanceRecord], now: datetime) -> AttendanceRecord:
        if record is None or record.punch_in is None:
            raise NotPunchedIn("Must punch in before starting a break")
        if record.punch_out is not None:
            raise AlreadyPunchedOut("Cannot start a break after punching out")
        if record.is_on_break:
            raise AlreadyOnBreak()

        return replace(record, breaks=record.breaks + (BreakPeriod(start=now),), is_on_break=True)

    def _apply_end_break(self, record: Optional[AttendanceRecord], now: datetime) -> AttendanceRecord:
        if record is None:
            raise NoRecordFound()
        if not record.is_on_break:
            raise NotOnBreak()

        breaks = list(record.breaks)
        for i in range(len(breaks) - 1, -1, -1):
            if breaks[i].is_open:
                breaks[i] = replace(breaks[i], end=now)
                break

        return replace(
            record,
            breaks=tuple(breaks),
            is_on_break=False,
            total_break_minutes=self._calculator.break_minutes(breaks),
        )

    def _apply_punch_out(self, record: Optional[AttendanceRecord], now: datetime) -> AttendanceRecord:
        if record is None:
            raise NotPunchedIn("Must punch in before punching out")
        if record.punch_out is not None:
            raise AlreadyPunchedOut()
        if record.punch_in is None:
            raise NotPunchedIn("No punch-in record found")
        if record.is_on_break:
            raise OnBreakMustEndFirst()

        break_minutes = self._calculator.break_minutes(record.breaks)
        work_minutes = self._calculator.work_minutes(record.punch_in, now, break_minutes)

        return replace(
            record,
            punch_out=now,
            total_break_minutes=break_minutes,
            total_work_minutes=work_minutes,
            status=self._calculator.decide_status(work_minutes),
        )

    # ---- reads ---------------------------------------------------------

    def get_today(self, employee_id: int) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(employee_id, today_string(self._now()))

    def get_monthly_history(self, employee_id: int, year: int, month: int) -> list[AttendanceRecord]:
        year, month = require_year_month(year, month)
        start, end = month_window(year, month)
        return list(
            self._attendance.list_between(
                employee_id,
                start=start,
                end=end,
                end_inclusive=False,
                newest_first=True,
            )
        )

    def get_monthly_summary(self, employee_id: int, year: int, month: int) -> MonthlySummary:
        return summarize_month(self.get_monthly_history(employee_id, year, month))

    def get_date_range_history(self, employee_id: int, start: str, end: str) -> list[AttendanceRecord]:
        start, end = require_date_range(start, end)
        return list(self._attendance.list_between(employee_id, start=start, end=end))

    def current_year_month(self) -> tuple[int, int]:
        now = self._now()
        return now.year, now.month

    # ---- administrative override ---------------------------------------

    def admin_upsert(self, employee_id: int, work_date: str, fields: Mapping[str, object]) -> AttendanceRecord:
        """Trusted override: write the given fields as-is.

        Bypasses the state machine. Totals are not re-derived, so the caller
        may store combinations the guarded transitions never produce.
        """
        require_iso_date(work_date)

        unknown = set(fields) - ADMIN_FIELDS
        if unknown:
            raise ValidationError(f"Unsupported fields: {', '.join(sorted(unknown))}")

        values = {name: self._coerce_admin_field(name, value) for name, value in fields.items()}
        record = self._attendance.upsert_fields(employee_id, work_date, values)

        logger.info(
            "Admin correction employee=%s date=%s fields=%s",
            employee_id,
            work_date,
            ",".join(sorted(values)) or "-",
        )
        return record

    @staticmethod
    def _coerce_admin_field(name: str, value: object) -> object:
        if name in {"punch_in", "punch_out"}:
            return parse_timestamp(value)

        if name == "breaks":
            if value is None:
                return ()
            if not isinstance(value, (list, tuple)):
                raise ValidationError("breaks must be a list")
            return tuple(_coerce_break(b) for b in value)

        if name in {"total_break_minutes", "total_work_minutes"}:
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError(f"{name} must be a non-negative integer")
            return value

        if name == "status":
            try:
                return AttendanceStatus(value)
            except ValueError:
                raise ValidationError("status must be one of: present, absent, half-day")

        if not isinstance(value, bool):
            raise ValidationError("is_on_break must be a boolean")
        return value


def _coerce_break(value: object) -> BreakPeriod:
    if isinstance(value, BreakPeriod):
        return value
    if not isinstance(value, Mapping) or not value.get("start"):
        raise ValidationError("Each break needs a start timestamp")
    return BreakPeriod(start=parse_timestamp(value["start"]), end=parse_timestamp(value.get("end")))

