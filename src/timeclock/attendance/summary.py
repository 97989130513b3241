from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, MonthlySummary


def round_half_up(value: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def summarize_month(records: Iterable[AttendanceRecord]) -> MonthlySummary:
    """Fold one employee-month of records into summary statistics.

    ``total_days`` counts records, not calendar days: days without any record
    (not even a swept absence) do not show up here.
    """
    records = list(records)

    counts = {status: 0 for status in AttendanceStatus}
    work_minutes = 0
    break_minutes = 0
    for r in records:
        counts[r.status] += 1
        work_minutes += int(r.total_work_minutes or 0)
        break_minutes += int(r.total_break_minutes or 0)

    total_work_hours = round_half_up(work_minutes / 60)
    total_break_hours = round_half_up(break_minutes / 60)

    worked_days = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.HALF_DAY]
    average = round_half_up(total_work_hours / worked_days) if worked_days else 0

    return MonthlySummary(
        total_days=len(records),
        present_days=counts[AttendanceStatus.PRESENT],
        absent_days=counts[AttendanceStatus.ABSENT],
        half_days=counts[AttendanceStatus.HALF_DAY],
        total_work_hours=total_work_hours,
        total_break_hours=total_break_hours,
        average_work_hours=average,
    )
