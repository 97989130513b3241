from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService
from ..audit.model import AuditEntry
from ..audit.repository import AuditRepository
from ..common.datetime_utils import iter_dates, parse_iso_date
from ..common.validators import require_date_range
from ..core.constants import CSV_COLUMNS, CSV_FORMULA_PREFIXES, CSV_PLACEHOLDER
from ..core.enums import AttendanceStatus, AuditAction
from ..core.exceptions import EmployeeNotFound
from ..employees.repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CsvExport:
    csv_text: str
    filename: str


def sanitize_cell(value: str) -> str:
    """Neutralize spreadsheet formulas (CSV injection)."""
    if value.startswith(CSV_FORMULA_PREFIXES):
        return f"'{value}"
    return value


def format_duration(minutes: int) -> str:
    minutes = int(minutes or 0)
    return f"{minutes // 60}h {minutes % 60}m"


def format_time(value: datetime) -> str:
    return value.strftime("%I:%M %p")


def report_filename(name: str, start: str, end: str) -> str:
    safe_name = re.sub(r"[^a-zA-Z0-9]", "_", name)
    return f"{safe_name}_{start.replace('-', '')}_to_{end.replace('-', '')}.csv"


class CsvReportService:
    """Dense day-by-day attendance export for one employee.

    Every calendar day in the range gets a row; days without a stored record
    render as Absent. Those rows are display-only and never persisted.
    """

    def __init__(self, attendance: AttendanceService, employees: EmployeeRepository, audit: AuditRepository):
        self._attendance = attendance
        self._employees = employees
        self._audit = audit

    def export_employee_attendance(
        self,
        *,
        employee_id: int,
        start_date: str,
        end_date: str,
        requested_by: int,
        origin_address: str = "",
    ) -> CsvExport:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise EmployeeNotFound()

        start, end = require_date_range(start_date, end_date)
        records = self._attendance.get_date_range_history(employee_id, start, end)
        by_date = {r.work_date: r for r in records}

        rows: list[list[str]] = []
        counts = {status: 0 for status in AttendanceStatus}
        for work_date in iter_dates(start, end):
            record = by_date.get(work_date)
            counts[record.status if record else AttendanceStatus.ABSENT] += 1
            rows.append(self._day_row(work_date, record))

        total_days = len(rows)
        blank = [""] * len(CSV_COLUMNS)
        rows.append(blank)
        rows.extend(
            self._summary_row(label, value)
            for label, value in (
                ("SUMMARY", ""),
                ("Total Days", str(total_days)),
                ("Present", str(counts[AttendanceStatus.PRESENT])),
                ("Half Days", str(counts[AttendanceStatus.HALF_DAY])),
                ("Absent", str(counts[AttendanceStatus.ABSENT])),
                ("Employee", sanitize_cell(employee.name)),
                ("Period", f"{start} to {end}"),
            )
        )

        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(CSV_COLUMNS)
        writer.writerows(rows)

        export = CsvExport(csv_text=out.getvalue(), filename=report_filename(employee.name, start, end))

        self._audit.create(
            AuditEntry(
                action=AuditAction.CSV_EXPORT,
                performed_by=int(requested_by),
                target_user_id=employee.user_id,
                details=f"Exported attendance for {employee.name} ({start} to {end})",
                ip_address=origin_address or "",
            )
        )
        logger.info(
            "CSV export employee=%s period=%s..%s days=%d by=%s from=%s",
            employee_id,
            start,
            end,
            total_days,
            requested_by,
            origin_address or "-",
        )
        return export

    @staticmethod
    def _day_row(work_date: str, record: Optional[AttendanceRecord]) -> list[str]:
        day_name = parse_iso_date(work_date).strftime("%a")
        if record is None:
            return [
                sanitize_cell(work_date),
                sanitize_cell(day_name),
                CSV_PLACEHOLDER,
                CSV_PLACEHOLDER,
                CSV_PLACEHOLDER,
                CSV_PLACEHOLDER,
                AttendanceStatus.ABSENT.label,
            ]

        def _time_cell(value: Optional[datetime]) -> str:
            return sanitize_cell(format_time(value)) if value else CSV_PLACEHOLDER

        return [
            sanitize_cell(work_date),
            sanitize_cell(day_name),
            _time_cell(record.punch_in),
            _time_cell(record.punch_out),
            sanitize_cell(format_duration(record.total_break_minutes)),
            sanitize_cell(format_duration(record.total_work_minutes)),
            sanitize_cell(record.status.label),
        ]

    @staticmethod
    def _summary_row(label: str, value: str) -> list[str]:
        return [label, value] + [""] * (len(CSV_COLUMNS) - 2)
