from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ..attendance.repository import AttendanceRepository
from ..attendance.summary import round_half_up
from ..common.datetime_utils import now_local, today_string
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import EmployeeNotFound, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository

logger = logging.getLogger(__name__)

_WORKED_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.HALF_DAY)


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    present_today: int
    absent_today: int
    attendance_percentage: float

    def to_dict(self) -> dict:
        return {
            "totalEmployees": self.total_employees,
            "presentToday": self.present_today,
            "absentToday": self.absent_today,
            "attendancePercentage": self.attendance_percentage,
        }


class AdminService:
    """Use case: admin dashboard, employee directory upkeep and maintenance.

    Counts only include active employees; rows belonging to deactivated
    employees are ignored until purged.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock

    def get_dashboard_stats(self) -> DashboardStats:
        today = today_string(self._clock())
        active_ids = list(self._employees.list_active_employee_ids())

        total = len(active_ids)
        present = self._attendance.count_for_date(today, employee_ids=active_ids, statuses=_WORKED_STATUSES)
        percentage = round_half_up(present / total * 100) if total else 0

        return DashboardStats(
            total_employees=total,
            present_today=present,
            absent_today=total - present,
            attendance_percentage=percentage,
        )

    def list_employees(self) -> list[Employee]:
        return list(self._employees.list_active_employees())

    def get_employees_with_status(self) -> list[dict]:
        today = today_string(self._clock())
        by_employee = {r.employee_id: r for r in self._attendance.list_for_date(today)}

        out: list[dict] = []
        for emp in self._employees.list_active_employees():
            record = by_employee.get(emp.user_id)
            out.append({**emp.to_dict(), "todayAttendance": record.to_dict() if record else None})
        return out

    def deactivate_employee(self, employee_id: int) -> None:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise EmployeeNotFound()
        if employee.role == Role.ADMIN:
            raise ValidationError("Cannot deactivate an admin account")

        self._employees.set_active(employee_id, is_active=False)
        logger.info("Employee deactivated id=%s", employee_id)

    def purge_orphaned_attendance(self) -> int:
        active_ids = list(self._employees.list_active_employee_ids())
        deleted = self._attendance.delete_except(active_ids)
        logger.info("Purged %d orphaned attendance record(s); %d active employee(s)", deleted, len(active_ids))
        return deleted
