from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .admin.service import AdminService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.repository import AuditRepository
from .common.datetime_utils import now_local
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .jobs.absence_sweeper import AbsenceSweeper
from .reports.csv_service import CsvReportService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    audit_repo: AuditRepository

    attendance_service: AttendanceService
    csv_report_service: CsvReportService
    admin_service: AdminService
    absence_sweeper: AbsenceSweeper


def assemble(
    *,
    attendance_repo: AttendanceRepository,
    employees_repo: EmployeeRepository,
    audit_repo: AuditRepository,
    clock: Callable[[], datetime] = now_local,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of already-built repositories (MySQL or fakes)."""
    attendance_service = AttendanceService(attendance_repo, clock=clock)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        audit_repo=audit_repo,
        attendance_service=attendance_service,
        csv_report_service=CsvReportService(attendance_service, employees_repo, audit_repo),
        admin_service=AdminService(attendance_repo, employees_repo, clock=clock),
        absence_sweeper=AbsenceSweeper(attendance_repo, employees_repo, clock=clock),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        attendance_repo=MySQLAttendanceRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        audit_repo=MySQLAuditRepository(conn),
        conn=conn,
    )
