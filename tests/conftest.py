from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Optional

import pytest

from timeclock.attendance.model import AttendanceRecord
from timeclock.audit.model import AuditEntry
from timeclock.container import assemble
from timeclock.core.enums import AttendanceStatus, Role
from timeclock.core.exceptions import DuplicateRecordError
from timeclock.employees.model import Employee
from timeclock.main import create_app


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, *args) -> None:
        self.now = datetime(*args)

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class InMemoryAttendance:
    """Dict-backed store keyed by (employee_id, work_date), like the unique key."""

    def __init__(self):
        self.rows: dict[tuple[int, str], AttendanceRecord] = {}
        self._id = 0
        # Callbacks run right before the next update(s): simulates another writer.
        self.before_update: list[Callable[[], None]] = []

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._id += 1
        record = replace(record, attendance_id=self._id)
        self.rows[(record.employee_id, record.work_date)] = record
        return record

    def get_for_employee_and_date(self, employee_id: int, work_date: str) -> Optional[AttendanceRecord]:
        return self.rows.get((employee_id, work_date))

    def create(self, record: AttendanceRecord) -> int:
        if (record.employee_id, record.work_date) in self.rows:
            raise DuplicateRecordError("duplicate")
        return self.add(record).attendance_id

    def update(self, record: AttendanceRecord, *, expected_version: int) -> bool:
        if self.before_update:
            self.before_update.pop(0)()
        key = (record.employee_id, record.work_date)
        current = self.rows.get(key)
        if current is None or current.version != expected_version:
            return False
        self.rows[key] = record
        return True

    def list_between(self, employee_id, *, start, end, end_inclusive=True, newest_first=False):
        items = [
            r
            for r in self.rows.values()
            if r.employee_id == employee_id
            and r.work_date >= start
            and (r.work_date <= end if end_inclusive else r.work_date < end)
        ]
        return sorted(items, key=lambda r: r.work_date, reverse=newest_first)

    def upsert_fields(self, employee_id, work_date, fields):
        current = self.rows.get((employee_id, work_date))
        if current is None:
            current = self.add(AttendanceRecord(employee_id=employee_id, work_date=work_date))
            version = 0
        else:
            version = current.version + 1
        updated = replace(current, version=version, **fields)
        self.rows[(employee_id, work_date)] = updated
        return updated

    def list_for_date(self, work_date):
        return [r for r in self.rows.values() if r.work_date == work_date]

    def insert_absent(self, employee_ids, work_date) -> int:
        inserted = 0
        for employee_id in employee_ids:
            if (employee_id, work_date) not in self.rows:
                self.add(AttendanceRecord(employee_id=employee_id, work_date=work_date, status=AttendanceStatus.ABSENT))
                inserted += 1
        return inserted

    def count_for_date(self, work_date, *, employee_ids, statuses) -> int:
        ids, statuses = set(employee_ids), set(statuses)
        return sum(1 for r in self.list_for_date(work_date) if r.employee_id in ids and r.status in statuses)

    def delete_except(self, employee_ids) -> int:
        keep = set(employee_ids)
        doomed = [key for key, r in self.rows.items() if r.employee_id not in keep]
        for key in doomed:
            del self.rows[key]
        return len(doomed)


class InMemoryEmployees:
    def __init__(self, employees):
        self.by_id = {e.user_id: e for e in employees}

    def get_by_id(self, user_id):
        return self.by_id.get(user_id)

    def list_active_employees(self):
        items = [e for e in self.by_id.values() if e.role == Role.EMPLOYEE and e.is_active]
        return sorted(items, key=lambda e: e.name)

    def list_active_employee_ids(self):
        return [e.user_id for e in self.list_active_employees()]

    def set_active(self, user_id, *, is_active):
        emp = self.by_id.get(user_id)
        if emp is None or emp.role != Role.EMPLOYEE:
            return False
        self.by_id[user_id] = replace(emp, is_active=is_active)
        return True


class InMemoryAudit:
    def __init__(self):
        self.entries: list[AuditEntry] = []

    def create(self, entry: AuditEntry) -> int:
        self.entries.append(entry)
        return len(self.entries)


ADMIN_ID = 1
ALICE_ID = 2
BOB_ID = 3
CAROL_ID = 4


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 9, 0, 0))


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def employees_repo():
    return InMemoryEmployees(
        [
            Employee(ADMIN_ID, "Admin Demo", "admin@example.com", Role.ADMIN, "Management"),
            Employee(ALICE_ID, "Alice Nguyen", "alice@example.com", Role.EMPLOYEE, "Engineering"),
            Employee(BOB_ID, "Bob Tran", "bob@example.com", Role.EMPLOYEE, "Support"),
            Employee(CAROL_ID, "Carol Le", "carol@example.com", Role.EMPLOYEE, "Support", is_active=False),
        ]
    )


@pytest.fixture
def audit_repo():
    return InMemoryAudit()


@pytest.fixture
def container(attendance_repo, employees_repo, audit_repo, clock):
    return assemble(
        attendance_repo=attendance_repo,
        employees_repo=employees_repo,
        audit_repo=audit_repo,
        clock=clock,
    )


@pytest.fixture
def attendance_service(container):
    return container.attendance_service


@pytest.fixture
def app(container):
    return create_app("config.testing", container=container)


@pytest.fixture
def client(app):
    return app.test_client()
