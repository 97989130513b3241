from datetime import datetime

import pytest

from conftest import ALICE_ID
from timeclock.core.enums import AttendanceStatus
from timeclock.core.exceptions import InvalidDateFormat, ValidationError


def test_upsert_creates_missing_record(attendance_service, attendance_repo):
    rec = attendance_service.admin_upsert(
        ALICE_ID,
        "2024-03-10",
        {"punch_in": "2024-03-10T09:00:00.000Z", "punch_out": "2024-03-10T17:00:00", "status": "present"},
    )

    assert rec.punch_in == datetime(2024, 3, 10, 9, 0)
    assert rec.punch_out == datetime(2024, 3, 10, 17, 0)
    assert rec.status == AttendanceStatus.PRESENT
    assert attendance_repo.get_for_employee_and_date(ALICE_ID, "2024-03-10") == rec


def test_upsert_does_not_rederive_totals(attendance_service, clock):
    attendance_service.punch_in(ALICE_ID)
    clock.set(2024, 3, 15, 17, 0)
    attendance_service.punch_out(ALICE_ID)

    rec = attendance_service.admin_upsert(ALICE_ID, "2024-03-15", {"punch_out": "2024-03-15T12:00:00"})

    assert rec.punch_out == datetime(2024, 3, 15, 12, 0)
    assert rec.total_work_minutes == 480
    assert rec.status == AttendanceStatus.PRESENT


def test_upsert_overwrites_swept_absence(attendance_service, container):
    container.absence_sweeper.run("2024-03-14")
    rec = attendance_service.admin_upsert(
        ALICE_ID,
        "2024-03-14",
        {
            "punch_in": "2024-03-14T09:00:00",
            "breaks": [{"start": "2024-03-14T12:00:00", "end": "2024-03-14T12:30:00"}],
            "total_break_minutes": 30,
            "total_work_minutes": 450,
            "status": "present",
            "is_on_break": False,
        },
    )

    assert rec.status == AttendanceStatus.PRESENT
    assert rec.breaks[0].end == datetime(2024, 3, 14, 12, 30)
    assert rec.total_work_minutes == 450


@pytest.mark.parametrize(
    "fields",
    [
        {"notes": "x"},
        {"status": "late"},
        {"total_work_minutes": -5},
        {"total_work_minutes": "480"},
        {"is_on_break": "yes"},
        {"breaks": "12:00"},
        {"breaks": [{"end": "2024-03-10T12:00:00"}]},
    ],
)
def test_upsert_rejects_bad_fields(attendance_service, fields):
    with pytest.raises(ValidationError):
        attendance_service.admin_upsert(ALICE_ID, "2024-03-10", fields)


def test_upsert_rejects_bad_date(attendance_service):
    with pytest.raises(InvalidDateFormat):
        attendance_service.admin_upsert(ALICE_ID, "10/03/2024", {"status": "absent"})
