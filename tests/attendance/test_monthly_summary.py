from datetime import datetime

import pytest

from conftest import ALICE_ID, BOB_ID
from timeclock.attendance.model import AttendanceRecord
from timeclock.attendance.summary import round_half_up, summarize_month
from timeclock.core.enums import AttendanceStatus
from timeclock.core.exceptions import InvalidDateRange, ValidationError


def _rec(day, status, work=0, brk=0, employee_id=ALICE_ID):
    return AttendanceRecord(
        employee_id=employee_id,
        work_date=day,
        status=status,
        total_work_minutes=work,
        total_break_minutes=brk,
    )


def test_summarize_month_counts_and_hours():
    s = summarize_month(
        [
            _rec("2024-03-01", AttendanceStatus.PRESENT, work=500, brk=30),
            _rec("2024-03-02", AttendanceStatus.HALF_DAY, work=200, brk=10),
            _rec("2024-03-03", AttendanceStatus.ABSENT),
        ]
    )

    assert (s.total_days, s.present_days, s.half_days, s.absent_days) == (3, 1, 1, 1)
    assert s.total_work_hours == 11.67
    assert s.total_break_hours == 0.67
    assert s.average_work_hours == 5.84


def test_summarize_empty_month():
    s = summarize_month([])
    assert s.total_days == 0
    assert s.average_work_hours == 0


def test_only_absences_average_is_zero():
    s = summarize_month([_rec("2024-03-01", AttendanceStatus.ABSENT)])
    assert s.absent_days == 1
    assert s.average_work_hours == 0


def test_round_half_up():
    assert round_half_up(2.675) == 2.68
    assert round_half_up(0.125) == 0.13


def test_monthly_history_is_newest_first_and_month_bound(attendance_service, attendance_repo):
    for day in ("2024-02-29", "2024-03-01", "2024-03-20", "2024-03-31", "2024-04-01"):
        attendance_repo.add(_rec(day, AttendanceStatus.PRESENT, work=480))
    attendance_repo.add(_rec("2024-03-10", AttendanceStatus.PRESENT, employee_id=BOB_ID))

    history = attendance_service.get_monthly_history(ALICE_ID, 2024, 3)
    assert [r.work_date for r in history] == ["2024-03-31", "2024-03-20", "2024-03-01"]

    summary = attendance_service.get_monthly_summary(ALICE_ID, 2024, 3)
    assert summary.total_days == 3
    assert summary.total_work_hours == 24


def test_december_window_rolls_year(attendance_service, attendance_repo):
    attendance_repo.add(_rec("2023-12-31", AttendanceStatus.PRESENT))
    attendance_repo.add(_rec("2024-01-01", AttendanceStatus.PRESENT))
    assert [r.work_date for r in attendance_service.get_monthly_history(ALICE_ID, 2023, 12)] == ["2023-12-31"]


def test_invalid_month_rejected(attendance_service):
    with pytest.raises(ValidationError):
        attendance_service.get_monthly_history(ALICE_ID, 2024, 13)


def test_date_range_history_is_oldest_first(attendance_service, attendance_repo):
    for day in ("2024-03-05", "2024-03-01", "2024-03-03"):
        attendance_repo.add(_rec(day, AttendanceStatus.PRESENT))

    rows = attendance_service.get_date_range_history(ALICE_ID, "2024-03-01", "2024-03-03")
    assert [r.work_date for r in rows] == ["2024-03-01", "2024-03-03"]

    with pytest.raises(InvalidDateRange):
        attendance_service.get_date_range_history(ALICE_ID, "2024-03-05", "2024-03-01")


def test_get_today(attendance_service, clock):
    assert attendance_service.get_today(ALICE_ID) is None
    attendance_service.punch_in(ALICE_ID)
    assert attendance_service.get_today(ALICE_ID).punch_in == datetime(2024, 3, 15, 9, 0)
