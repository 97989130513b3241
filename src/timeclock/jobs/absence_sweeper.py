from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local, today_string
from ..common.validators import require_iso_date
from ..employees.repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    work_date: str
    candidates: int
    inserted: int


class AbsenceSweeper:
    """Daily job: mark active employees with no record for the day as absent.

    Runs independently of request traffic (cron at 23:59 via the
    ``sweep-absences`` CLI command). Existing records are never overwritten,
    so a punch-in racing the sweep simply wins.
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

    def run(self, work_date: Optional[str] = None) -> SweepResult:
        work_date = require_iso_date(work_date) if work_date else today_string(self._clock())

        active_ids = set(self._employees.list_active_employee_ids())
        recorded_ids = {r.employee_id for r in self._attendance.list_for_date(work_date)}
        missing = sorted(active_ids - recorded_ids)

        inserted = self._attendance.insert_absent(missing, work_date) if missing else 0
        if inserted < len(missing):
            logger.info(
                "Absence sweep %s: %d record(s) appeared during the sweep and were kept",
                work_date,
                len(missing) - inserted,
            )

        logger.info("Absence sweep %s: marked %d of %d employee(s) absent", work_date, inserted, len(missing))
        return SweepResult(work_date=work_date, candidates=len(missing), inserted=inserted)
