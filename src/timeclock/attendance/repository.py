from __future__ import annotations

from typing import Collection, Mapping, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance Record Store.

    Implementations must enforce uniqueness of (employee_id, work_date).
    """

    def get_for_employee_and_date(self, employee_id: int, work_date: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> int:
        """Insert a new record and return its id.

        Raises DuplicateRecordError when (employee_id, work_date) exists.
        """

        raise NotImplementedError

    def update(self, record: AttendanceRecord, *, expected_version: int) -> bool:
        """Compare-and-swap write.

        Persists ``record`` (including its new ``version``) only if the stored
        version still equals ``expected_version``. Returns False otherwise.
        """

        raise NotImplementedError

    def list_between(
        self,
        employee_id: int,
        *,
        start: str,
        end: str,
        end_inclusive: bool = True,
        newest_first: bool = False,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert_fields(self, employee_id: int, work_date: str, fields: Mapping[str, object]) -> AttendanceRecord:
        """Admin override: create or update, replacing only the given fields."""

        raise NotImplementedError

    def list_for_date(self, work_date: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def insert_absent(self, employee_ids: Collection[int], work_date: str) -> int:
        """Insert absent placeholders, skipping existing (employee_id, work_date) pairs.

        Returns the number of rows actually inserted.
        """

        raise NotImplementedError

    def count_for_date(
        self,
        work_date: str,
        *,
        employee_ids: Collection[int],
        statuses: Collection[AttendanceStatus],
    ) -> int:
        raise NotImplementedError

    def delete_except(self, employee_ids: Collection[int]) -> int:
        """Delete every record whose employee is not in employee_ids."""

        raise NotImplementedError
