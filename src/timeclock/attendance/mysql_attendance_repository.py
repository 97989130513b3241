from __future__ import annotations

import json
from datetime import datetime
from typing import Collection, Iterable, Mapping, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_text, db_cursor, fetchall, fetchone, is_duplicate_key, placeholders
from .model import AttendanceRecord, BreakPeriod
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, punch_in, punch_out, breaks_json,
    total_break_minutes, total_work_minutes, status, is_on_break, version,
    created_at, updated_at
"""

# Admin-correctable field -> column
_FIELD_COLUMNS = {
    "punch_in": "punch_in",
    "punch_out": "punch_out",
    "breaks": "breaks_json",
    "total_break_minutes": "total_break_minutes",
    "total_work_minutes": "total_work_minutes",
    "status": "status",
    "is_on_break": "is_on_break",
}


def dump_breaks(breaks: Iterable[BreakPeriod]) -> str:
    return json.dumps(
        [
            {
                "start": b.start.isoformat(timespec="milliseconds"),
                "end": b.end.isoformat(timespec="milliseconds") if b.end else None,
            }
            for b in breaks
        ]
    )


def load_breaks(raw) -> tuple[BreakPeriod, ...]:
    text = as_text(raw)
    if not text:
        return ()
    return tuple(
        BreakPeriod(
            start=datetime.fromisoformat(item["start"]),
            end=datetime.fromisoformat(item["end"]) if item.get("end") else None,
        )
        for item in json.loads(text)
    )


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=as_text(r["work_date"]),
        punch_in=r.get("punch_in"),
        punch_out=r.get("punch_out"),
        breaks=load_breaks(r.get("breaks_json")),
        total_break_minutes=int(r.get("total_break_minutes") or 0),
        total_work_minutes=int(r.get("total_work_minutes") or 0),
        status=AttendanceStatus(r["status"]),
        is_on_break=bool(r.get("is_on_break")),
        version=int(r.get("version") or 0),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _column_value(field: str, value: object) -> object:
    if field == "breaks":
        return dump_breaks(value or ())
    if field == "status":
        return AttendanceStatus(value).value
    if field == "is_on_break":
        return 1 if value else 0
    return value


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(self, record: AttendanceRecord) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, work_date, punch_in, punch_out, breaks_json,
                        total_break_minutes, total_work_minutes, status, is_on_break, version
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(record.employee_id),
                        record.work_date,
                        record.punch_in,
                        record.punch_out,
                        dump_breaks(record.breaks),
                        record.total_break_minutes,
                        record.total_work_minutes,
                        record.status.value,
                        1 if record.is_on_break else 0,
                        record.version,
                    ),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateRecordError(f"Attendance exists for employee={record.employee_id} date={record.work_date}") from e
            raise

    def update(self, record: AttendanceRecord, *, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET punch_in=%s, punch_out=%s, breaks_json=%s,
                    total_break_minutes=%s, total_work_minutes=%s,
                    status=%s, is_on_break=%s, version=%s
                WHERE employee_id=%s AND work_date=%s AND version=%s
                """,
                (
                    record.punch_in,
                    record.punch_out,
                    dump_breaks(record.breaks),
                    record.total_break_minutes,
                    record.total_work_minutes,
                    record.status.value,
                    1 if record.is_on_break else 0,
                    record.version,
                    int(record.employee_id),
                    record.work_date,
                    int(expected_version),
                ),
            )
            return cur.rowcount > 0

    def list_between(
        self,
        employee_id: int,
        *,
        start: str,
        end: str,
        end_inclusive: bool = True,
        newest_first: bool = False,
    ) -> Sequence[AttendanceRecord]:
        upper = "<=" if end_inclusive else "<"
        order = "DESC" if newest_first else "ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date >= %s AND work_date {upper} %s
                ORDER BY work_date {order}
                """,
                (int(employee_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert_fields(self, employee_id: int, work_date: str, fields: Mapping[str, object]) -> AttendanceRecord:
        insert = {"employee_id": int(employee_id), "work_date": work_date, "breaks_json": "[]"}
        for field, value in fields.items():
            insert[_FIELD_COLUMNS[field]] = _column_value(field, value)

        columns = list(insert)
        assignments = [f"{_FIELD_COLUMNS[f]}=VALUES({_FIELD_COLUMNS[f]})" for f in fields]
        assignments.append("version=version+1")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance_records({", ".join(columns)})
                VALUES({placeholders(columns)})
                ON DUPLICATE KEY UPDATE {", ".join(assignments)}
                """,
                tuple(insert[c] for c in columns),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            return _to_record(fetchone(cur))

    def list_for_date(self, work_date: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE work_date=%s", (work_date,))
            return [_to_record(r) for r in fetchall(cur)]

    def insert_absent(self, employee_ids: Collection[int], work_date: str) -> int:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return 0

        values = ",".join(["(%s,%s,'[]',%s)"] * len(ids))
        params: list[object] = []
        for employee_id in ids:
            params.extend([employee_id, work_date, AttendanceStatus.ABSENT.value])

        with db_cursor(self._conn_factory) as (_, cur):
            # No-op on conflict: an existing row (e.g. a concurrent punch-in) wins
            # and reports 0 affected rows.
            cur.execute(
                f"""
                INSERT INTO attendance_records(employee_id, work_date, breaks_json, status)
                VALUES {values}
                ON DUPLICATE KEY UPDATE attendance_id=attendance_id
                """,
                tuple(params),
            )
            return max(cur.rowcount, 0)

    def count_for_date(
        self,
        work_date: str,
        *,
        employee_ids: Collection[int],
        statuses: Collection[AttendanceStatus],
    ) -> int:
        ids = [int(i) for i in employee_ids]
        status_values = [AttendanceStatus(s).value for s in statuses]
        if not ids or not status_values:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM attendance_records
                WHERE work_date=%s
                  AND employee_id IN ({placeholders(ids)})
                  AND status IN ({placeholders(status_values)})
                """,
                (work_date, *ids, *status_values),
            )
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def delete_except(self, employee_ids: Collection[int]) -> int:
        ids = [int(i) for i in employee_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            if ids:
                cur.execute(
                    f"DELETE FROM attendance_records WHERE employee_id NOT IN ({placeholders(ids)})",
                    tuple(ids),
                )
            else:
                cur.execute("DELETE FROM attendance_records")
            return cur.rowcount
