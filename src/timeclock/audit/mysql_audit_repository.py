from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import AuditEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, entry: AuditEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(action, performed_by, target_user_id, details, ip_address)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    entry.action.value,
                    int(entry.performed_by),
                    entry.target_user_id,
                    entry.details,
                    entry.ip_address,
                ),
            )
            return int(cur.lastrowid)
