from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role used for authorization checks."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Day status stored on an attendance record."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"

    @property
    def label(self) -> str:
        return self.value[:1].upper() + self.value[1:]


class AuditAction(str, Enum):
    CSV_EXPORT = "CSV_EXPORT"
