from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDateFormat(ValidationError):
    def __init__(self, message: str = "Date must be in YYYY-MM-DD format"):
        super().__init__(message)


class InvalidDateRange(ValidationError):
    pass


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class EmployeeNotFound(NotFoundError):
    def __init__(self, message: str = "Employee not found"):
        super().__init__(message)


class ConcurrentModificationError(DomainError):
    """Raised when a record keeps changing underneath a transition."""

    status_code = 409


class AttendanceError(DomainError):
    """Rejected punch/break transition.

    Subclasses carry the default message shown to the caller.
    """

    default_message = "Attendance action not allowed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class AlreadyPunchedIn(AttendanceError):
    default_message = "Already punched in today"


class NotPunchedIn(AttendanceError):
    default_message = "Must punch in first"


class AlreadyPunchedOut(AttendanceError):
    default_message = "Already punched out today"


class AlreadyOnBreak(AttendanceError):
    default_message = "Already on a break"


class NotOnBreak(AttendanceError):
    default_message = "Not currently on a break"


class OnBreakMustEndFirst(AttendanceError):
    default_message = "End your break before punching out"


class NoRecordFound(AttendanceError):
    default_message = "No attendance record found"


class DuplicateRecordError(Exception):
    """Storage-level unique key conflict on (employee_id, work_date)."""
