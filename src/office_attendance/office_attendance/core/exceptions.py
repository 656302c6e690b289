from __future__ import annotations

class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class InvalidBreakReason(ValidationError):
    code = "invalid_break_reason"


class CheckOutBeforeCheckIn(ValidationError):
    code = "check_out_before_check_in"


class EmployeeNotFound(DomainError):
    code = "employee_not_found"


class RecordNotFound(DomainError):
    code = "record_not_found"


class AttendanceError(DomainError):
    """A check-in/check-out/break operation rejected by its preconditions."""

    code = "attendance_error"
    default_message = "Attendance operation rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class AlreadyCheckedIn(AttendanceError):
    code = "already_checked_in"
    default_message = "Already checked in for this shift"


class AlreadyCheckedOut(AttendanceError):
    code = "already_checked_out"
    default_message = "Already checked out for this shift"


class NotCheckedIn(AttendanceError):
    code = "not_checked_in"
    default_message = "You need to check in first"


class NoCheckInYet(AttendanceError):
    code = "no_check_in_yet"
    default_message = "You need to check in before taking a break"


class BreakAlreadyOpen(AttendanceError):
    code = "break_already_open"
    default_message = "You already have an active break. Please end it first."


class NoOpenBreak(AttendanceError):
    code = "no_open_break"
    default_message = "No active break found"


class OutsideWindow(AttendanceError):
    code = "outside_window"
    default_message = "Check-in is not allowed at this time"
