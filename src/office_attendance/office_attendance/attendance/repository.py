from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceFilter, AttendanceRecord, BreakEntry, Punch


class AttendanceRepository(Protocol):
    """Store of attendance records, unique per (employee_id, shift_date).

    Mutations are compare-and-set: they return False (or None) when the row
    is no longer in the expected state, so the service can report the race.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, shift_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_records(self, criteria: AttendanceFilter, *, offset: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_records(self, criteria: AttendanceFilter) -> int:
        raise NotImplementedError

    def count_by_status(self, *, start_date: date, end_date: date) -> Mapping[AttendanceStatus, int]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        shift_date: date,
        check_in: Punch,
        status: AttendanceStatus,
    ) -> int:
        """Insert a new record; raises AlreadyCheckedIn on a duplicate key."""

        raise NotImplementedError

    def record_checkin(self, *, attendance_id: int, check_in: Punch, status: AttendanceStatus) -> bool:
        """Fill the check-in of an existing record that has none yet."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out: Punch,
        status: AttendanceStatus,
        working_hours: float,
        overtime_hours: float,
    ) -> bool:
        raise NotImplementedError

    def add_break(self, *, attendance_id: int, entry: BreakEntry) -> Optional[int]:
        """Append a break unless one is still open; returns the new break id."""

        raise NotImplementedError

    def close_break(self, *, break_id: int, end_time: datetime, duration_minutes: int) -> bool:
        raise NotImplementedError

    def update_hours(self, *, attendance_id: int, working_hours: float, overtime_hours: float) -> bool:
        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        status: AttendanceStatus,
        notes: Optional[str],
        working_hours: float,
        overtime_hours: float,
        approved_by: Optional[int],
    ) -> bool:
        """Admin-only override; derived hours are computed by the caller."""

        raise NotImplementedError
