from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

import pytest

from src.office_attendance.office_attendance.attendance.model import AttendanceFilter, AttendanceRecord, BreakEntry, Punch
from src.office_attendance.office_attendance.core.enums import AttendanceStatus, Role
from src.office_attendance.office_attendance.core.exceptions import AlreadyCheckedIn
from src.office_attendance.office_attendance.employees.model import Employee


@dataclass
class InMemoryEmployees:
    employees_by_id: dict[int, Employee]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees_by_id.get(employee_id)

    def list_active(self, *, exclude_roles=()):
        return [e for e in self.employees_by_id.values() if e.is_active and e.role not in exclude_roles]


class InMemoryAttendance:
    def __init__(self):
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id = 0
        self._break_id = 0

    def _replace(self, attendance_id: int, **changes) -> None:
        self._by_id[attendance_id] = dataclasses.replace(self._by_id[attendance_id], **changes)

    def add_record(self, record: AttendanceRecord) -> AttendanceRecord:
        self._id = max(self._id, record.attendance_id)
        self._by_id[record.attendance_id] = record
        return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, shift_date: date) -> Optional[AttendanceRecord]:
        for rec in self._by_id.values():
            if rec.employee_id == employee_id and rec.shift_date == shift_date:
                return rec
        return None

    def get_recent_for_employee(self, employee_id: int, limit: int):
        items = [r for r in self._by_id.values() if r.employee_id == employee_id]
        items.sort(key=lambda r: r.shift_date, reverse=True)
        return items[:limit]

    def _matching(self, criteria: AttendanceFilter):
        items = list(self._by_id.values())
        if criteria.employee_id is not None:
            items = [r for r in items if r.employee_id == criteria.employee_id]
        if criteria.start_date is not None:
            items = [r for r in items if r.shift_date >= criteria.start_date]
        if criteria.end_date is not None:
            items = [r for r in items if r.shift_date <= criteria.end_date]
        if criteria.status is not None:
            items = [r for r in items if r.status is criteria.status]
        items.sort(key=lambda r: (-r.shift_date.toordinal(), r.employee_id))
        return items

    def list_records(self, criteria: AttendanceFilter, *, offset: int, limit: int):
        return self._matching(criteria)[offset : offset + limit]

    def count_records(self, criteria: AttendanceFilter) -> int:
        return len(self._matching(criteria))

    def count_by_status(self, *, start_date: date, end_date: date):
        counts: dict[AttendanceStatus, int] = {}
        for r in self._matching(AttendanceFilter(start_date=start_date, end_date=end_date)):
            counts[r.status] = counts.get(r.status, 0) + 1
        return counts

    def create_checkin(self, *, employee_id: int, shift_date: date, check_in: Punch, status: AttendanceStatus) -> int:
        if self.get_for_employee_and_date(employee_id, shift_date) is not None:
            raise AlreadyCheckedIn()
        self._id += 1
        self._by_id[self._id] = AttendanceRecord(
            attendance_id=self._id,
            employee_id=employee_id,
            shift_date=shift_date,
            check_in=check_in,
            status=status,
        )
        return self._id

    def record_checkin(self, *, attendance_id: int, check_in: Punch, status: AttendanceStatus) -> bool:
        rec = self._by_id.get(attendance_id)
        if rec is None or rec.check_in is not None:
            return False
        self._replace(attendance_id, check_in=check_in, status=status)
        return True

    def update_checkout(self, *, attendance_id: int, check_out: Punch, status: AttendanceStatus, working_hours: float, overtime_hours: float) -> bool:
        rec = self._by_id.get(attendance_id)
        if rec is None or rec.check_out is not None:
            return False
        self._replace(
            attendance_id,
            check_out=check_out,
            status=status,
            working_hours=working_hours,
            overtime_hours=overtime_hours,
        )
        return True

    def add_break(self, *, attendance_id: int, entry: BreakEntry) -> Optional[int]:
        rec = self._by_id[attendance_id]
        if rec.open_break is not None:
            return None
        self._break_id += 1
        self._replace(attendance_id, breaks=rec.breaks + (dataclasses.replace(entry, break_id=self._break_id),))
        return self._break_id

    def close_break(self, *, break_id: int, end_time: datetime, duration_minutes: int) -> bool:
        for rec in self._by_id.values():
            for idx, entry in enumerate(rec.breaks):
                if entry.break_id == break_id and entry.end_time is None:
                    breaks = list(rec.breaks)
                    breaks[idx] = dataclasses.replace(entry, end_time=end_time, duration_minutes=duration_minutes)
                    self._replace(rec.attendance_id, breaks=tuple(breaks))
                    return True
        return False

    def update_hours(self, *, attendance_id: int, working_hours: float, overtime_hours: float) -> bool:
        self._replace(attendance_id, working_hours=working_hours, overtime_hours=overtime_hours)
        return True

    def admin_update_record(self, *, attendance_id: int, check_in_time, check_out_time, status, notes, working_hours, overtime_hours, approved_by) -> bool:
        rec = self._by_id.get(attendance_id)
        if rec is None:
            return False
        check_in = dataclasses.replace(rec.check_in, time=check_in_time) if rec.check_in and check_in_time else (
            Punch(time=check_in_time) if check_in_time else None
        )
        check_out = dataclasses.replace(rec.check_out, time=check_out_time) if rec.check_out and check_out_time else (
            Punch(time=check_out_time) if check_out_time else None
        )
        self._replace(
            attendance_id,
            check_in=check_in,
            check_out=check_out,
            status=status,
            notes=notes,
            working_hours=working_hours,
            overtime_hours=overtime_hours,
            approved_by=approved_by,
        )
        return True


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 11, 7, 3, 0)


@pytest.fixture
def employee() -> Employee:
    return Employee(employee_id=1, full_name="Alice Nguyen", employee_code="EMP001", department="IT")


@pytest.fixture
def night_employee() -> Employee:
    return Employee(employee_id=2, full_name="Bao Tran", employee_code="EMP002", department="Ops", shift_profile="night")


@pytest.fixture
def hr_employee() -> Employee:
    return Employee(employee_id=9, full_name="Hana HR", employee_code="HR001", department="HR", role=Role.HR)


@pytest.fixture
def employees_repo(employee, night_employee, hr_employee) -> InMemoryEmployees:
    return InMemoryEmployees({e.employee_id: e for e in (employee, night_employee, hr_employee)})


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()
