from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.breaks import total_break_minutes
from ..attendance.model import AttendanceFilter, AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds
from ..core.constants import DEFAULT_SHIFT_PROFILE
from ..core.enums import AttendanceStatus, HR_OR_ABOVE
from ..employees.repository import EmployeeRepository
from ..shifts.model import ShiftPolicy
from ..shifts.profiles import get_policy, policy_for_profile
from ..shifts.resolver import resolve_shift_date

_SUMMARY_STATUSES = {
    "present": AttendanceStatus.PRESENT,
    "absent": AttendanceStatus.ABSENT,
    "late": AttendanceStatus.LATE,
    "half_day": AttendanceStatus.HALF_DAY,
    "on_leave": AttendanceStatus.ON_LEAVE,
}

# Large enough to fetch a whole month of one employee's records in one page.
_MONTH_PAGE = 62


@dataclass(frozen=True)
class MonthlySummary:
    records: list
    summary: dict


@dataclass(frozen=True)
class StatusStats:
    today: dict
    month_to_date: dict


@dataclass(frozen=True)
class PresenceBoard:
    present_today: int
    active: list[dict]
    on_break: list[dict]
    inactive: list[dict]


def _status_counts(counts) -> dict:
    return {status.value: int(n) for status, n in counts.items() if n}


class AttendanceReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: Optional[EmployeeRepository] = None,
        *,
        default_policy: Optional[ShiftPolicy] = None,
        policy_loader: Optional[Callable[[str], ShiftPolicy]] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._default_policy = default_policy or get_policy(DEFAULT_SHIFT_PROFILE)
        self._policy_loader = policy_loader or get_policy

    def monthly_summary(self, *, employee_id: int, year: int, month: int) -> MonthlySummary:
        start, end = month_bounds(year, month)
        records = list(
            self._attendance.list_records(
                AttendanceFilter(employee_id=employee_id, start_date=start, end_date=end),
                offset=0,
                limit=_MONTH_PAGE,
            )
        )

        summary = {key: sum(1 for r in records if r.status is status) for key, status in _SUMMARY_STATUSES.items()}
        summary["total_working_hours"] = round(sum(r.working_hours for r in records), 2)
        summary["total_overtime_hours"] = round(sum(r.overtime_hours for r in records), 2)
        return MonthlySummary(records=records, summary=summary)

    def status_stats(self, *, today: date) -> StatusStats:
        daily = self._attendance.count_by_status(start_date=today, end_date=today)
        monthly = self._attendance.count_by_status(start_date=today.replace(day=1), end_date=today)
        return StatusStats(today=_status_counts(daily), month_to_date=_status_counts(monthly))

    def _records_on(self, shift_date: date) -> dict[int, AttendanceRecord]:
        day = AttendanceFilter(start_date=shift_date, end_date=shift_date)
        records = self._attendance.list_records(day, offset=0, limit=max(self._attendance.count_records(day), 1))
        return {r.employee_id: r for r in records}

    def today_presence(self, *, now: datetime) -> PresenceBoard:
        """Active employees split into working / on break / inactive at ``now``.

        Each employee is looked up on the shift date of their own profile, so a
        night worker after midnight is matched to the shift started the evening
        before. Management roles do not track attendance and are left out.
        """

        if self._employees is None:
            raise RuntimeError("Employee directory is required for the presence board")

        employees = self._employees.list_active(exclude_roles=HR_OR_ABOVE)
        by_date: dict[date, dict[int, AttendanceRecord]] = {}

        active: list[dict] = []
        on_break: list[dict] = []
        inactive: list[dict] = []
        present = 0
        for emp in employees:
            policy = policy_for_profile(emp.shift_profile, self._default_policy, self._policy_loader)
            shift_date = resolve_shift_date(now, policy)
            if shift_date not in by_date:
                by_date[shift_date] = self._records_on(shift_date)
            rec = by_date[shift_date].get(emp.employee_id)

            row = {
                "employee_id": emp.employee_id,
                "employee_code": emp.employee_code,
                "full_name": emp.full_name,
                "department": emp.department,
                "designation": emp.designation,
                "shift_date": shift_date,
                "total_break_minutes": total_break_minutes(rec) if rec else 0,
            }
            if rec and rec.is_checked_in:
                present += 1
            if rec and rec.is_checked_in and not rec.is_checked_out:
                row["check_in_time"] = rec.check_in.time
                current = rec.open_break
                if current is not None:
                    row.update(is_on_break=True, break_reason=current.reason.value, break_start_time=current.start_time)
                    on_break.append(row)
                else:
                    row["is_on_break"] = False
                    active.append(row)
            else:
                row.update(
                    is_checked_in=bool(rec and rec.is_checked_in),
                    is_checked_out=bool(rec and rec.is_checked_out),
                )
                inactive.append(row)

        return PresenceBoard(present_today=present, active=active, on_break=on_break, inactive=inactive)
