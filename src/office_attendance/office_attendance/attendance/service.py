from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_break_reason
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_PAGE_SIZE, LIVE_HOURS_PRECISION, MAX_PAGE_SIZE
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    BreakAlreadyOpen,
    CheckOutBeforeCheckIn,
    EmployeeNotFound,
    NoCheckInYet,
    NoOpenBreak,
    NotCheckedIn,
    RecordNotFound,
)
from ..employees.repository import EmployeeRepository
from ..hours.service import WorkingHoursService, live_working_hours
from ..shifts.model import ShiftPolicy
from ..shifts.profiles import get_policy, policy_for_profile
from ..shifts.resolver import resolve_shift_date
from . import breaks as ledger
from .factory import AttendanceStrategyFactory
from .model import AttendanceFilter, AttendancePage, AttendanceRecord, ClientMeta, Punch, ShiftStatus
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        default_policy: ShiftPolicy,
        strategy_factory: AttendanceStrategyFactory | None = None,
        policy_loader: Callable[[str], ShiftPolicy] | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._default_policy = default_policy
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._policy_loader = policy_loader or get_policy
        self._clock = clock

    def _get_employee(self, employee_id: int, *, require_active: bool = True):
        employee = self._employees.get_by_id(employee_id)
        if not employee or (require_active and not employee.is_active):
            raise EmployeeNotFound(f"Employee {employee_id} not found")
        return employee

    def policy_for(self, employee_id: int, *, require_active: bool = True) -> ShiftPolicy:
        """Employee's own shift profile when set, otherwise the configured default."""

        employee = self._get_employee(employee_id, require_active=require_active)
        return policy_for_profile(employee.shift_profile, self._default_policy, self._policy_loader)

    def _current_record(self, employee_id: int, now: datetime) -> tuple[ShiftPolicy, Optional[AttendanceRecord]]:
        policy = self.policy_for(employee_id)
        shift_date = resolve_shift_date(now, policy)
        return policy, self._attendance.get_for_employee_and_date(employee_id, shift_date)

    def _reload(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if record is None:
            raise RecordNotFound(f"Attendance record {attendance_id} not found")
        return record

    def check_in(self, employee_id: int, *, now: datetime | None = None, client: ClientMeta | None = None) -> AttendanceRecord:
        now = now or self._clock()
        policy, existing = self._current_record(employee_id, now)
        if existing and existing.is_checked_in:
            raise AlreadyCheckedIn()

        decision = self._factory.for_policy(policy).decide_checkin(now=now)
        punch = Punch.at(now, client)

        if existing:
            if not self._attendance.record_checkin(attendance_id=existing.attendance_id, check_in=punch, status=decision.status):
                raise AlreadyCheckedIn()
            attendance_id = existing.attendance_id
        else:
            attendance_id = self._attendance.create_checkin(
                employee_id=employee_id,
                shift_date=resolve_shift_date(now, policy),
                check_in=punch,
                status=decision.status,
            )

        logger.info("Employee %s checked in at %s (%s, %s)", employee_id, now, policy.name, decision.status.value)
        return self._reload(attendance_id)

    def check_out(self, employee_id: int, *, now: datetime | None = None, client: ClientMeta | None = None) -> AttendanceRecord:
        now = now or self._clock()
        policy, record = self._current_record(employee_id, now)
        if not record or not record.is_checked_in:
            raise NotCheckedIn()
        if record.is_checked_out:
            raise AlreadyCheckedOut()
        if now < record.check_in.time:
            raise CheckOutBeforeCheckIn("Check-out time cannot be earlier than check-in time")

        decision = self._factory.for_policy(policy).decide_checkout(now=now, current=record.status)
        updated = dataclasses.replace(record, check_out=Punch.at(now, client), status=decision.status)
        updated = WorkingHoursService(policy).recompute(updated)

        saved = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out=updated.check_out,
            status=updated.status,
            working_hours=updated.working_hours,
            overtime_hours=updated.overtime_hours,
        )
        if not saved:
            raise AlreadyCheckedOut()

        logger.info(
            "Employee %s checked out at %s (%s, %.2fh worked, %.2fh overtime)",
            employee_id,
            now,
            decision.status.value,
            updated.working_hours,
            updated.overtime_hours,
        )
        return self._reload(record.attendance_id)

    def start_break(self, employee_id: int, *, reason: str | None = None, now: datetime | None = None) -> AttendanceRecord:
        now = now or self._clock()
        break_reason = require_break_reason(reason)
        _, record = self._current_record(employee_id, now)
        if record is None:
            raise NoCheckInYet()

        updated = ledger.start_break(record, now, break_reason)
        if self._attendance.add_break(attendance_id=record.attendance_id, entry=updated.breaks[-1]) is None:
            raise BreakAlreadyOpen()

        logger.info("Employee %s started a %s break", employee_id, break_reason.value)
        return self._reload(record.attendance_id)

    def end_break(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or self._clock()
        policy, record = self._current_record(employee_id, now)
        if record is None or not record.is_checked_in:
            raise NoCheckInYet()

        open_entry = record.open_break
        if open_entry is None:
            raise NoOpenBreak()
        closed = ledger.close_entry(open_entry, now)
        if not self._attendance.close_break(
            break_id=open_entry.break_id,
            end_time=closed.end_time,
            duration_minutes=closed.duration_minutes,
        ):
            raise NoOpenBreak()

        record = self._reload(record.attendance_id)
        if record.is_checked_out:
            # Closing a break after check-out changes the derived hours.
            record = WorkingHoursService(policy).recompute(record)
            self._attendance.update_hours(
                attendance_id=record.attendance_id,
                working_hours=record.working_hours,
                overtime_hours=record.overtime_hours,
            )

        logger.info("Employee %s ended break after %s min", employee_id, closed.duration_minutes)
        return record

    def get_shift_status(self, employee_id: int, *, now: datetime | None = None) -> ShiftStatus:
        now = now or self._clock()
        _, record = self._current_record(employee_id, now)
        if record is None:
            return ShiftStatus(
                record=None,
                is_checked_in=False,
                is_checked_out=False,
                is_on_break=False,
                active_break=None,
                current_working_hours=0.0,
            )

        hours = record.working_hours
        if record.is_checked_in and not record.is_checked_out:
            hours = live_working_hours(record, now)

        active_break = record.open_break
        return ShiftStatus(
            record=record,
            is_checked_in=record.is_checked_in,
            is_checked_out=record.is_checked_out,
            is_on_break=active_break is not None,
            active_break=active_break,
            current_working_hours=round(hours, LIVE_HOURS_PRECISION),
        )

    def get_history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT):
        return list(self._attendance.get_recent_for_employee(employee_id, limit))

    def list_records(self, criteria: AttendanceFilter, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> AttendancePage:
        page = max(1, int(page))
        limit = max(1, min(int(limit), MAX_PAGE_SIZE))
        records = self._attendance.list_records(criteria, offset=(page - 1) * limit, limit=limit)
        total = self._attendance.count_records(criteria)
        return AttendancePage(records=list(records), page=page, limit=limit, total=total)

    def admin_update_record(
        self,
        attendance_id: int,
        *,
        approved_by: int | None,
        check_in_time: datetime | None = None,
        check_out_time: datetime | None = None,
        status: AttendanceStatus | None = None,
        notes: str | None = None,
    ) -> AttendanceRecord:
        """HR override of punches/status/notes; derived hours are recomputed, never taken from input."""

        record = self._reload(attendance_id)
        check_in = dataclasses.replace(record.check_in, time=check_in_time) if record.check_in and check_in_time else record.check_in
        if check_in is None and check_in_time:
            check_in = Punch(time=check_in_time)
        check_out = dataclasses.replace(record.check_out, time=check_out_time) if record.check_out and check_out_time else record.check_out
        if check_out is None and check_out_time:
            check_out = Punch(time=check_out_time)
        if check_in and check_out and check_out.time < check_in.time:
            raise CheckOutBeforeCheckIn("Check-out time cannot be earlier than check-in time")

        updated = dataclasses.replace(
            record,
            check_in=check_in,
            check_out=check_out,
            status=status or record.status,
            notes=notes if notes is not None else record.notes,
            approved_by=approved_by,
        )
        updated = WorkingHoursService(self.policy_for(record.employee_id, require_active=False)).recompute(updated)

        self._attendance.admin_update_record(
            attendance_id=attendance_id,
            check_in_time=updated.check_in.time if updated.check_in else None,
            check_out_time=updated.check_out.time if updated.check_out else None,
            status=updated.status,
            notes=updated.notes,
            working_hours=updated.working_hours,
            overtime_hours=updated.overtime_hours,
            approved_by=approved_by,
        )
        logger.info("Attendance record %s updated by %s", attendance_id, approved_by)
        return self._reload(attendance_id)
