from __future__ import annotations

import logging
from datetime import date, datetime
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_float
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus, HR_OR_ABOVE, Role
from ..core.exceptions import DomainError, EmployeeNotFound, RecordNotFound, ValidationError
from ..shifts.resolver import resolve_shift_date
from .model import AttendanceFilter, AttendanceRecord, BreakEntry, ClientMeta, Punch

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _punch_json(punch: Optional[Punch]) -> Optional[dict]:
    if punch is None:
        return None
    out = {"time": _iso(punch.time), "ip_address": punch.ip_address}
    if punch.latitude is not None or punch.longitude is not None:
        out["location"] = {"latitude": punch.latitude, "longitude": punch.longitude}
    return out


def break_json(entry: Optional[BreakEntry]) -> Optional[dict]:
    if entry is None:
        return None
    return {
        "id": entry.break_id,
        "start_time": _iso(entry.start_time),
        "end_time": _iso(entry.end_time),
        "duration": entry.duration_minutes,
        "reason": entry.reason.value,
    }


def record_json(record: Optional[AttendanceRecord]) -> Optional[dict]:
    if record is None:
        return None
    return {
        "id": record.attendance_id,
        "employee": record.employee_id,
        "date": record.shift_date.isoformat(),
        "check_in": _punch_json(record.check_in),
        "check_out": _punch_json(record.check_out),
        "status": record.status.value,
        "breaks": [break_json(b) for b in record.breaks],
        "working_hours": record.working_hours,
        "overtime": record.overtime_hours,
        "notes": record.notes,
        "approved_by": record.approved_by,
    }


def register(app: Flask, container) -> None:
    def _fail(message: str, status: int, code: Optional[str] = None):
        body = {"success": False, "message": message}
        if code:
            body["code"] = code
        return jsonify(body), status

    def _ok(data: dict, message: Optional[str] = None):
        body: dict = {"success": True, "data": data}
        if message:
            body["message"] = message
        return jsonify(body)

    def _current_role() -> Role:
        try:
            return Role(session.get("role", Role.EMPLOYEE.value))
        except ValueError:
            return Role.EMPLOYEE

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if session.get("employee_id") is None:
                return _fail("Not authenticated", 401)
            return view(*args, **kwargs)

        return wrapper

    def hr_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if session.get("employee_id") is None:
                return _fail("Not authenticated", 401)
            if _current_role() not in HR_OR_ABOVE:
                return _fail("Forbidden", 403)
            return view(*args, **kwargs)

        return wrapper

    def domain_errors(action: str):
        """Map domain exceptions of one endpoint to JSON responses."""

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                try:
                    return view(*args, **kwargs)
                except (EmployeeNotFound, RecordNotFound) as e:
                    return _fail(str(e), 404, e.code)
                except DomainError as e:
                    logger.info("%s rejected for employee %s: %s", action, session.get("employee_id"), e)
                    return _fail(str(e), 400, e.code)
                except Exception:
                    logger.exception("Error %s", action)
                    return _fail(f"Error {action}", 500)

            return wrapper

        return decorator

    def _employee_id() -> int:
        return int(session["employee_id"])

    def _client_meta() -> ClientMeta:
        body = request.get_json(silent=True) or {}
        location = body.get("location") or {}
        return ClientMeta(
            ip_address=request.remote_addr or None,
            latitude=optional_float(location.get("latitude", body.get("latitude")), "latitude"),
            longitude=optional_float(location.get("longitude", body.get("longitude")), "longitude"),
        )

    def _parse_datetime(value, field_name: str) -> Optional[datetime]:
        if value in (None, ""):
            return None
        try:
            return datetime.fromisoformat(str(value))
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO datetime") from None

    def _parse_date(value, field_name: str):
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None

    def _parse_status(value) -> Optional[AttendanceStatus]:
        if not value:
            return None
        try:
            return AttendanceStatus(value)
        except ValueError:
            raise ValidationError(f"Invalid status {value!r}") from None

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    @domain_errors("checking in")
    def check_in():
        record = container.attendance_service.check_in(_employee_id(), client=_client_meta())
        return _ok({"attendance": record_json(record)}, "Checked in successfully")

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    @domain_errors("checking out")
    def check_out():
        record = container.attendance_service.check_out(_employee_id(), client=_client_meta())
        return _ok({"attendance": record_json(record)}, "Checked out successfully")

    @app.route("/api/attendance/break/start", methods=["POST"], endpoint="attendance_break_start")
    @login_required
    @domain_errors("starting break")
    def break_start():
        body = request.get_json(silent=True) or {}
        record = container.attendance_service.start_break(_employee_id(), reason=body.get("reason"))
        return _ok({"attendance": record_json(record), "active_break": break_json(record.open_break)}, "Break started")

    @app.route("/api/attendance/break/end", methods=["POST"], endpoint="attendance_break_end")
    @login_required
    @domain_errors("ending break")
    def break_end():
        record = container.attendance_service.end_break(_employee_id())
        return _ok({"attendance": record_json(record)}, "Break ended")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    @domain_errors("fetching today's attendance")
    def today():
        status = container.attendance_service.get_shift_status(_employee_id())
        return _ok(
            {
                "attendance": record_json(status.record),
                "is_checked_in": status.is_checked_in,
                "is_checked_out": status.is_checked_out,
                "is_on_break": status.is_on_break,
                "active_break": break_json(status.active_break),
                "current_working_hours": status.current_working_hours,
            }
        )

    @app.route("/api/attendance/my", methods=["GET"], endpoint="attendance_my")
    @login_required
    @domain_errors("fetching attendance")
    def my_attendance():
        today = now_local().date()
        year = request.args.get("year", type=int) or today.year
        month = request.args.get("month", type=int) or today.month
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")
        result = container.report_service.monthly_summary(employee_id=_employee_id(), year=year, month=month)
        return _ok({"attendance": [record_json(r) for r in result.records], "summary": result.summary})

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    @domain_errors("fetching attendance")
    def list_attendance():
        args = request.args
        if _current_role() in HR_OR_ABOVE:
            employee_id = args.get("employee", type=int)
        else:
            # Regular employees only ever see their own records.
            employee_id = _employee_id()

        criteria = AttendanceFilter(
            employee_id=employee_id,
            start_date=_parse_date(args.get("startDate"), "startDate"),
            end_date=_parse_date(args.get("endDate"), "endDate"),
            status=_parse_status(args.get("status")),
        )
        page = container.attendance_service.list_records(
            criteria,
            page=args.get("page", default=1, type=int),
            limit=args.get("limit", default=DEFAULT_PAGE_SIZE, type=int),
        )
        return _ok(
            {
                "attendance": [record_json(r) for r in page.records],
                "pagination": {"page": page.page, "limit": page.limit, "total": page.total, "pages": page.pages},
            }
        )

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @hr_required
    @domain_errors("fetching attendance stats")
    def stats():
        today = resolve_shift_date(now_local(), container.default_policy)
        result = container.report_service.status_stats(today=today)
        return _ok({"today_stats": result.today, "monthly_stats": result.month_to_date})

    @app.route("/api/attendance/today-presence", methods=["GET"], endpoint="attendance_today_presence")
    @hr_required
    @domain_errors("fetching today's presence data")
    def today_presence():
        board = container.report_service.today_presence(now=now_local())

        def _rows(rows):
            return [{k: (v.isoformat() if isinstance(v, (date, datetime)) else v) for k, v in row.items()} for row in rows]

        return _ok(
            {
                "present_today": board.present_today,
                "active": _rows(board.active),
                "on_break": _rows(board.on_break),
                "inactive": _rows(board.inactive),
                "total_active": len(board.active),
                "total_on_break": len(board.on_break),
                "total_inactive": len(board.inactive),
            }
        )

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    @hr_required
    @domain_errors("updating attendance")
    def update(attendance_id: int):
        body = request.get_json(silent=True) or {}
        record = container.attendance_service.admin_update_record(
            attendance_id,
            approved_by=session.get("user_id"),
            check_in_time=_parse_datetime(body.get("check_in_time"), "check_in_time"),
            check_out_time=_parse_datetime(body.get("check_out_time"), "check_out_time"),
            status=_parse_status(body.get("status")),
            notes=body.get("notes"),
        )
        return _ok({"attendance": record_json(record)}, "Attendance updated successfully")
