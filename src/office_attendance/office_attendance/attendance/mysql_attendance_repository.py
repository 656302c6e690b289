from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Mapping, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import AttendanceStatus, BreakReason
from ..core.exceptions import AlreadyCheckedIn
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceFilter, AttendanceRecord, BreakEntry, Punch
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_RECORD_COLUMNS = """
    attendance_id, employee_id, shift_date,
    check_in_time, check_in_ip, check_in_lat, check_in_lng,
    check_out_time, check_out_ip, check_out_lat, check_out_lng,
    status, working_hours, overtime_hours, notes, approved_by
"""


def _punch(row: dict, prefix: str) -> Optional[Punch]:
    moment = row.get(f"{prefix}_time")
    if moment is None:
        return None
    return Punch(
        time=moment,
        ip_address=row.get(f"{prefix}_ip"),
        latitude=row.get(f"{prefix}_lat"),
        longitude=row.get(f"{prefix}_lng"),
    )


def _to_break(row: dict) -> BreakEntry:
    duration = row.get("duration_minutes")
    return BreakEntry(
        break_id=int(row["break_id"]),
        start_time=row["start_time"],
        end_time=row.get("end_time"),
        duration_minutes=int(duration) if duration is not None else None,
        reason=BreakReason(row.get("reason") or BreakReason.BREAK.value),
    )


def _to_record(row: dict, breaks: Sequence[BreakEntry]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(row["attendance_id"]),
        employee_id=int(row["employee_id"]),
        shift_date=row["shift_date"],
        check_in=_punch(row, "check_in"),
        check_out=_punch(row, "check_out"),
        status=AttendanceStatus(row["status"]),
        breaks=tuple(breaks),
        working_hours=float(row.get("working_hours") or 0),
        overtime_hours=float(row.get("overtime_hours") or 0),
        notes=row.get("notes"),
        approved_by=row.get("approved_by"),
    )


def _where(criteria: AttendanceFilter) -> tuple[str, list[object]]:
    clauses = ["1=1"]
    params: list[object] = []
    if criteria.employee_id is not None:
        clauses.append("employee_id=%s")
        params.append(int(criteria.employee_id))
    if criteria.start_date is not None:
        clauses.append("shift_date >= %s")
        params.append(criteria.start_date)
    if criteria.end_date is not None:
        clauses.append("shift_date <= %s")
        params.append(criteria.end_date)
    if criteria.status is not None:
        clauses.append("status=%s")
        params.append(criteria.status.value)
    return " AND ".join(clauses), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, rows: list[dict]) -> list[AttendanceRecord]:
        if not rows:
            return []
        ids = [int(r["attendance_id"]) for r in rows]
        placeholders = ",".join(["%s"] * len(ids))
        cur.execute(
            f"""
            SELECT break_id, attendance_id, start_time, end_time, duration_minutes, reason
            FROM attendance_breaks
            WHERE attendance_id IN ({placeholders})
            ORDER BY start_time ASC, break_id ASC
            """,
            tuple(ids),
        )
        by_record: dict[int, list[BreakEntry]] = {}
        for b in fetchall(cur):
            by_record.setdefault(int(b["attendance_id"]), []).append(_to_break(b))
        return [_to_record(r, by_record.get(int(r["attendance_id"]), [])) for r in rows]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return self._load(cur, [row])[0]

    def get_for_employee_and_date(self, employee_id: int, shift_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND shift_date=%s
                """,
                (int(employee_id), shift_date),
            )
            row = fetchone(cur)
            if not row:
                return None
            return self._load(cur, [row])[0]

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s
                ORDER BY shift_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return self._load(cur, fetchall(cur))

    def list_records(self, criteria: AttendanceFilter, *, offset: int, limit: int) -> Sequence[AttendanceRecord]:
        where, params = _where(criteria)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY shift_date DESC, employee_id ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return self._load(cur, fetchall(cur))

    def count_records(self, criteria: AttendanceFilter) -> int:
        where, params = _where(criteria)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance_records WHERE {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def count_by_status(self, *, start_date: date, end_date: date) -> Mapping[AttendanceStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS total
                FROM attendance_records
                WHERE shift_date BETWEEN %s AND %s
                GROUP BY status
                """,
                (start_date, end_date),
            )
            return {AttendanceStatus(r["status"]): int(r["total"]) for r in fetchall(cur)}

    def create_checkin(
        self,
        *,
        employee_id: int,
        shift_date: date,
        check_in: Punch,
        status: AttendanceStatus,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, shift_date, check_in_time, check_in_ip, check_in_lat, check_in_lng, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        shift_date,
                        check_in.time,
                        check_in.ip_address,
                        check_in.latitude,
                        check_in.longitude,
                        status.value,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                logger.info("Duplicate check-in for employee %s on %s", employee_id, shift_date)
                raise AlreadyCheckedIn() from e
            raise

    def record_checkin(self, *, attendance_id: int, check_in: Punch, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_in_ip=%s, check_in_lat=%s, check_in_lng=%s, status=%s
                WHERE attendance_id=%s AND check_in_time IS NULL
                """,
                (
                    check_in.time,
                    check_in.ip_address,
                    check_in.latitude,
                    check_in.longitude,
                    status.value,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out: Punch,
        status: AttendanceStatus,
        working_hours: float,
        overtime_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_ip=%s, check_out_lat=%s, check_out_lng=%s,
                    status=%s, working_hours=%s, overtime_hours=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (
                    check_out.time,
                    check_out.ip_address,
                    check_out.latitude,
                    check_out.longitude,
                    status.value,
                    float(working_hours),
                    float(overtime_hours),
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def add_break(self, *, attendance_id: int, entry: BreakEntry) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Conditional insert keeps at most one open break per record.
            cur.execute(
                """
                INSERT INTO attendance_breaks(attendance_id, start_time, reason)
                SELECT %s, %s, %s FROM DUAL
                WHERE NOT EXISTS (
                    SELECT 1 FROM attendance_breaks WHERE attendance_id=%s AND end_time IS NULL
                )
                """,
                (int(attendance_id), entry.start_time, entry.reason.value, int(attendance_id)),
            )
            if cur.rowcount <= 0:
                return None
            return int(cur.lastrowid)

    def close_break(self, *, break_id: int, end_time: datetime, duration_minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_breaks
                SET end_time=%s, duration_minutes=%s
                WHERE break_id=%s AND end_time IS NULL
                """,
                (end_time, int(duration_minutes), int(break_id)),
            )
            return cur.rowcount > 0

    def update_hours(self, *, attendance_id: int, working_hours: float, overtime_hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET working_hours=%s, overtime_hours=%s
                WHERE attendance_id=%s
                """,
                (float(working_hours), float(overtime_hours), int(attendance_id)),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, status=%s, notes=%s,
                    working_hours=%s, overtime_hours=%s, approved_by=%s
                WHERE attendance_id=%s
                """,
                (
                    check_in_time,
                    check_out_time,
                    status.value,
                    notes,
                    float(working_hours),
                    float(overtime_hours),
                    approved_by,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0
