from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, BreakReason


@dataclass(frozen=True)
class ClientMeta:
    """Caller audit data, persisted verbatim with a punch."""

    ip_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class Punch:
    time: datetime
    ip_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def at(cls, moment: datetime, client: Optional[ClientMeta]) -> "Punch":
        client = client or ClientMeta()
        return cls(time=moment, ip_address=client.ip_address, latitude=client.latitude, longitude=client.longitude)


@dataclass(frozen=True)
class BreakEntry:
    start_time: datetime
    reason: BreakReason = BreakReason.BREAK
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    break_id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per (employee, shift date)."""

    attendance_id: int
    employee_id: int
    shift_date: date
    check_in: Optional[Punch] = None
    check_out: Optional[Punch] = None
    status: AttendanceStatus = AttendanceStatus.ABSENT
    breaks: tuple[BreakEntry, ...] = ()
    working_hours: float = 0.0
    overtime_hours: float = 0.0
    notes: Optional[str] = None
    approved_by: Optional[int] = None

    @property
    def is_checked_in(self) -> bool:
        return self.check_in is not None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out is not None

    @property
    def open_break(self) -> Optional[BreakEntry]:
        for entry in reversed(self.breaks):
            if entry.is_open:
                return entry
        return None


@dataclass(frozen=True)
class ShiftStatus:
    """Read-model for the "today" view of one employee."""

    record: Optional[AttendanceRecord]
    is_checked_in: bool
    is_checked_out: bool
    is_on_break: bool
    active_break: Optional[BreakEntry]
    current_working_hours: float


@dataclass(frozen=True)
class AttendanceFilter:
    employee_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[AttendanceStatus] = None


@dataclass(frozen=True)
class AttendancePage:
    records: list[AttendanceRecord]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return -(-self.total // self.limit)
