"""Break ledger: rest intervals inside one attendance record.

Records are immutable; every operation returns an updated copy and leaves
persistence to the caller.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime

from ..core.enums import BreakReason
from ..core.exceptions import AlreadyCheckedOut, BreakAlreadyOpen, NoCheckInYet, NoOpenBreak, ValidationError
from .model import AttendanceRecord, BreakEntry


def start_break(record: AttendanceRecord, now: datetime, reason: BreakReason = BreakReason.BREAK) -> AttendanceRecord:
    if not record.is_checked_in:
        raise NoCheckInYet()
    if record.is_checked_out:
        raise AlreadyCheckedOut("Cannot start break after checkout")
    if record.open_break is not None:
        raise BreakAlreadyOpen()

    entry = BreakEntry(start_time=now, reason=reason)
    return dataclasses.replace(record, breaks=record.breaks + (entry,))


def close_entry(entry: BreakEntry, now: datetime) -> BreakEntry:
    if now < entry.start_time:
        raise ValidationError("Break cannot end before it started")
    duration = int((now - entry.start_time).total_seconds() // 60)
    return dataclasses.replace(entry, end_time=now, duration_minutes=duration)


def end_break(record: AttendanceRecord, now: datetime) -> AttendanceRecord:
    """Close the most recent open break."""

    breaks = list(record.breaks)
    for idx in range(len(breaks) - 1, -1, -1):
        if breaks[idx].is_open:
            breaks[idx] = close_entry(breaks[idx], now)
            return dataclasses.replace(record, breaks=tuple(breaks))
    raise NoOpenBreak()


def total_break_minutes(record: AttendanceRecord) -> int:
    """Closed breaks only; an open break counts once it is closed."""
    return sum(int(b.duration_minutes or 0) for b in record.breaks if not b.is_open)


def live_break_minutes(record: AttendanceRecord, now: datetime) -> float:
    """Display projection including the in-progress break up to ``now``."""

    total = float(total_break_minutes(record))
    current = record.open_break
    if current is not None and now > current.start_time:
        total += (now - current.start_time).total_seconds() / 60
    return total
