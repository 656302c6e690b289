from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...core.exceptions import OutsideWindow
from ...shifts.model import DayShiftPolicy
from .base import AttendanceStrategy, StatusDecision


class DayShiftStrategy(AttendanceStrategy):
    """Day shift: early before 07:00, present until 07:05, shift ends 16:00-16:05."""

    def __init__(self, policy: DayShiftPolicy):
        self._policy = policy

    def decide_checkin(self, *, now: datetime) -> StatusDecision:
        p = self._policy
        clock = now.time()
        if clock >= p.checkin_cutoff:
            raise OutsideWindow(f"Cannot clock in after {p.checkin_cutoff:%H:%M}")

        if clock < p.early_before:
            return StatusDecision(status=AttendanceStatus.EARLY)
        if clock <= p.present_until:
            return StatusDecision(status=AttendanceStatus.PRESENT)
        return StatusDecision(status=AttendanceStatus.LATE)

    def decide_checkout(self, *, now: datetime, current: AttendanceStatus) -> StatusDecision:
        p = self._policy
        clock = now.time()
        if clock > p.checkout_end:
            return StatusDecision(status=AttendanceStatus.OVERTIME)
        if clock >= p.checkout_start:
            return StatusDecision(status=AttendanceStatus.CLOCKED_OUT)
        # Leaving before the window keeps the check-in status (early/present/late).
        return StatusDecision(status=current)
