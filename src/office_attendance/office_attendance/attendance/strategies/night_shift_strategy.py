from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...core.exceptions import OutsideWindow
from ...shifts.model import NightShiftPolicy
from .base import AttendanceStrategy, StatusDecision


class NightShiftStrategy(AttendanceStrategy):
    """Night shift: check-in from 18:00, present until 19:05, shift ends 04:00-04:05.

    Between 04:00 and 18:00 no shift is active, so check-in is refused.
    Check-out is only classified in the morning tail of the shift; an
    evening check-out keeps the current status.
    """

    def __init__(self, policy: NightShiftPolicy):
        self._policy = policy

    def decide_checkin(self, *, now: datetime) -> StatusDecision:
        p = self._policy
        clock = now.time()
        if p.dead_zone_start <= clock < p.dead_zone_end:
            raise OutsideWindow(
                f"Night shift check-in is closed between {p.dead_zone_start:%H:%M} and {p.dead_zone_end:%H:%M}"
            )

        if p.dead_zone_end <= clock < p.early_until:
            return StatusDecision(status=AttendanceStatus.EARLY)
        if p.early_until <= clock <= p.present_until:
            return StatusDecision(status=AttendanceStatus.PRESENT)
        return StatusDecision(status=AttendanceStatus.LATE)

    def decide_checkout(self, *, now: datetime, current: AttendanceStatus) -> StatusDecision:
        p = self._policy
        clock = now.time()
        if clock >= p.checkout_classify_before:
            return StatusDecision(status=current)

        if clock < p.early_clockout_before:
            return StatusDecision(status=AttendanceStatus.EARLY_CLOCKOUT)
        if clock <= p.checkout_end:
            # 03:55-03:59 grace plus the 04:00-04:05 window
            return StatusDecision(status=AttendanceStatus.CLOCKED_OUT)
        return StatusDecision(status=AttendanceStatus.OVERTIME)
