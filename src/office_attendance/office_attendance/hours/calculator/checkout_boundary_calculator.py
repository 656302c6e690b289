from __future__ import annotations

from datetime import time

from .base import OvertimeCalculator
from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import at_clock, hours_between


class CheckoutBoundaryOvertimeCalculator(OvertimeCalculator):
    """Time between a clock boundary and the check-out.

    Only check-outs before ``window_end`` count. For the night shift that is
    noon, so an evening check-out has no overtime.
    """

    def __init__(self, boundary: time, *, window_end: time = time(12, 0)):
        self._boundary = boundary
        self._window_end = window_end

    def overtime_hours(self, record: AttendanceRecord, *, working_hours: float) -> float:
        if record.check_out is None:
            return 0.0
        out = record.check_out.time
        threshold = at_clock(out, self._boundary)
        if out > threshold and out.time() < self._window_end:
            return hours_between(threshold, out)
        return 0.0
