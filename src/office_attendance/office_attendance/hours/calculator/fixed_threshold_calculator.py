from __future__ import annotations

from .base import OvertimeCalculator
from ...attendance.model import AttendanceRecord


class FixedThresholdOvertimeCalculator(OvertimeCalculator):
    """Hours worked beyond the standard day, not below 0."""

    def __init__(self, standard_hours: float = 8.0):
        self._standard_hours = float(standard_hours)

    def overtime_hours(self, record: AttendanceRecord, *, working_hours: float) -> float:
        return max(0.0, working_hours - self._standard_hours)
