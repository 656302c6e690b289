from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Optional

from ..attendance.breaks import live_break_minutes, total_break_minutes
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import hours_between
from ..core.enums import OvertimePolicy
from ..shifts.model import ShiftPolicy
from .calculator.base import OvertimeCalculator
from .calculator.checkout_boundary_calculator import CheckoutBoundaryOvertimeCalculator
from .calculator.fixed_threshold_calculator import FixedThresholdOvertimeCalculator


def build_overtime_calculator(policy: ShiftPolicy) -> OvertimeCalculator:
    if policy.overtime_policy is OvertimePolicy.CHECKOUT_BOUNDARY:
        return CheckoutBoundaryOvertimeCalculator(policy.overtime_boundary, window_end=policy.overtime_window_end)
    return FixedThresholdOvertimeCalculator(policy.standard_hours)


def working_hours(record: AttendanceRecord) -> float:
    """(out - in) minus closed breaks, not below 0. Zero until both punches exist."""

    if record.check_in is None or record.check_out is None:
        return 0.0
    elapsed = hours_between(record.check_in.time, record.check_out.time)
    return max(0.0, elapsed - total_break_minutes(record) / 60)


class WorkingHoursService:
    """Derives ``working_hours``/``overtime_hours`` for records of one shift policy."""

    def __init__(self, policy: ShiftPolicy, *, calculator: Optional[OvertimeCalculator] = None):
        self._calculator = calculator or build_overtime_calculator(policy)

    def recompute(self, record: AttendanceRecord) -> AttendanceRecord:
        """Recomputed from scratch on every call; never accumulated."""

        if record.check_in is None or record.check_out is None:
            return record
        worked = working_hours(record)
        overtime = self._calculator.overtime_hours(record, working_hours=worked)
        return dataclasses.replace(record, working_hours=worked, overtime_hours=overtime)


def live_working_hours(record: AttendanceRecord, now: datetime) -> float:
    """Estimate for a shift still in progress, counting an open break up to ``now``."""

    if record.check_in is None:
        return 0.0
    elapsed = hours_between(record.check_in.time, now)
    return max(0.0, elapsed - live_break_minutes(record, now) / 60)
