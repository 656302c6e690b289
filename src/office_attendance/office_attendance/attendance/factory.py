from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import ShiftModel
from ..shifts.model import ShiftPolicy
from .strategies.base import AttendanceStrategy
from .strategies.day_shift_strategy import DayShiftStrategy
from .strategies.night_shift_strategy import NightShiftStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the status strategy matching a shift policy."""

    def for_policy(self, policy: ShiftPolicy) -> AttendanceStrategy:
        if policy.model is ShiftModel.NIGHT:
            return NightShiftStrategy(policy)
        return DayShiftStrategy(policy)
