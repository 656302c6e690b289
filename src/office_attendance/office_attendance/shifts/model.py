from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Union

from ..core.constants import DEFAULT_STANDARD_HOURS
from ..core.enums import OvertimePolicy, ShiftModel


@dataclass(frozen=True)
class DayShiftPolicy:
    """Domain entity: day shift (07:00 start, 16:00 end, no date rollover)."""

    name: str = "day"
    early_before: time = time(7, 0)
    present_until: time = time(7, 5)
    checkin_cutoff: time = time(16, 0)
    checkout_start: time = time(16, 0)
    checkout_end: time = time(16, 5)
    overtime_policy: OvertimePolicy = OvertimePolicy.FIXED_THRESHOLD
    overtime_boundary: time = time(16, 5)
    # Check-outs after this clock time never count as boundary overtime.
    overtime_window_end: time = time.max
    standard_hours: float = DEFAULT_STANDARD_HOURS
    model: ShiftModel = field(default=ShiftModel.DAY, init=False)


@dataclass(frozen=True)
class NightShiftPolicy:
    """Domain entity: night shift starting in the evening and ending the next morning.

    Records are keyed by the evening the shift started on, so anything before
    ``rollover_hour`` belongs to the previous day's shift.
    """

    name: str = "night"
    rollover_hour: int = 18
    early_until: time = time(19, 0)
    present_until: time = time(19, 5)
    dead_zone_start: time = time(4, 0)
    dead_zone_end: time = time(18, 0)
    checkout_classify_before: time = time(12, 0)
    early_clockout_before: time = time(3, 55)
    checkout_end: time = time(4, 5)
    overtime_policy: OvertimePolicy = OvertimePolicy.CHECKOUT_BOUNDARY
    overtime_boundary: time = time(4, 5)
    standard_hours: float = DEFAULT_STANDARD_HOURS
    model: ShiftModel = field(default=ShiftModel.NIGHT, init=False)

    @property
    def overtime_window_end(self) -> time:
        return self.checkout_classify_before


ShiftPolicy = Union[DayShiftPolicy, NightShiftPolicy]
