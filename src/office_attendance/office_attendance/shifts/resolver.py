from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.enums import ShiftModel
from .model import ShiftPolicy


def resolve_shift_date(now: datetime, policy: ShiftPolicy) -> date:
    """Map a timestamp to the date its shift is keyed by.

    Day shift: the calendar date. Night shift: before the rollover hour the
    activity belongs to the shift that started on the previous evening.
    """

    if policy.model is ShiftModel.NIGHT and now.hour < policy.rollover_hour:
        return now.date() - timedelta(days=1)
    return now.date()
