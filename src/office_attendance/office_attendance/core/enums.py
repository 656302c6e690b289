from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role as provided by the upstream authentication layer."""

    EMPLOYEE = "employee"
    HR = "hr"
    MANAGER = "manager"
    BOSS = "boss"
    ADMIN = "admin"


HR_OR_ABOVE = frozenset({Role.HR, Role.MANAGER, Role.BOSS, Role.ADMIN})


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record."""

    ABSENT = "absent"
    EARLY = "early"
    PRESENT = "present"
    LATE = "late"
    OVERTIME = "overtime"
    CLOCKED_OUT = "clocked-out"
    EARLY_CLOCKOUT = "early-clockout"
    HALF_DAY = "half-day"
    ON_LEAVE = "on-leave"
    HOLIDAY = "holiday"
    WEEKEND = "weekend"


class BreakReason(str, Enum):
    WASHROOM = "washroom"
    LUNCH = "lunch"
    CIGARETTE = "cigarette"
    BREAK = "break"


class ShiftModel(str, Enum):
    DAY = "day"
    NIGHT = "night"


class OvertimePolicy(str, Enum):
    """How overtime is derived once a record has both punches.

    FIXED_THRESHOLD: hours worked beyond the standard day.
    CHECKOUT_BOUNDARY: time between a fixed clock boundary and the check-out.
    """

    FIXED_THRESHOLD = "fixed-threshold"
    CHECKOUT_BOUNDARY = "checkout-boundary"
