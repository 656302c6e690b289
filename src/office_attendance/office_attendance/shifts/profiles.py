"""Named shift profiles selectable from configuration."""

from __future__ import annotations

import dataclasses
from datetime import time
from typing import Callable, Optional

from ..core.enums import OvertimePolicy
from ..core.exceptions import ValidationError
from .model import DayShiftPolicy, NightShiftPolicy, ShiftPolicy

PROFILES: dict[str, ShiftPolicy] = {
    "day": DayShiftPolicy(),
    "night": NightShiftPolicy(),
    # Same windows as "night", overtime counted from 04:00 instead of 04:05.
    "night-0400": NightShiftPolicy(name="night-0400", overtime_boundary=time(4, 0)),
}


def get_policy(
    name: str,
    *,
    overtime_policy: Optional[str] = None,
    standard_hours: Optional[float] = None,
) -> ShiftPolicy:
    """Resolve a profile by name, applying optional overtime overrides."""

    key = (name or "").strip().lower()
    try:
        policy = PROFILES[key]
    except KeyError:
        raise ValidationError(f"Unknown shift profile {name!r}") from None

    changes: dict = {}
    if overtime_policy:
        try:
            changes["overtime_policy"] = OvertimePolicy(overtime_policy.strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown overtime policy {overtime_policy!r}") from None
    if standard_hours is not None:
        changes["standard_hours"] = float(standard_hours)

    return dataclasses.replace(policy, **changes) if changes else policy


def policy_for_profile(
    shift_profile: Optional[str],
    default: ShiftPolicy,
    loader: Callable[[str], ShiftPolicy] = get_policy,
) -> ShiftPolicy:
    """Employee's own profile when set, otherwise ``default``."""
    return loader(shift_profile) if shift_profile else default
