from __future__ import annotations

from typing import Optional

from ..core.enums import BreakReason
from ..core.exceptions import InvalidBreakReason, ValidationError


def require_break_reason(value: Optional[str]) -> BreakReason:
    """Missing reason means a generic break; anything else must be in the vocabulary."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return BreakReason.BREAK
    try:
        return BreakReason(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(r.value for r in BreakReason)
        raise InvalidBreakReason(f"Invalid break reason {value!r} (allowed: {allowed})") from None


def optional_float(value, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
