from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how a shift model decides an attendance status."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime) -> StatusDecision:
        """Classify a check-in; raises OutsideWindow when no shift accepts it."""
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, *, now: datetime, current: AttendanceStatus) -> StatusDecision:
        raise NotImplementedError
