from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceRecord


class OvertimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for overtime)."""

    @abstractmethod
    def overtime_hours(self, record: AttendanceRecord, *, working_hours: float) -> float:
        raise NotImplementedError
