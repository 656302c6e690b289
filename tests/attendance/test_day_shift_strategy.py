from datetime import datetime

import pytest

from src.office_attendance.office_attendance.attendance.strategies.day_shift_strategy import DayShiftStrategy
from src.office_attendance.office_attendance.core.enums import AttendanceStatus
from src.office_attendance.office_attendance.core.exceptions import OutsideWindow
from src.office_attendance.office_attendance.shifts.model import DayShiftPolicy


def at(hour: int, minute: int, second: int = 0) -> datetime:
    return datetime(2024, 3, 11, hour, minute, second)


@pytest.fixture
def strategy() -> DayShiftStrategy:
    return DayShiftStrategy(DayShiftPolicy())


@pytest.mark.parametrize(
    "now, expected",
    [
        (at(6, 55), AttendanceStatus.EARLY),
        (at(6, 59, 59), AttendanceStatus.EARLY),
        (at(7, 0), AttendanceStatus.PRESENT),
        (at(7, 3), AttendanceStatus.PRESENT),
        (at(7, 5), AttendanceStatus.PRESENT),
        (at(7, 5, 30), AttendanceStatus.LATE),
        (at(7, 10), AttendanceStatus.LATE),
        (at(15, 59), AttendanceStatus.LATE),
    ],
)
def test_checkin_windows(strategy, now, expected):
    assert strategy.decide_checkin(now=now).status == expected


@pytest.mark.parametrize("now", [at(16, 0), at(16, 1), at(22, 0)])
def test_checkin_after_cutoff_is_rejected(strategy, now):
    with pytest.raises(OutsideWindow):
        strategy.decide_checkin(now=now)


@pytest.mark.parametrize(
    "now, expected",
    [
        (at(16, 0), AttendanceStatus.CLOCKED_OUT),
        (at(16, 5), AttendanceStatus.CLOCKED_OUT),
        (at(16, 5, 1), AttendanceStatus.OVERTIME),
        (at(18, 30), AttendanceStatus.OVERTIME),
    ],
)
def test_checkout_windows(strategy, now, expected):
    assert strategy.decide_checkout(now=now, current=AttendanceStatus.PRESENT).status == expected


@pytest.mark.parametrize("current", [AttendanceStatus.EARLY, AttendanceStatus.PRESENT, AttendanceStatus.LATE])
def test_early_checkout_keeps_checkin_status(strategy, current):
    assert strategy.decide_checkout(now=at(15, 30), current=current).status == current
