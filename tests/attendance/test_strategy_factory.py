from src.office_attendance.office_attendance.attendance.factory import AttendanceStrategyFactory
from src.office_attendance.office_attendance.attendance.strategies.day_shift_strategy import DayShiftStrategy
from src.office_attendance.office_attendance.attendance.strategies.night_shift_strategy import NightShiftStrategy
from src.office_attendance.office_attendance.shifts.profiles import get_policy


def test_factory_picks_day_strategy_for_day_profile():
    strategy = AttendanceStrategyFactory().for_policy(get_policy("day"))

    assert isinstance(strategy, DayShiftStrategy)


def test_factory_picks_night_strategy_for_night_profiles():
    factory = AttendanceStrategyFactory()

    assert isinstance(factory.for_policy(get_policy("night")), NightShiftStrategy)
    assert isinstance(factory.for_policy(get_policy("night-0400")), NightShiftStrategy)
