from datetime import date, datetime

import pytest

from src.office_attendance.office_attendance.attendance import breaks as ledger
from src.office_attendance.office_attendance.attendance.model import AttendanceRecord, BreakEntry, Punch
from src.office_attendance.office_attendance.common.validators import require_break_reason
from src.office_attendance.office_attendance.core.enums import AttendanceStatus, BreakReason
from src.office_attendance.office_attendance.core.exceptions import (
    AlreadyCheckedOut,
    BreakAlreadyOpen,
    InvalidBreakReason,
    NoCheckInYet,
    NoOpenBreak,
    ValidationError,
)


def checked_in(**changes) -> AttendanceRecord:
    base = AttendanceRecord(
        attendance_id=1,
        employee_id=1,
        shift_date=date(2024, 3, 11),
        check_in=Punch(time=datetime(2024, 3, 11, 7, 0)),
        status=AttendanceStatus.PRESENT,
    )
    return AttendanceRecord(**{**base.__dict__, **changes})


def test_start_then_end_break_records_floor_minutes():
    rec = ledger.start_break(checked_in(), datetime(2024, 3, 11, 12, 0), BreakReason.LUNCH)
    rec = ledger.end_break(rec, datetime(2024, 3, 11, 12, 30, 59))

    entry = rec.breaks[0]
    assert entry.reason is BreakReason.LUNCH
    assert entry.end_time == datetime(2024, 3, 11, 12, 30, 59)
    assert entry.duration_minutes == 30
    assert rec.open_break is None


def test_second_start_without_end_fails():
    rec = ledger.start_break(checked_in(), datetime(2024, 3, 11, 10, 0))

    with pytest.raises(BreakAlreadyOpen):
        ledger.start_break(rec, datetime(2024, 3, 11, 10, 5))


def test_end_without_open_break_fails():
    with pytest.raises(NoOpenBreak):
        ledger.end_break(checked_in(), datetime(2024, 3, 11, 10, 0))


def test_start_requires_check_in_and_no_check_out():
    with pytest.raises(NoCheckInYet):
        ledger.start_break(checked_in(check_in=None), datetime(2024, 3, 11, 10, 0))

    done = checked_in(check_out=Punch(time=datetime(2024, 3, 11, 16, 0)))
    with pytest.raises(AlreadyCheckedOut):
        ledger.start_break(done, datetime(2024, 3, 11, 16, 10))


def test_break_cannot_end_before_start():
    rec = ledger.start_break(checked_in(), datetime(2024, 3, 11, 10, 0))

    with pytest.raises(ValidationError):
        ledger.end_break(rec, datetime(2024, 3, 11, 9, 59))


def test_total_counts_closed_breaks_only_and_live_view_adds_open_one():
    rec = checked_in(
        breaks=(
            BreakEntry(
                start_time=datetime(2024, 3, 11, 9, 0),
                end_time=datetime(2024, 3, 11, 9, 10),
                duration_minutes=10,
                reason=BreakReason.WASHROOM,
            ),
            BreakEntry(start_time=datetime(2024, 3, 11, 12, 0), reason=BreakReason.LUNCH),
        )
    )

    assert ledger.total_break_minutes(rec) == 10
    assert ledger.live_break_minutes(rec, datetime(2024, 3, 11, 12, 15)) == pytest.approx(25.0)


@pytest.mark.parametrize(
    "raw, expected",
    [(None, BreakReason.BREAK), ("", BreakReason.BREAK), ("Lunch", BreakReason.LUNCH), ("cigarette", BreakReason.CIGARETTE)],
)
def test_break_reason_vocabulary(raw, expected):
    assert require_break_reason(raw) is expected


def test_unknown_break_reason_is_a_validation_error():
    with pytest.raises(InvalidBreakReason):
        require_break_reason("nap")
