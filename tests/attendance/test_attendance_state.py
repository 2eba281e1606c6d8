import pytest

from src.shift_attendance.shift_attendance.attendance.model import Timesheet
from src.shift_attendance.shift_attendance.attendance.state import derive_state, ensure_transition, next_state
from src.shift_attendance.shift_attendance.core.enums import AttendanceState, CheckAction
from src.shift_attendance.shift_attendance.core.exceptions import InvalidTransitionError, ValidationError
from tests.fakes import at

OPEN = Timesheet(timesheet_id=1, schedule_id=5, check_in_at=at(2025, 3, 10, 7, 58))
CLOSED = Timesheet(
    timesheet_id=1,
    schedule_id=5,
    check_in_at=at(2025, 3, 10, 7, 58),
    check_out_at=at(2025, 3, 10, 12, 2),
)


@pytest.mark.parametrize(
    "timesheet, expected",
    [
        (None, AttendanceState.AWAITING_CHECK_IN),
        (OPEN, AttendanceState.CHECKED_IN),
        (CLOSED, AttendanceState.COMPLETED),
    ],
)
def test_state_is_derived_from_timesheet(timesheet, expected):
    assert derive_state(timesheet) == expected
    assert derive_state(timesheet) == derive_state(timesheet)


def test_allowed_transitions():
    assert ensure_transition(CheckAction.CHECK_IN, None) == AttendanceState.AWAITING_CHECK_IN
    assert ensure_transition(CheckAction.CHECK_OUT, OPEN) == AttendanceState.CHECKED_IN
    assert next_state(CheckAction.CHECK_IN) == AttendanceState.CHECKED_IN
    assert next_state(CheckAction.CHECK_OUT) == AttendanceState.COMPLETED


@pytest.mark.parametrize(
    "action, timesheet, message",
    [
        (CheckAction.CHECK_IN, OPEN, "Already checked in"),
        (CheckAction.CHECK_IN, CLOSED, "already completed"),
        (CheckAction.CHECK_OUT, None, "before checking in"),
        (CheckAction.CHECK_OUT, CLOSED, "Already checked out"),
    ],
)
def test_rejected_transitions_carry_current_state(action, timesheet, message):
    with pytest.raises(InvalidTransitionError) as exc_info:
        ensure_transition(action, timesheet)

    assert message in str(exc_info.value)
    assert exc_info.value.state == derive_state(timesheet)


def test_timesheet_rejects_check_out_before_check_in():
    with pytest.raises(ValidationError):
        Timesheet(
            timesheet_id=1,
            schedule_id=5,
            check_in_at=at(2025, 3, 10, 8, 0),
            check_out_at=at(2025, 3, 10, 7, 59),
        )
