from __future__ import annotations

from typing import Optional

from ..core.enums import AttendanceState, CheckAction
from ..core.exceptions import InvalidTransitionError
from .model import Timesheet


def derive_state(timesheet: Optional[Timesheet]) -> AttendanceState:
    """Attendance state as a pure projection of the Timesheet facts."""
    if timesheet is None or timesheet.check_in_at is None:
        return AttendanceState.AWAITING_CHECK_IN
    if timesheet.check_out_at is None:
        return AttendanceState.CHECKED_IN
    return AttendanceState.COMPLETED


_ALLOWED_FROM = {
    CheckAction.CHECK_IN: AttendanceState.AWAITING_CHECK_IN,
    CheckAction.CHECK_OUT: AttendanceState.CHECKED_IN,
}

_REJECT_MESSAGES = {
    (CheckAction.CHECK_IN, AttendanceState.CHECKED_IN): "Already checked in for this shift",
    (CheckAction.CHECK_IN, AttendanceState.COMPLETED): "This shift is already completed",
    (CheckAction.CHECK_OUT, AttendanceState.AWAITING_CHECK_IN): "Cannot check out before checking in",
    (CheckAction.CHECK_OUT, AttendanceState.COMPLETED): "Already checked out for this shift",
}


def next_state(action: CheckAction) -> AttendanceState:
    return AttendanceState.CHECKED_IN if action == CheckAction.CHECK_IN else AttendanceState.COMPLETED


def ensure_transition(action: CheckAction, timesheet: Optional[Timesheet]) -> AttendanceState:
    """Return the current state, or raise if ``action`` is not allowed from it."""
    state = derive_state(timesheet)
    if _ALLOWED_FROM[action] != state:
        raise InvalidTransitionError(_REJECT_MESSAGES[(action, state)], state=state)
    return state
