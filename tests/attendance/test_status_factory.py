from src.shift_attendance.shift_attendance.attendance.factory import CheckInStatusFactory
from src.shift_attendance.shift_attendance.attendance.strategies.late_strategy import LateStrategy
from src.shift_attendance.shift_attendance.attendance.strategies.on_time_strategy import OnTimeStrategy
from src.shift_attendance.shift_attendance.core.enums import TimesheetStatus
from tests.fakes import at

START = at(2025, 1, 1, 8, 0)


def test_factory_checkin_on_time_within_grace():
    now = at(2025, 1, 1, 8, 4, 59)

    strategy = CheckInStatusFactory(grace_minutes=5).for_checkin(check_in_at=now, expected_start=START)

    assert isinstance(strategy, OnTimeStrategy)
    assert strategy.decide(check_in_at=now, expected_start=START).status == TimesheetStatus.ON_TIME


def test_factory_checkin_late_after_grace():
    now = at(2025, 1, 1, 8, 6, 0)

    strategy = CheckInStatusFactory(grace_minutes=5).for_checkin(check_in_at=now, expected_start=START)

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide(check_in_at=now, expected_start=START)
    assert decision.status == TimesheetStatus.LATE
    assert decision.late_minutes == 6


def test_early_checkin_inside_lead_window_is_on_time():
    now = at(2025, 1, 1, 7, 56)

    strategy = CheckInStatusFactory().for_checkin(check_in_at=now, expected_start=START)

    assert isinstance(strategy, OnTimeStrategy)
