from src.shift_attendance.shift_attendance.payroll.calculator.standard_calculator import StandardShiftDurationCalculator
from tests.fakes import at, make_schedule


def test_day_shift_duration():
    schedule = make_schedule(1, start=at(2025, 3, 10, 8, 0), end=at(2025, 3, 10, 12, 0))

    assert StandardShiftDurationCalculator().duration_seconds(schedule) == 4 * 3600


def test_overnight_shift_wraps_to_next_day():
    schedule = make_schedule(1, start=at(2025, 3, 10, 22, 0), end=at(2025, 3, 10, 6, 0))

    assert StandardShiftDurationCalculator().duration_seconds(schedule) == 8 * 3600


def test_equal_start_and_end_and_missing_times_count_zero():
    calc = StandardShiftDurationCalculator()

    assert calc.duration_seconds(make_schedule(1, start=at(2025, 3, 10, 8, 0), end=at(2025, 3, 10, 8, 0))) == 0
    assert calc.duration_seconds(make_schedule(2, start=at(2025, 3, 10, 8, 0))) == 0
