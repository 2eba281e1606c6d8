from datetime import date

from src.shift_attendance.shift_attendance.schedules.planner import (
    ViewMode,
    group_by_day,
    month_range,
    range_for,
    shift_reference,
    week_range,
)
from tests.fakes import at, make_schedule


def test_week_range_starts_on_monday():
    rng = week_range(date(2025, 3, 13))

    assert rng.start == date(2025, 3, 10)
    assert rng.end == date(2025, 3, 16)
    assert len(rng.days()) == 7


def test_month_range_and_navigation():
    assert month_range(date(2024, 2, 10)).end == date(2024, 2, 29)
    assert range_for(ViewMode.MONTH, date(2025, 3, 5)).start == date(2025, 3, 1)
    assert shift_reference(ViewMode.MONTH, date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert shift_reference(ViewMode.MONTH, date(2025, 1, 15), -1) == date(2024, 12, 15)
    assert shift_reference(ViewMode.WEEK, date(2025, 3, 10), 2) == date(2025, 3, 24)


def test_group_by_day_orders_by_start_and_labels_rows():
    day = date(2025, 3, 10)
    rows = [
        make_schedule(2, user_id=8, work_date=day, start=at(2025, 3, 10, 13, 0), end=at(2025, 3, 10, 17, 0), name="B"),
        make_schedule(1, user_id=7, work_date=day, start=at(2025, 3, 10, 8, 0), end=at(2025, 3, 10, 12, 0)),
    ]

    grouped = group_by_day(rows, week_range(day).days())

    assert list(grouped) == [day]
    first, second = grouped[day]
    assert first.employee_name == "My Shift"
    assert first.time_label == "08:00 - 12:00"
    assert second.employee_name == "B"
