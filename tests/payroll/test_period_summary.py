from datetime import date

import pytest

from src.shift_attendance.shift_attendance.core.exceptions import ValidationError
from src.shift_attendance.shift_attendance.payroll.service import PeriodSummaryService, team_summary_csv
from src.shift_attendance.shift_attendance.shifts.model import ShiftCode
from tests.fakes import InMemorySchedules, at, make_schedule


def _rows():
    return [
        make_schedule(1, user_id=7, work_date=date(2025, 3, 10), start=at(2025, 3, 10, 8, 0), end=at(2025, 3, 10, 16, 0), name="Lan"),
        make_schedule(
            2,
            user_id=7,
            work_date=date(2025, 3, 11),
            shift_code=ShiftCode.NIGHT,
            start=at(2025, 3, 11, 22, 0),
            end=at(2025, 3, 11, 6, 0),
        ),
        make_schedule(3, user_id=8, work_date=date(2025, 3, 11), start=at(2025, 3, 11, 13, 0), end=at(2025, 3, 11, 17, 0)),
        make_schedule(4, user_id=7, work_date=date(2025, 3, 20), start=at(2025, 3, 20, 8, 0), end=at(2025, 3, 20, 12, 0)),
    ]


def test_summary_counts_shifts_and_hours_in_range():
    svc = PeriodSummaryService(InMemorySchedules(_rows()))

    summary = svc.summarize(user_id=7, start=date(2025, 3, 10), end=date(2025, 3, 16))

    assert summary.total_shifts == 2
    assert summary.total_hours == 16.0
    assert summary.full_name == "Lan"


def test_empty_range_is_zero():
    svc = PeriodSummaryService(InMemorySchedules(_rows()))

    summary = svc.summarize(user_id=9, start=date(2025, 3, 10), end=date(2025, 3, 16))

    assert (summary.total_shifts, summary.total_hours) == (0, 0.0)


def test_team_summary_sorted_by_hours():
    svc = PeriodSummaryService(InMemorySchedules(_rows()))

    team = svc.summarize_team(start=date(2025, 3, 10), end=date(2025, 3, 16))

    assert [(s.user_id, s.total_hours) for s in team] == [(7, 16.0), (8, 4.0)]


def test_inverted_range_is_rejected():
    with pytest.raises(ValidationError):
        PeriodSummaryService(InMemorySchedules()).summarize(user_id=7, start=date(2025, 3, 2), end=date(2025, 3, 1))


def test_team_summary_csv_has_header_and_bom():
    svc = PeriodSummaryService(InMemorySchedules(_rows()))

    body = team_summary_csv(svc.summarize_team(start=date(2025, 3, 10), end=date(2025, 3, 16)))

    text = body.decode("utf-8-sig")
    assert body.startswith(b"\xef\xbb\xbf")
    lines = text.strip().splitlines()
    assert lines[0] == "user_id,full_name,email,total_shifts,total_hours"
    assert lines[1].startswith("7,Lan,,2,16.0")
