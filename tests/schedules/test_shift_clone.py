from datetime import date

from src.shift_attendance.shift_attendance.schedules.clone import ShiftCloneEngine, retarget_schedule
from src.shift_attendance.shift_attendance.shifts.model import ShiftCode
from tests.fakes import UTC, InMemorySchedules, at, make_schedule

SOURCE_DAY = date(2025, 3, 9)
TARGET_DAY = date(2025, 3, 10)


def _night(schedule_id, user_id, work_date=SOURCE_DAY, **kwargs):
    return make_schedule(
        schedule_id,
        user_id=user_id,
        work_date=work_date,
        shift_code=ShiftCode.NIGHT,
        start=at(work_date.year, work_date.month, work_date.day, 22, 0),
        end=at(work_date.year, work_date.month, work_date.day, 6, 0),
        **kwargs,
    )


def test_nothing_to_clone_performs_no_write():
    repo = InMemorySchedules([make_schedule(1, work_date=SOURCE_DAY, shift_code=ShiftCode.MORNING)])

    result = ShiftCloneEngine(repo, tz=UTC).clone_previous_day(target_date=TARGET_DAY, shift_code=ShiftCode.NIGHT)

    assert result.nothing_to_clone
    assert "Nothing to clone" in result.message
    assert repo.bulk_calls == []


def test_clone_keeps_time_of_day_on_target_date():
    repo = InMemorySchedules([_night(1, 7), _night(2, 8)])

    result = ShiftCloneEngine(repo, tz=UTC).clone_previous_day(target_date=TARGET_DAY, shift_code=ShiftCode.NIGHT)

    assert result.created_count == 2
    assert result.message == "2 of 2 created"
    (batch,) = repo.bulk_calls
    assert {d.user_id for d in batch} == {7, 8}
    for draft in batch:
        assert draft.work_date == TARGET_DAY
        assert draft.expected_start == at(2025, 3, 10, 22, 0)
        assert draft.expected_end == at(2025, 3, 10, 6, 0)


def test_clone_reports_partial_success_for_existing_rows():
    repo = InMemorySchedules([_night(1, 7), _night(2, 8), _night(3, 7, work_date=TARGET_DAY)])

    result = ShiftCloneEngine(repo, tz=UTC).clone_previous_day(target_date=TARGET_DAY, shift_code=ShiftCode.NIGHT)

    assert result.requested == 2
    assert result.created_count == 1
    assert result.message == "1 of 2 created"


def test_malformed_sources_are_skipped():
    repo = InMemorySchedules([_night(1, 7), make_schedule(2, user_id=8, work_date=SOURCE_DAY, shift_code=ShiftCode.NIGHT, malformed=True)])

    result = ShiftCloneEngine(repo, tz=UTC).clone_previous_day(target_date=TARGET_DAY, shift_code=ShiftCode.NIGHT)

    assert result.skipped == 1
    assert result.requested == 1


def test_retarget_schedule_without_times():
    draft = retarget_schedule(make_schedule(1, work_date=SOURCE_DAY), TARGET_DAY, tz=UTC)

    assert draft.work_date == TARGET_DAY
    assert draft.expected_start is None


def test_all_sources_unreadable_reports_skipped_count():
    repo = InMemorySchedules([make_schedule(1, user_id=8, work_date=SOURCE_DAY, shift_code=ShiftCode.NIGHT, malformed=True)])

    result = ShiftCloneEngine(repo, tz=UTC).clone_previous_day(target_date=TARGET_DAY, shift_code=ShiftCode.NIGHT)

    assert result.nothing_to_clone
    assert result.skipped == 1
    assert result.message == "Nothing to clone: 1 NIGHT shift(s) on 2025-03-09 skipped with unreadable times"
    assert repo.bulk_calls == []
