from datetime import date

import pytest

from src.shift_attendance.shift_attendance.common.api_client import ApiClient
from src.shift_attendance.shift_attendance.core.exceptions import CollaboratorError
from src.shift_attendance.shift_attendance.schedules.http_schedule_repository import HttpScheduleRepository
from src.shift_attendance.shift_attendance.schedules.model import WorkScheduleDraft
from src.shift_attendance.shift_attendance.shifts.model import ShiftCode
from tests.fakes import UTC, FakeResponse, FakeSession, at

ROW = {
    "schedule_id": 1,
    "user_id": 7,
    "date": "2025-03-10",
    "shift_code": "MORNING",
    "expected_start": "2025-03-10T08:00:00Z",
    "expected_end": "2025-03-10T12:00:00Z",
}


def _repo(routes):
    session = FakeSession(routes)
    return HttpScheduleRepository(ApiClient("http://backend.test/api", session=session), tz=UTC), session


@pytest.mark.parametrize("body", [[ROW], {"data": [ROW]}])
def test_list_range_accepts_both_list_shapes(body):
    repo, session = _repo({("GET", "/schedules"): FakeResponse(200, body)})

    rows = repo.list_range(start=date(2025, 3, 10), end=date(2025, 3, 10), user_id=7)

    assert [r.schedule_id for r in rows] == [1]
    assert rows[0].expected_start == at(2025, 3, 10, 8, 0)
    assert session.calls[0]["params"] == {"from": "2025-03-10", "to": "2025-03-10", "user_id": 7}


def test_list_range_filters_rows_the_backend_did_not():
    other_day = dict(ROW, schedule_id=2, date="2025-03-12")
    other_user = dict(ROW, schedule_id=3, user_id=8)
    repo, _ = _repo({("GET", "/schedules"): FakeResponse(200, [ROW, other_day, other_user])})

    rows = repo.list_range(start=date(2025, 3, 10), end=date(2025, 3, 10), user_id=7)

    assert [r.schedule_id for r in rows] == [1]


def test_malformed_rows_are_kept_closed_or_skipped():
    bad_times = dict(ROW, schedule_id=2, expected_start="tomorrow")
    bad_code = dict(ROW, schedule_id=3, shift_code="BRUNCH")
    repo, _ = _repo({("GET", "/schedules"): FakeResponse(200, {"data": [ROW, bad_times, bad_code]})})

    rows = repo.list_range(start=date(2025, 3, 10), end=date(2025, 3, 10))

    assert [r.schedule_id for r in rows] == [1, 2]
    assert rows[1].times_malformed


def test_create_bulk_reads_partial_result():
    body = {
        "successful_records": [dict(ROW, schedule_id=5, user_id=8)],
        "failed_records": [{"index": 0, "reason": "duplicate"}],
    }
    repo, session = _repo({("POST", "/schedules/bulk"): FakeResponse(201, body)})
    drafts = [
        WorkScheduleDraft(user_id=7, work_date=date(2025, 3, 10), shift_code=ShiftCode.MORNING),
        WorkScheduleDraft(user_id=8, work_date=date(2025, 3, 10), shift_code=ShiftCode.MORNING),
    ]

    result = repo.create_bulk(drafts)

    assert result.message == "1 of 2 created"
    assert result.failures[0].draft.user_id == 7
    assert len(session.calls[0]["json"]["schedules"]) == 2


def test_get_and_delete_missing_return_falsy():
    repo, _ = _repo({})

    assert repo.get_by_id(9) is None
    assert repo.delete(schedule_id=9) is False


def test_unexpected_body_is_collaborator_error():
    repo, _ = _repo({("POST", "/schedules"): FakeResponse(201, ["not", "an", "object"])})

    with pytest.raises(CollaboratorError):
        repo.create(WorkScheduleDraft(user_id=7, work_date=date(2025, 3, 10), shift_code=ShiftCode.MORNING))
