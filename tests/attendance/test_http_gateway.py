import pytest
import requests

from src.shift_attendance.shift_attendance.attendance import http_gateway
from src.shift_attendance.shift_attendance.attendance.http_gateway import HttpAttendanceGateway, HttpIdentityVerifier
from src.shift_attendance.shift_attendance.common.api_client import ApiClient
from src.shift_attendance.shift_attendance.core.enums import CheckAction, TimesheetStatus
from src.shift_attendance.shift_attendance.core.exceptions import (
    CollaboratorError,
    IdentityRejectedError,
    StationInvalidError,
)
from tests.fakes import UTC, FakeResponse, FakeSession, at

TS = {
    "timesheet_id": 10,
    "schedule_id": 1,
    "check_in_at": "2025-03-10T07:57:00Z",
    "check_out_at": None,
    "status_code": "on_time",
}


def _gateway(routes):
    session = FakeSession(routes)
    return HttpAttendanceGateway(ApiClient("http://backend.test/api", session=session), tz=UTC), session


def test_list_timesheets_indexes_by_schedule():
    gateway, session = _gateway({("GET", "/timesheets"): FakeResponse(200, [TS])})

    out = gateway.list_timesheets([1, 2])

    assert list(out) == [1]
    assert out[1].status_code == TimesheetStatus.ON_TIME
    assert session.calls[0]["params"] == {"schedule_id": [1, 2]}


def test_list_timesheets_without_ids_makes_no_call():
    gateway, session = _gateway({})

    assert gateway.list_timesheets([]) == {}
    assert session.calls == []


def test_submit_check_in_unwraps_data():
    gateway, session = _gateway({("POST", "/check-in/verify-check-in"): FakeResponse(201, {"data": TS})})

    ts = gateway.submit(
        action=CheckAction.CHECK_IN,
        schedule_id=1,
        employee_id=7,
        station_token="tok",
        verification={"image_base64": "abc"},
    )

    assert ts.check_in_at == at(2025, 3, 10, 7, 57)
    assert session.calls[0]["json"]["station_token"] == "tok"


@pytest.mark.parametrize(
    "response, error",
    [
        (FakeResponse(403, {"error": "Invalid station"}), StationInvalidError),
        (FakeResponse(400, {"message": "Face not matched"}), IdentityRejectedError),
        (FakeResponse(401, {"error": {"code": "IDENTITY_REJECTED", "message": "no"}}), IdentityRejectedError),
    ],
)
def test_submit_maps_rejections(response, error):
    gateway, _ = _gateway({("POST", "/check-in/verify-check-out"): response})

    with pytest.raises(error):
        gateway.submit(
            action=CheckAction.CHECK_OUT,
            schedule_id=1,
            employee_id=7,
            station_token="tok",
            verification={},
        )


class _VerifierResponse:
    def __init__(self, body, status=200):
        self._body = body
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}")

    def json(self):
        return self._body


def test_identity_verifier_reads_match(monkeypatch):
    sent = {}

    def fake_post(url, json=None, timeout=None):
        sent.update(url=url, json=json, timeout=timeout)
        return _VerifierResponse({"match": True})

    monkeypatch.setattr(http_gateway.requests, "post", fake_post)

    assert HttpIdentityVerifier("http://verifier.test/verify", timeout=3).verify(
        employee_id=7, verification={"imageBase64": "abc"}
    )
    assert sent["json"] == {"employee_id": 7, "image_base64": "abc"}
    assert sent["timeout"] == 3.0


def test_identity_verifier_without_image_is_no_match(monkeypatch):
    monkeypatch.setattr(http_gateway.requests, "post", lambda *a, **k: pytest.fail("should not be called"))

    assert not HttpIdentityVerifier("http://verifier.test/verify").verify(employee_id=7, verification={})


def test_identity_verifier_outage_is_collaborator_error(monkeypatch):
    monkeypatch.setattr(http_gateway.requests, "post", lambda *a, **k: _VerifierResponse({}, status=503))

    with pytest.raises(CollaboratorError):
        HttpIdentityVerifier("http://verifier.test/verify").verify(employee_id=7, verification={"image_base64": "x"})
