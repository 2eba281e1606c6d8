from __future__ import annotations

import logging
from datetime import timezone, tzinfo
from typing import Any, Mapping, Sequence

import requests

from ..common.api_client import ApiClient
from ..common.payloads import unwrap_list
from ..core.constants import DEFAULT_HTTP_TIMEOUT_SECONDS
from ..core.enums import CheckAction
from ..core.exceptions import CollaboratorError
from .gateway import AttendanceGateway, verification_image
from .model import Timesheet, timesheet_from_payload

logger = logging.getLogger(__name__)

_ENDPOINTS = {
    CheckAction.CHECK_IN: "/check-in/verify-check-in",
    CheckAction.CHECK_OUT: "/check-in/verify-check-out",
}


class HttpAttendanceGateway(AttendanceGateway):
    def __init__(self, api: ApiClient, *, tz: tzinfo = timezone.utc):
        self._api = api
        self._tz = tz

    def list_timesheets(self, schedule_ids: Sequence[int]) -> Mapping[int, Timesheet]:
        ids = [int(i) for i in schedule_ids]
        if not ids:
            return {}
        rows = unwrap_list(self._api.get("/timesheets", params={"schedule_id": ids}))
        out: dict[int, Timesheet] = {}
        for row in rows:
            if isinstance(row, dict):
                ts = timesheet_from_payload(row, tz=self._tz)
                out[ts.schedule_id] = ts
        return out

    def submit(
        self,
        *,
        action: CheckAction,
        schedule_id: int,
        employee_id: int,
        station_token: str,
        verification: Mapping[str, Any],
    ) -> Timesheet:
        payload = self._api.post(
            _ENDPOINTS[action],
            json={
                "schedule_id": int(schedule_id),
                "employee_id": int(employee_id),
                "station_token": station_token,
                "verification": dict(verification),
            },
        )
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        if not isinstance(payload, dict):
            raise CollaboratorError("Attendance collaborator returned an unexpected body")
        return timesheet_from_payload(payload, tz=self._tz)


class HttpIdentityVerifier:
    """Posts the captured image to the external face verifier; reads ``{"match": bool}``."""

    def __init__(self, url: str, *, timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS):
        self._url = url
        self._timeout = float(timeout)

    def verify(self, *, employee_id: int, verification: Mapping[str, Any]) -> bool:
        image = verification_image(verification)
        if not image:
            return False
        try:
            resp = requests.post(
                self._url,
                json={"employee_id": int(employee_id), "image_base64": image},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("identity_verifier_unavailable", extra={"error": str(exc)})
            raise CollaboratorError(f"Identity verifier unavailable: {exc}") from exc
        return bool(isinstance(body, dict) and body.get("match"))
