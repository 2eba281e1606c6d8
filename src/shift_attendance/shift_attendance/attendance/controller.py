from __future__ import annotations

from typing import Any, Mapping

from flask import Flask, jsonify, request, session

from ..common.web import current_role, current_user_id, json_body
from ..container import Container
from ..core.constants import STATION_TOKEN_HEADER
from ..core.enums import CheckAction
from ..core.exceptions import StationInvalidError, ValidationError
from ..schedules.service import MANAGER_ROLES


def _int_field(body: Mapping[str, Any], *names: str) -> int:
    for name in names:
        value = body.get(name)
        if value is None or value == "":
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{name} must be an integer") from None
    raise ValidationError(f"{names[0]} is required")


def _verification(body: Mapping[str, Any]) -> dict:
    verification = body.get("verification")
    if isinstance(verification, dict):
        return verification
    # Older stations post the captured frame at the top level.
    image = body.get("image_base64") or body.get("imageBase64")
    return {"image_base64": image} if image else {}


def register(app: Flask, container: Container) -> None:
    def _station_token(body: Mapping[str, Any]) -> str:
        return str(body.get("station_token") or request.headers.get(STATION_TOKEN_HEADER) or "")

    def _own_schedule_ids(ids: list[int]) -> list[int]:
        """Employees only see timesheets of their own schedules."""
        user_id = current_user_id()
        own = []
        for schedule_id in ids:
            schedule = container.schedules_repo.get_by_id(schedule_id)
            if schedule is not None and schedule.user_id == user_id:
                own.append(schedule_id)
        return own

    @app.route("/api/timesheets", methods=["GET"], endpoint="api_timesheets")
    def api_timesheets():
        if "user_id" not in session:
            token = request.headers.get(STATION_TOKEN_HEADER) or ""
            if container.stations_repo.authenticate(token) is None:
                raise StationInvalidError("This station is not registered or has been revoked")

        ids: list[int] = []
        for raw in request.args.getlist("schedule_id"):
            for part in raw.split(","):
                part = part.strip()
                if not part:
                    continue
                if not part.isdigit():
                    raise ValidationError("schedule_id must be a list of integers")
                ids.append(int(part))

        if "user_id" in session and current_role() not in MANAGER_ROLES:
            ids = _own_schedule_ids(ids)

        timesheets = container.attendance_service.list_timesheets(ids)
        return jsonify({"data": [t.to_dict() for t in timesheets]})

    def _submit(action: CheckAction):
        body = json_body()
        kwargs = dict(
            schedule_id=_int_field(body, "schedule_id"),
            employee_id=_int_field(body, "employee_id", "user_id"),
            station_token=_station_token(body),
            verification=_verification(body),
        )
        if action == CheckAction.CHECK_IN:
            timesheet = container.attendance_service.check_in(**kwargs)
            return jsonify({"message": "Checked in", "data": timesheet.to_dict()}), 201
        timesheet = container.attendance_service.check_out(**kwargs)
        return jsonify({"message": "Checked out", "data": timesheet.to_dict()}), 200

    @app.route("/api/check-in/verify-check-in", methods=["POST"], endpoint="api_verify_check_in")
    def api_verify_check_in():
        return _submit(CheckAction.CHECK_IN)

    @app.route("/api/check-in/verify-check-out", methods=["POST"], endpoint="api_verify_check_out")
    def api_verify_check_out():
        return _submit(CheckAction.CHECK_OUT)
