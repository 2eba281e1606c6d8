from __future__ import annotations

from datetime import timedelta
from typing import Any, Mapping, Optional

from flask import Flask, Response, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_role, current_user_id, date_arg, json_body, login_required, manager_required
from ..container import Container
from ..core.constants import STATION_TOKEN_HEADER
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, StationInvalidError, ValidationError
from ..payroll.service import team_summary_csv
from ..shifts.model import parse_shift_code
from .model import (
    BulkCreateResult,
    WorkScheduleDraft,
    parse_optional_timestamp,
    draft_from_payload,
    draft_to_payload,
    schedule_to_payload,
)


def register(app: Flask, container: Container) -> None:
    tz = container.tz

    def _range():
        today = container.clock.now().date()
        start = date_arg("from", alias="start", default=today)
        end = date_arg("to", alias="end", default=start + timedelta(days=6))
        return start, end

    def _reader_allowed() -> None:
        """Managers, or a registered station reading its employee's roster."""
        if current_role() in (Role.ADMIN, Role.MANAGER):
            return
        token = request.headers.get(STATION_TOKEN_HEADER)
        if token:
            if container.stations_repo.authenticate(token) is None:
                raise StationInvalidError("This station is not registered or has been revoked")
            return
        raise AuthorizationError("Only managers can access schedules")

    def _draft(payload: Mapping[str, Any]) -> WorkScheduleDraft:
        draft = draft_from_payload(payload, tz=tz)
        if draft.expected_start is None and draft.expected_end is None:
            draft = container.schedule_service.build_draft(
                user_id=draft.user_id,
                work_date=draft.work_date,
                shift_code=draft.shift_code,
            )
        return draft

    def _bulk_body(result: BulkCreateResult) -> dict:
        return {
            "message": result.message,
            "requested": result.requested,
            "created": result.created_count,
            "successful_records": [schedule_to_payload(s) for s in result.created],
            "failed_records": [
                {"index": f.index, "reason": f.reason, **draft_to_payload(f.draft)} for f in result.failures
            ],
        }

    @app.route("/api/schedules", methods=["GET"], endpoint="api_schedules_list")
    def api_schedules_list():
        _reader_allowed()
        start, end = _range()
        user_id = request.args.get("user_id", type=int)
        shift_code_raw = request.args.get("shift_code")
        shift_code = parse_shift_code(shift_code_raw) if shift_code_raw else None
        rows = container.schedule_service.list_range(start=start, end=end, user_id=user_id, shift_code=shift_code)
        return jsonify({"data": [schedule_to_payload(s) for s in rows]})

    @app.route("/api/schedules/<int:schedule_id>", methods=["GET"], endpoint="api_schedules_get")
    def api_schedules_get(schedule_id: int):
        _reader_allowed()
        schedule = container.schedules_repo.get_by_id(schedule_id)
        if schedule is None:
            raise NotFoundError(f"Schedule {schedule_id} not found")
        return jsonify({"data": schedule_to_payload(schedule)})

    @app.route("/api/schedules", methods=["POST"], endpoint="api_schedules_create")
    @manager_required
    def api_schedules_create():
        created = container.schedule_service.assign(current_role=current_role(), draft=_draft(json_body()))
        return jsonify({"data": schedule_to_payload(created)}), 201

    @app.route("/api/schedules/bulk", methods=["POST"], endpoint="api_schedules_bulk")
    @manager_required
    def api_schedules_bulk():
        body = json_body()
        items = body.get("schedules")
        if not isinstance(items, list):
            raise ValidationError("'schedules' must be a list")

        drafts = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise ValidationError(f"schedules[{index}] must be an object")
            try:
                drafts.append(_draft(item))
            except ValidationError as exc:
                raise ValidationError(f"schedules[{index}]: {exc}") from exc

        result = container.schedule_service.assign_bulk(current_role=current_role(), drafts=drafts)
        return jsonify(_bulk_body(result)), 201 if result.created_count else 200

    @app.route("/api/schedules/clone", methods=["POST"], endpoint="api_schedules_clone")
    @manager_required
    def api_schedules_clone():
        body = json_body()
        raw_date = body.get("target_date") or body.get("date")
        if not raw_date:
            raise ValidationError("target_date is required")
        try:
            target_date = parse_iso_date(raw_date)
        except ValueError:
            raise ValidationError("target_date must be YYYY-MM-DD") from None

        result = container.clone_engine.clone_previous_day(
            target_date=target_date,
            shift_code=parse_shift_code(body.get("shift_code")),
        )
        out = {
            "message": result.message,
            "nothing_to_clone": result.nothing_to_clone,
            "source_date": result.source_date.isoformat(),
            "target_date": result.target_date.isoformat(),
            "shift_code": result.shift_code.value,
            "skipped": result.skipped,
        }
        if result.bulk is not None:
            out.update(_bulk_body(result.bulk))
        return jsonify(out), 201 if result.created_count else 200

    @app.route("/api/schedules/<int:schedule_id>", methods=["PATCH"], endpoint="api_schedules_update")
    @manager_required
    def api_schedules_update(schedule_id: int):
        body = json_body()
        raw_date = body.get("date", body.get("work_date"))
        try:
            work_date = parse_iso_date(raw_date) if raw_date else None
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD") from None
        shift_code: Optional[Any] = body.get("shift_code")

        updated = container.schedule_service.update(
            current_role=current_role(),
            schedule_id=schedule_id,
            work_date=work_date,
            shift_code=parse_shift_code(shift_code) if shift_code else None,
            expected_start=parse_optional_timestamp(body.get("expected_start"), tz=tz, field_name="expected_start"),
            expected_end=parse_optional_timestamp(body.get("expected_end"), tz=tz, field_name="expected_end"),
        )
        return jsonify({"data": schedule_to_payload(updated)})

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="api_schedules_delete")
    @manager_required
    def api_schedules_delete(schedule_id: int):
        container.schedule_service.delete(current_role=current_role(), schedule_id=schedule_id)
        return "", 204

    @app.route("/api/schedules/summary", methods=["GET"], endpoint="api_schedules_summary")
    @manager_required
    def api_schedules_summary():
        start, end = _range()
        summaries = container.summary_service.summarize_team(start=start, end=end)
        return jsonify({"from": start.isoformat(), "to": end.isoformat(), "data": [s.to_dict() for s in summaries]})

    @app.route("/api/schedules/summary.csv", methods=["GET"], endpoint="api_schedules_summary_csv")
    @manager_required
    def api_schedules_summary_csv():
        start, end = _range()
        body = team_summary_csv(container.summary_service.summarize_team(start=start, end=end))
        filename = f"shift_summary_{start.isoformat()}_{end.isoformat()}.csv"
        return Response(
            body,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/my-schedules", methods=["GET"], endpoint="api_my_schedules")
    @login_required
    def api_my_schedules():
        start, end = _range()
        rows = container.schedule_service.list_range(start=start, end=end, user_id=current_user_id())
        rows = sorted(rows, key=lambda s: (s.work_date, s.schedule_id))
        return jsonify({"data": [schedule_to_payload(s) for s in rows]})

    @app.route("/api/my-schedules/my-summary", methods=["GET"], endpoint="api_my_summary")
    @login_required
    def api_my_summary():
        start, end = _range()
        summary = container.summary_service.summarize(user_id=current_user_id(), start=start, end=end)
        return jsonify({"from": start.isoformat(), "to": end.isoformat(), "data": summary.to_dict()})
