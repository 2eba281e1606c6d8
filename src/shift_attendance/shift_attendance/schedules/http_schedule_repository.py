from __future__ import annotations

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Sequence

from ..common.api_client import ApiClient
from ..common.payloads import unwrap_list
from ..core.exceptions import CollaboratorError, DomainError, NotFoundError
from ..shifts.model import ShiftCode
from .model import (
    BulkCreateResult,
    BulkFailure,
    WorkSchedule,
    WorkScheduleDraft,
    draft_to_payload,
    schedule_from_payload,
)
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class HttpScheduleRepository(ScheduleRepository):
    """Schedule collaborator reached over the REST backend."""

    def __init__(self, api: ApiClient, *, tz: tzinfo = timezone.utc, base_path: str = "/schedules"):
        self._api = api
        self._tz = tz
        self._base = "/" + base_path.strip("/")

    def _rows_to_schedules(self, rows: list) -> list[WorkSchedule]:
        out: list[WorkSchedule] = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            try:
                schedule = schedule_from_payload(row, tz=self._tz, lenient=True)
            except DomainError as exc:
                logger.warning("schedule_row_skipped", extra={"row": row, "error": str(exc)})
                continue
            if schedule.times_malformed:
                logger.warning("schedule_times_malformed", extra={"schedule_id": schedule.schedule_id})
            out.append(schedule)
        return out

    def _one(self, payload) -> WorkSchedule:
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        if not isinstance(payload, dict):
            raise CollaboratorError("Schedule collaborator returned an unexpected body")
        return schedule_from_payload(payload, tz=self._tz, lenient=True)

    def list_range(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
        shift_code: Optional[ShiftCode] = None,
    ) -> Sequence[WorkSchedule]:
        params: dict = {"from": start.isoformat(), "to": end.isoformat()}
        if user_id is not None:
            params["user_id"] = int(user_id)
        if shift_code is not None:
            params["shift_code"] = shift_code.value

        schedules = self._rows_to_schedules(unwrap_list(self._api.get(self._base, params=params)))
        # The backend may ignore filters it does not know about.
        return [
            s
            for s in schedules
            if start <= s.work_date <= end
            and (user_id is None or s.user_id == int(user_id))
            and (shift_code is None or s.shift_code == shift_code)
        ]

    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        try:
            return self._one(self._api.get(f"{self._base}/{int(schedule_id)}"))
        except NotFoundError:
            return None

    def create(self, draft: WorkScheduleDraft) -> WorkSchedule:
        return self._one(self._api.post(self._base, json=draft_to_payload(draft)))

    def create_bulk(self, drafts: Sequence[WorkScheduleDraft]) -> BulkCreateResult:
        drafts = list(drafts)
        if not drafts:
            return BulkCreateResult(requested=0)

        payload = self._api.post(f"{self._base}/bulk", json={"schedules": [draft_to_payload(d) for d in drafts]})
        created = self._rows_to_schedules(unwrap_list(payload, "successful_records", "data", "created"))

        failures: list[BulkFailure] = []
        failed_rows = unwrap_list(payload, "failed_records", "failed") if isinstance(payload, dict) else []
        for row in failed_rows:
            if not isinstance(row, dict):
                continue
            index = row.get("index")
            if isinstance(index, int) and 0 <= index < len(drafts):
                failures.append(BulkFailure(index=index, draft=drafts[index], reason=str(row.get("reason") or "rejected")))

        result = BulkCreateResult(requested=len(drafts), created=tuple(created), failures=tuple(failures))
        if not result.is_complete:
            logger.warning("bulk_create_partial", extra={"created": result.created_count, "requested": result.requested})
        return result

    def update(
        self,
        *,
        schedule_id: int,
        work_date: Optional[date] = None,
        shift_code: Optional[ShiftCode] = None,
        expected_start: Optional[datetime] = None,
        expected_end: Optional[datetime] = None,
    ) -> WorkSchedule:
        fields: dict = {}
        if work_date is not None:
            fields["date"] = work_date.isoformat()
        if shift_code is not None:
            fields["shift_code"] = shift_code.value
        if expected_start is not None:
            fields["expected_start"] = expected_start.isoformat()
        if expected_end is not None:
            fields["expected_end"] = expected_end.isoformat()
        return self._one(self._api.patch(f"{self._base}/{int(schedule_id)}", json=fields))

    def delete(self, *, schedule_id: int) -> bool:
        try:
            self._api.delete(f"{self._base}/{int(schedule_id)}")
        except NotFoundError:
            return False
        return True
