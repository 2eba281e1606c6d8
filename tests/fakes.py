"""In-memory stand-ins for the repository and gateway protocols."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from src.shift_attendance.shift_attendance.attendance.model import Timesheet
from src.shift_attendance.shift_attendance.core.enums import AttendanceState, CheckAction, TimesheetStatus
from src.shift_attendance.shift_attendance.core.exceptions import InvalidTransitionError, ValidationError
from src.shift_attendance.shift_attendance.schedules.model import (
    BulkCreateResult,
    BulkFailure,
    WorkSchedule,
    WorkScheduleDraft,
)
from src.shift_attendance.shift_attendance.shifts.model import ShiftCode
from src.shift_attendance.shift_attendance.stations.model import Station

UTC = timezone.utc


def at(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=UTC)


def make_schedule(
    schedule_id: int,
    *,
    user_id: int = 7,
    work_date: date = date(2025, 3, 10),
    shift_code: ShiftCode = ShiftCode.MORNING,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    name: Optional[str] = None,
    malformed: bool = False,
) -> WorkSchedule:
    return WorkSchedule(
        schedule_id=schedule_id,
        user_id=user_id,
        work_date=work_date,
        shift_code=shift_code,
        expected_start=start,
        expected_end=end,
        employee_name=name,
        times_malformed=malformed,
    )


class InMemorySchedules:
    def __init__(self, rows: Sequence[WorkSchedule] = ()):
        self.rows: dict[int, WorkSchedule] = {r.schedule_id: r for r in rows}
        self._id = max(self.rows, default=0)
        self.bulk_calls: list[list[WorkScheduleDraft]] = []

    def _duplicate(self, draft: WorkScheduleDraft, ignore_id: Optional[int] = None) -> bool:
        return any(
            r.user_id == draft.user_id and r.work_date == draft.work_date and r.shift_code == draft.shift_code
            for r in self.rows.values()
            if r.schedule_id != ignore_id
        )

    def list_range(self, *, start, end, user_id=None, shift_code=None):
        return [
            r
            for r in sorted(self.rows.values(), key=lambda s: s.schedule_id)
            if start <= r.work_date <= end
            and (user_id is None or r.user_id == user_id)
            and (shift_code is None or r.shift_code == shift_code)
        ]

    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        return self.rows.get(int(schedule_id))

    def create(self, draft: WorkScheduleDraft) -> WorkSchedule:
        if self._duplicate(draft):
            raise ValidationError("Schedule already exists for this employee, date and shift")
        self._id += 1
        row = WorkSchedule(
            schedule_id=self._id,
            user_id=draft.user_id,
            work_date=draft.work_date,
            shift_code=draft.shift_code,
            expected_start=draft.expected_start,
            expected_end=draft.expected_end,
        )
        self.rows[row.schedule_id] = row
        return row

    def create_bulk(self, drafts: Sequence[WorkScheduleDraft]) -> BulkCreateResult:
        drafts = list(drafts)
        self.bulk_calls.append(drafts)
        created, failures = [], []
        for index, draft in enumerate(drafts):
            try:
                created.append(self.create(draft))
            except ValidationError:
                failures.append(BulkFailure(index=index, draft=draft, reason="duplicate"))
        return BulkCreateResult(requested=len(drafts), created=tuple(created), failures=tuple(failures))

    def update(self, *, schedule_id, work_date=None, shift_code=None, expected_start=None, expected_end=None):
        current = self.rows[int(schedule_id)]
        changes: dict[str, Any] = {}
        if work_date is not None:
            changes["work_date"] = work_date
        if shift_code is not None:
            changes["shift_code"] = shift_code
        if expected_start is not None:
            changes["expected_start"] = expected_start
        if expected_end is not None:
            changes["expected_end"] = expected_end
        updated = replace(current, **changes)
        self.rows[updated.schedule_id] = updated
        return updated

    def delete(self, *, schedule_id: int) -> bool:
        return self.rows.pop(int(schedule_id), None) is not None


class InMemoryTimesheets:
    def __init__(self):
        self.by_schedule: dict[int, Timesheet] = {}
        self.station_ids: dict[int, Optional[int]] = {}
        self._id = 0

    def get_for_schedule(self, schedule_id: int) -> Optional[Timesheet]:
        return self.by_schedule.get(int(schedule_id))

    def list_for_schedules(self, schedule_ids):
        return [self.by_schedule[i] for i in schedule_ids if i in self.by_schedule]

    def create_checkin(self, *, schedule_id, check_in_at, status, station_id=None) -> Timesheet:
        if schedule_id in self.by_schedule:
            raise InvalidTransitionError("Already checked in for this shift", state=AttendanceState.CHECKED_IN)
        self._id += 1
        ts = Timesheet(timesheet_id=self._id, schedule_id=schedule_id, check_in_at=check_in_at, status_code=status)
        self.by_schedule[schedule_id] = ts
        self.station_ids[schedule_id] = station_id
        return ts

    def update_checkout(self, *, timesheet_id, check_out_at) -> Timesheet:
        for schedule_id, ts in self.by_schedule.items():
            if ts.timesheet_id == timesheet_id:
                if ts.check_out_at is not None:
                    raise InvalidTransitionError("Already checked out", state=AttendanceState.COMPLETED)
                updated = replace(ts, check_out_at=check_out_at)
                self.by_schedule[schedule_id] = updated
                return updated
        raise InvalidTransitionError("Cannot check out before checking in", state=AttendanceState.AWAITING_CHECK_IN)


class InMemoryStations:
    def __init__(self, tokens: Optional[Mapping[str, Station]] = None):
        self.tokens = dict(tokens or {})

    def authenticate(self, token: str) -> Optional[Station]:
        return self.tokens.get(token)

    def register(self, station_name: str):
        station = Station(station_id=len(self.tokens) + 1, station_name=station_name)
        token = f"token-{station.station_id}"
        self.tokens[token] = station
        return station, token

    def revoke(self, station_id: int) -> bool:
        for token, station in list(self.tokens.items()):
            if station.station_id == station_id:
                del self.tokens[token]
                return True
        return False


class StubVerifier:
    def __init__(self, match: bool = True):
        self.match = match
        self.calls: list[int] = []

    def verify(self, *, employee_id: int, verification: Mapping[str, Any]) -> bool:
        self.calls.append(employee_id)
        return self.match


class MemoryCredentialStore:
    def __init__(self, token: Optional[str] = "station-token"):
        self.token = token

    def get(self) -> Optional[str]:
        return self.token

    def save(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None


class RecordingGateway:
    """AttendanceGateway double; ``error`` is raised by the next submit."""

    def __init__(self, timesheets: Optional[Mapping[int, Timesheet]] = None, *, now: Optional[datetime] = None):
        self.timesheets: dict[int, Timesheet] = dict(timesheets or {})
        self.submitted: list[tuple[CheckAction, int, str]] = []
        self.error: Optional[Exception] = None
        self.list_error: Optional[Exception] = None
        self.now = now or at(2025, 3, 10, 8, 0)

    def list_timesheets(self, schedule_ids):
        if self.list_error is not None:
            raise self.list_error
        return {i: self.timesheets[i] for i in schedule_ids if i in self.timesheets}

    def submit(self, *, action, schedule_id, employee_id, station_token, verification) -> Timesheet:
        self.submitted.append((action, schedule_id, station_token))
        if self.error is not None:
            err, self.error = self.error, None
            raise err
        current = self.timesheets.get(schedule_id)
        if action == CheckAction.CHECK_IN:
            ts = Timesheet(
                timesheet_id=schedule_id * 10,
                schedule_id=schedule_id,
                check_in_at=self.now,
                status_code=TimesheetStatus.ON_TIME,
            )
        else:
            ts = replace(current, check_out_at=max(self.now, current.check_in_at))
        self.timesheets[schedule_id] = ts
        return ts


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, *, reason: str = "", raw: Optional[bytes] = None):
        self.status_code = status_code
        self._body = body
        self.reason = reason
        if raw is not None:
            self.content = raw
        else:
            self.content = b"" if body is None else b"{}"

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class FakeSession:
    """requests.Session double keyed by (method, path suffix)."""

    def __init__(self, routes: Optional[dict] = None):
        self.routes = dict(routes or {})
        self.calls: list[dict] = []

    def request(self, method, url, *, params=None, json=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json, "headers": headers or {}})
        for (m, suffix), response in self.routes.items():
            if m == method and url.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResponse(404, {"error": {"code": "NOT_FOUND", "message": f"No route for {url}"}})
