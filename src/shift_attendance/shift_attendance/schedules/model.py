from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_date, parse_timestamp, seconds_of_day
from ..core.exceptions import MalformedScheduleError, ValidationError
from ..shifts.model import ShiftCode, parse_shift_code


def _check_common(user_id: Any, work_date: Any, shift_code: Any) -> None:
    if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
        raise ValidationError("user_id is invalid")
    if not isinstance(work_date, date) or isinstance(work_date, datetime):
        raise ValidationError("date is required")
    if not isinstance(shift_code, ShiftCode):
        raise ValidationError(f"Unknown shift code: {shift_code!r}")


def _check_times(expected_start: Any, expected_end: Any) -> None:
    for name, value in (("expected_start", expected_start), ("expected_end", expected_end)):
        if value is not None and not isinstance(value, datetime):
            raise MalformedScheduleError(f"{name} is not a timestamp: {value!r}")


def _is_overnight(start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is None or end is None:
        return False
    return seconds_of_day(end) < seconds_of_day(start)


@dataclass(frozen=True)
class WorkScheduleDraft:
    """A schedule not yet stored (single create, bulk create or clone output)."""

    user_id: int
    work_date: date
    shift_code: ShiftCode
    expected_start: Optional[datetime] = None
    expected_end: Optional[datetime] = None

    def __post_init__(self) -> None:
        _check_common(self.user_id, self.work_date, self.shift_code)
        _check_times(self.expected_start, self.expected_end)


@dataclass(frozen=True)
class WorkSchedule:
    """Domain entity: one employee planned on one shift on one date.

    An ``expected_end`` earlier in the day than ``expected_start`` is an
    overnight shift, not an error.
    """

    schedule_id: int
    user_id: int
    work_date: date
    shift_code: ShiftCode
    expected_start: Optional[datetime] = None
    expected_end: Optional[datetime] = None
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    # Set when the source row had unparseable times; check-in stays closed.
    times_malformed: bool = False

    def __post_init__(self) -> None:
        _check_common(self.user_id, self.work_date, self.shift_code)
        _check_times(self.expected_start, self.expected_end)

    @property
    def is_overnight(self) -> bool:
        return _is_overnight(self.expected_start, self.expected_end)


@dataclass(frozen=True)
class BulkFailure:
    index: int
    draft: WorkScheduleDraft
    reason: str


@dataclass(frozen=True)
class BulkCreateResult:
    """Outcome of a bulk create; partial success is a normal outcome."""

    requested: int
    created: tuple[WorkSchedule, ...] = ()
    failures: tuple[BulkFailure, ...] = field(default_factory=tuple)

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def failed_count(self) -> int:
        return max(self.requested - self.created_count, 0)

    @property
    def is_complete(self) -> bool:
        return self.created_count == self.requested

    @property
    def message(self) -> str:
        return f"{self.created_count} of {self.requested} created"


def parse_optional_timestamp(value: Any, *, tz: tzinfo, field_name: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        return parse_timestamp(value, tz=tz)
    except (TypeError, ValueError):
        raise MalformedScheduleError(f"{field_name} is not a timestamp: {value!r}") from None


def _employee_fields(payload: Mapping[str, Any]) -> tuple[Optional[str], Optional[str]]:
    name = payload.get("full_name")
    email = payload.get("email")
    nested = payload.get("employees")
    if isinstance(nested, Mapping):
        users = nested.get("users")
        if isinstance(users, Mapping):
            name = name or users.get("full_name")
            email = email or users.get("email")
    return name, email


def _required_date(payload: Mapping[str, Any]) -> date:
    raw = payload.get("date", payload.get("work_date"))
    if not raw:
        raise ValidationError("date is required")
    try:
        return parse_iso_date(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"date is invalid: {raw!r}") from None


def draft_from_payload(payload: Mapping[str, Any], *, tz: tzinfo) -> WorkScheduleDraft:
    try:
        user_id = int(payload.get("user_id") or 0)
    except (TypeError, ValueError):
        raise ValidationError("user_id is invalid") from None
    return WorkScheduleDraft(
        user_id=user_id,
        work_date=_required_date(payload),
        shift_code=parse_shift_code(payload.get("shift_code")),
        expected_start=parse_optional_timestamp(payload.get("expected_start"), tz=tz, field_name="expected_start"),
        expected_end=parse_optional_timestamp(payload.get("expected_end"), tz=tz, field_name="expected_end"),
    )


def schedule_from_payload(payload: Mapping[str, Any], *, tz: tzinfo, lenient: bool = False) -> WorkSchedule:
    """Build a WorkSchedule from a collaborator row.

    With ``lenient`` a row whose times cannot be parsed is still returned, with
    both times absent and ``times_malformed`` set, so it shows up but can never
    be checked into.
    """

    try:
        schedule_id = int(payload.get("schedule_id") or payload.get("id") or 0)
        user_id = int(payload.get("user_id") or 0)
    except (TypeError, ValueError):
        raise ValidationError("schedule row has invalid identifiers") from None

    name, email = _employee_fields(payload)
    base = dict(
        schedule_id=schedule_id,
        user_id=user_id,
        work_date=_required_date(payload),
        shift_code=parse_shift_code(payload.get("shift_code")),
        employee_name=name,
        employee_email=email,
    )
    try:
        start = parse_optional_timestamp(payload.get("expected_start"), tz=tz, field_name="expected_start")
        end = parse_optional_timestamp(payload.get("expected_end"), tz=tz, field_name="expected_end")
    except MalformedScheduleError:
        if not lenient:
            raise
        return WorkSchedule(**base, times_malformed=True)
    return WorkSchedule(**base, expected_start=start, expected_end=end)


def draft_to_payload(draft: WorkScheduleDraft) -> dict:
    return {
        "user_id": draft.user_id,
        "date": draft.work_date.isoformat(),
        "shift_code": draft.shift_code.value,
        "expected_start": draft.expected_start.isoformat() if draft.expected_start else None,
        "expected_end": draft.expected_end.isoformat() if draft.expected_end else None,
    }


def schedule_to_payload(schedule: WorkSchedule) -> dict:
    return {
        "schedule_id": schedule.schedule_id,
        "user_id": schedule.user_id,
        "date": schedule.work_date.isoformat(),
        "shift_code": schedule.shift_code.value,
        "expected_start": schedule.expected_start.isoformat() if schedule.expected_start else None,
        "expected_end": schedule.expected_end.isoformat() if schedule.expected_end else None,
        "full_name": schedule.employee_name,
        "email": schedule.employee_email,
        "overnight": schedule.is_overnight,
    }
