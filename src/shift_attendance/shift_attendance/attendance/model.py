from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_timestamp
from ..core.enums import TimesheetStatus
from ..core.exceptions import CollaboratorError, ValidationError


def parse_status(value: Any) -> TimesheetStatus:
    try:
        return TimesheetStatus(str(value or "").strip().upper())
    except ValueError:
        return TimesheetStatus.UNKNOWN


@dataclass(frozen=True)
class Timesheet:
    """Domain entity: realized check-in/check-out of one WorkSchedule."""

    timesheet_id: int
    schedule_id: int
    check_in_at: Optional[datetime]
    check_out_at: Optional[datetime] = None
    status_code: TimesheetStatus = TimesheetStatus.UNKNOWN

    def __post_init__(self) -> None:
        if self.check_out_at is not None and self.check_in_at is not None and self.check_out_at < self.check_in_at:
            raise ValidationError("check_out_at is earlier than check_in_at")

    def to_dict(self) -> dict:
        return {
            "timesheet_id": self.timesheet_id,
            "schedule_id": self.schedule_id,
            "check_in_at": self.check_in_at.isoformat() if self.check_in_at else None,
            "check_out_at": self.check_out_at.isoformat() if self.check_out_at else None,
            "status_code": self.status_code.value,
        }


def timesheet_from_payload(payload: Mapping[str, Any], *, tz: tzinfo) -> Timesheet:
    try:
        check_in = payload.get("check_in_at")
        check_out = payload.get("check_out_at")
        return Timesheet(
            timesheet_id=int(payload.get("timesheet_id") or payload.get("id") or 0),
            schedule_id=int(payload.get("schedule_id") or 0),
            check_in_at=parse_timestamp(check_in, tz=tz) if check_in else None,
            check_out_at=parse_timestamp(check_out, tz=tz) if check_out else None,
            status_code=parse_status(payload.get("status_code")),
        )
    except (TypeError, ValueError) as exc:
        raise CollaboratorError(f"Malformed timesheet payload: {exc}") from exc
