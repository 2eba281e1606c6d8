from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TimesheetStatus
from .model import Timesheet


class TimesheetRepository(Protocol):
    """Server-side store; holds at most one Timesheet per schedule."""

    def get_for_schedule(self, schedule_id: int) -> Optional[Timesheet]:
        raise NotImplementedError

    def list_for_schedules(self, schedule_ids: Sequence[int]) -> Sequence[Timesheet]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        schedule_id: int,
        check_in_at: datetime,
        status: TimesheetStatus,
        station_id: Optional[int] = None,
    ) -> Timesheet:
        """Raises InvalidTransitionError if the schedule already has a Timesheet."""

        raise NotImplementedError

    def update_checkout(self, *, timesheet_id: int, check_out_at: datetime) -> Timesheet:
        """Raises InvalidTransitionError unless the Timesheet is still open."""

        raise NotImplementedError
