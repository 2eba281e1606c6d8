from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Sequence

from ..common.datetime_utils import combine_day_and_time, move_to_day
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..shifts.catalog import default_shift
from ..shifts.model import ShiftCode
from .model import BulkCreateResult, WorkSchedule, WorkScheduleDraft
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)

MANAGER_ROLES = frozenset({Role.ADMIN, Role.MANAGER})


def require_manager(current_role: Optional[Role]) -> None:
    if current_role not in MANAGER_ROLES:
        raise AuthorizationError("Only managers can change schedules")


class ScheduleService:
    """Manager-facing planning operations over a ScheduleRepository."""

    def __init__(self, schedules: ScheduleRepository, *, tz: tzinfo = timezone.utc):
        self._schedules = schedules
        self._tz = tz

    def build_draft(
        self,
        *,
        user_id: int,
        work_date: date,
        shift_code: ShiftCode,
        expected_start: Optional[datetime] = None,
        expected_end: Optional[datetime] = None,
    ) -> WorkScheduleDraft:
        """Draft with the shift code's default times when none are given."""
        if expected_start is None and expected_end is None:
            shift = default_shift(shift_code)
            expected_start = combine_day_and_time(work_date, shift.start_time, tz=self._tz)
            expected_end = combine_day_and_time(work_date, shift.end_time, tz=self._tz)
        return WorkScheduleDraft(
            user_id=user_id,
            work_date=work_date,
            shift_code=shift_code,
            expected_start=expected_start,
            expected_end=expected_end,
        )

    def anchor(self, draft: WorkScheduleDraft) -> WorkScheduleDraft:
        """Put both timestamps on the draft's own ``work_date``, keeping their time-of-day."""
        return replace(
            draft,
            expected_start=move_to_day(draft.expected_start, draft.work_date, tz=self._tz),
            expected_end=move_to_day(draft.expected_end, draft.work_date, tz=self._tz),
        )

    def list_range(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
        shift_code: Optional[ShiftCode] = None,
    ) -> Sequence[WorkSchedule]:
        if end < start:
            raise ValidationError("End date is before start date")
        return self._schedules.list_range(start=start, end=end, user_id=user_id, shift_code=shift_code)

    def assign(self, *, current_role: Optional[Role], draft: WorkScheduleDraft) -> WorkSchedule:
        require_manager(current_role)
        created = self._schedules.create(self.anchor(draft))
        logger.info(
            "schedule_created",
            extra={"schedule_id": created.schedule_id, "user_id": created.user_id, "work_date": str(created.work_date)},
        )
        return created

    def assign_bulk(self, *, current_role: Optional[Role], drafts: Sequence[WorkScheduleDraft]) -> BulkCreateResult:
        require_manager(current_role)
        if not drafts:
            raise ValidationError("No schedules to create")
        result = self._schedules.create_bulk([self.anchor(d) for d in drafts])
        logger.info("schedule_bulk_created", extra={"created": result.created_count, "requested": result.requested})
        return result

    def update(
        self,
        *,
        current_role: Optional[Role],
        schedule_id: int,
        work_date: Optional[date] = None,
        shift_code: Optional[ShiftCode] = None,
        expected_start: Optional[datetime] = None,
        expected_end: Optional[datetime] = None,
    ) -> WorkSchedule:
        require_manager(current_role)
        current = self._schedules.get_by_id(schedule_id)
        if current is None:
            raise NotFoundError(f"Schedule {schedule_id} not found")

        day = work_date or current.work_date
        if day != current.work_date:
            # Stored times follow the schedule to its new date.
            if expected_start is None:
                expected_start = current.expected_start
            if expected_end is None:
                expected_end = current.expected_end
        updated = self._schedules.update(
            schedule_id=schedule_id,
            work_date=work_date,
            shift_code=shift_code,
            expected_start=move_to_day(expected_start, day, tz=self._tz),
            expected_end=move_to_day(expected_end, day, tz=self._tz),
        )
        logger.info("schedule_updated", extra={"schedule_id": updated.schedule_id, "work_date": str(updated.work_date)})
        return updated

    def delete(self, *, current_role: Optional[Role], schedule_id: int) -> None:
        require_manager(current_role)
        if not self._schedules.delete(schedule_id=int(schedule_id)):
            raise NotFoundError(f"Schedule {schedule_id} not found")
        logger.info("schedule_deleted", extra={"schedule_id": int(schedule_id)})
