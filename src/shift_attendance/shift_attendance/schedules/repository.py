from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..shifts.model import ShiftCode
from .model import BulkCreateResult, WorkSchedule, WorkScheduleDraft


class ScheduleRepository(Protocol):
    def list_range(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
        shift_code: Optional[ShiftCode] = None,
    ) -> Sequence[WorkSchedule]:
        """Schedules whose date falls in [start, end], both inclusive."""

        raise NotImplementedError

    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        raise NotImplementedError

    def create(self, draft: WorkScheduleDraft) -> WorkSchedule:
        raise NotImplementedError

    def create_bulk(self, drafts: Sequence[WorkScheduleDraft]) -> BulkCreateResult:
        """Create many schedules; rows rejected by the store (duplicates) do not
        abort the others and are reported in the result."""

        raise NotImplementedError

    def update(
        self,
        *,
        schedule_id: int,
        work_date: Optional[date] = None,
        shift_code: Optional[ShiftCode] = None,
        expected_start: Optional[datetime] = None,
        expected_end: Optional[datetime] = None,
    ) -> WorkSchedule:
        raise NotImplementedError

    def delete(self, *, schedule_id: int) -> bool:
        raise NotImplementedError
