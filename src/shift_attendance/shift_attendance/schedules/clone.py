"""Reuse the previous day's roster for one shift code."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta, timezone, tzinfo
from typing import Optional

from ..common.datetime_utils import move_to_day
from ..shifts.model import ShiftCode
from .model import BulkCreateResult, WorkSchedule, WorkScheduleDraft
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloneResult:
    target_date: date
    source_date: date
    shift_code: ShiftCode
    source_count: int
    skipped: int = 0
    bulk: Optional[BulkCreateResult] = None

    @property
    def nothing_to_clone(self) -> bool:
        return self.bulk is None or self.bulk.requested == 0

    @property
    def requested(self) -> int:
        return self.bulk.requested if self.bulk else 0

    @property
    def created_count(self) -> int:
        return self.bulk.created_count if self.bulk else 0

    @property
    def message(self) -> str:
        if self.nothing_to_clone:
            if self.skipped:
                return (
                    f"Nothing to clone: {self.skipped} {self.shift_code.value} shift(s) on "
                    f"{self.source_date.isoformat()} skipped with unreadable times"
                )
            return f"Nothing to clone: no {self.shift_code.value} shifts on {self.source_date.isoformat()}"
        return self.bulk.message


def retarget_schedule(source: WorkSchedule, target_date: date, *, tz: tzinfo = timezone.utc) -> WorkScheduleDraft:
    """Same employee and shift on ``target_date``, keeping the time-of-day of each timestamp."""
    return WorkScheduleDraft(
        user_id=source.user_id,
        work_date=target_date,
        shift_code=source.shift_code,
        expected_start=move_to_day(source.expected_start, target_date, tz=tz),
        expected_end=move_to_day(source.expected_end, target_date, tz=tz),
    )


class ShiftCloneEngine:
    """Copy ``shift_code`` assignments from ``target_date - 1 day`` onto ``target_date``.

    No client-side deduplication: the repository rejects rows that would
    duplicate an existing (user, date, shift) assignment, and those show up as
    failures in the bulk result.
    """

    def __init__(self, schedules: ScheduleRepository, *, tz: tzinfo = timezone.utc):
        self._schedules = schedules
        self._tz = tz

    def source_schedules(self, *, target_date: date, shift_code: ShiftCode) -> list[WorkSchedule]:
        prev_day = target_date - timedelta(days=1)
        rows = self._schedules.list_range(start=prev_day, end=prev_day, shift_code=shift_code)
        return [s for s in rows if s.work_date == prev_day and s.shift_code == shift_code]

    def build_drafts(self, *, target_date: date, shift_code: ShiftCode) -> tuple[list[WorkScheduleDraft], int]:
        """Drafts for the batch plus the number of unusable sources left out."""
        drafts: list[WorkScheduleDraft] = []
        skipped = 0
        for source in self.source_schedules(target_date=target_date, shift_code=shift_code):
            if source.times_malformed:
                logger.warning("clone_source_malformed", extra={"schedule_id": source.schedule_id})
                skipped += 1
                continue
            drafts.append(retarget_schedule(source, target_date, tz=self._tz))
        return drafts, skipped

    def clone_previous_day(self, *, target_date: date, shift_code: ShiftCode) -> CloneResult:
        source_date = target_date - timedelta(days=1)
        drafts, skipped = self.build_drafts(target_date=target_date, shift_code=shift_code)

        if not drafts:
            logger.info(
                "clone_nothing_to_clone",
                extra={"source_date": str(source_date), "shift_code": shift_code.value},
            )
            return CloneResult(
                target_date=target_date,
                source_date=source_date,
                shift_code=shift_code,
                source_count=skipped,
                skipped=skipped,
            )

        bulk = self._schedules.create_bulk(drafts)
        logger.info(
            "clone_submitted",
            extra={
                "target_date": str(target_date),
                "shift_code": shift_code.value,
                "created": bulk.created_count,
                "requested": bulk.requested,
            },
        )
        return CloneResult(
            target_date=target_date,
            source_date=source_date,
            shift_code=shift_code,
            source_count=len(drafts) + skipped,
            skipped=skipped,
            bulk=bulk,
        )
