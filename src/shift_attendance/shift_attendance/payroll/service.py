from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..core.exceptions import ValidationError
from ..schedules.model import WorkSchedule
from ..schedules.repository import ScheduleRepository
from .calculator.base import ShiftDurationCalculator
from .calculator.standard_calculator import StandardShiftDurationCalculator


@dataclass(frozen=True)
class PeriodSummary:
    """Derived aggregate; computed on demand, never stored."""

    user_id: int
    total_shifts: int
    total_hours: float
    full_name: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "total_shifts": self.total_shifts,
            "total_hours": self.total_hours,
        }


def _hours(seconds: int) -> float:
    return round(seconds / 3600, 2)


class PeriodSummaryService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        *,
        calculator: Optional[ShiftDurationCalculator] = None,
    ):
        self._schedules = schedules
        self._calculator = calculator or StandardShiftDurationCalculator()

    def aggregate(self, user_id: int, rows: Iterable[WorkSchedule], *, start: date, end: date) -> PeriodSummary:
        """Sum the rows of ``user_id`` dated within [start, end]."""
        total_shifts = 0
        total_seconds = 0
        name = email = None
        for row in rows:
            if row.user_id != user_id or not (start <= row.work_date <= end):
                continue
            total_shifts += 1
            total_seconds += self._calculator.duration_seconds(row)
            name = name or row.employee_name
            email = email or row.employee_email
        return PeriodSummary(
            user_id=user_id,
            total_shifts=total_shifts,
            total_hours=_hours(total_seconds),
            full_name=name,
            email=email,
        )

    def summarize(self, *, user_id: int, start: date, end: date) -> PeriodSummary:
        if end < start:
            raise ValidationError("End date is before start date")
        rows = self._schedules.list_range(start=start, end=end, user_id=user_id)
        return self.aggregate(user_id, rows, start=start, end=end)

    def summarize_team(self, *, start: date, end: date) -> list[PeriodSummary]:
        """One summary per employee with at least one shift, most hours first."""
        if end < start:
            raise ValidationError("End date is before start date")
        rows = list(self._schedules.list_range(start=start, end=end))
        user_ids = sorted({r.user_id for r in rows})
        summaries = [self.aggregate(uid, rows, start=start, end=end) for uid in user_ids]
        summaries.sort(key=lambda s: (-s.total_hours, s.user_id))
        return summaries


def team_summary_csv(summaries: Iterable[PeriodSummary]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=["user_id", "full_name", "email", "total_shifts", "total_hours"])
    writer.writeheader()
    for summary in summaries:
        writer.writerow(summary.to_dict())
    return out.getvalue().encode("utf-8-sig")
