"""Date arithmetic and grouping for the week/month planning grid."""

from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Sequence

from ..common.datetime_utils import format_hhmm
from .model import WorkSchedule


class ViewMode(str, Enum):
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def days(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range((self.end - self.start).days + 1)]


@dataclass(frozen=True)
class PlannerRow:
    schedule_id: int
    user_id: int
    employee_name: str
    shift_code: str
    time_label: str
    overnight: bool


def week_range(reference: date) -> DateRange:
    start = reference - timedelta(days=reference.weekday())
    return DateRange(start=start, end=start + timedelta(days=6))


def month_range(reference: date) -> DateRange:
    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return DateRange(start=reference.replace(day=1), end=reference.replace(day=last_day))


def range_for(mode: ViewMode, reference: date) -> DateRange:
    return week_range(reference) if mode == ViewMode.WEEK else month_range(reference)


def shift_reference(mode: ViewMode, reference: date, steps: int) -> date:
    """Move the reference date by whole weeks or months (negative = back)."""
    if mode == ViewMode.WEEK:
        return reference + timedelta(weeks=steps)

    month_index = reference.month - 1 + steps
    year = reference.year + month_index // 12
    month = month_index % 12 + 1
    day = min(reference.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def to_row(schedule: WorkSchedule) -> PlannerRow:
    return PlannerRow(
        schedule_id=schedule.schedule_id,
        user_id=schedule.user_id,
        employee_name=schedule.employee_name or "My Shift",
        shift_code=schedule.shift_code.value,
        time_label=f"{format_hhmm(schedule.expected_start)} - {format_hhmm(schedule.expected_end)}",
        overnight=schedule.is_overnight,
    )


def group_by_day(schedules: Iterable[WorkSchedule], days: Sequence[date]) -> dict[date, list[PlannerRow]]:
    """Rows per displayed day; days without shifts are left out."""
    buckets: dict[date, list[WorkSchedule]] = defaultdict(list)
    for schedule in schedules:
        buckets[schedule.work_date].append(schedule)

    out: dict[date, list[PlannerRow]] = {}
    for day in days:
        items = buckets.get(day)
        if not items:
            continue
        items.sort(key=lambda s: (s.expected_start is None, s.expected_start or 0, s.user_id))
        out[day] = [to_row(s) for s in items]
    return out
