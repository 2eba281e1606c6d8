from __future__ import annotations

from ...common.datetime_utils import seconds_of_day
from ...core.constants import SECONDS_PER_DAY
from ...schedules.model import WorkSchedule
from .base import ShiftDurationCalculator


class StandardShiftDurationCalculator(ShiftDurationCalculator):
    """Standard rule: expected_end - expected_start on the wall clock.

    An end time-of-day earlier than the start is read as the next calendar day
    (22:00-06:00 is 8h). Shifts without both times count as 0.
    """

    def duration_seconds(self, schedule: WorkSchedule) -> int:
        if schedule.expected_start is None or schedule.expected_end is None:
            return 0
        start = seconds_of_day(schedule.expected_start)
        end = seconds_of_day(schedule.expected_end)
        if end < start:
            end += SECONDS_PER_DAY
        return end - start
