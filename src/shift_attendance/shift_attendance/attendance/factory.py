from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from .strategies.base import CheckInStatusStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class CheckInStatusFactory:
    """Factory Pattern: choose the status strategy for a check-in."""

    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES

    def for_checkin(self, *, check_in_at: datetime, expected_start: Optional[datetime]) -> CheckInStatusStrategy:
        if expected_start is None:
            return OnTimeStrategy()
        if check_in_at <= expected_start + timedelta(minutes=self.grace_minutes):
            return OnTimeStrategy()
        return LateStrategy()
