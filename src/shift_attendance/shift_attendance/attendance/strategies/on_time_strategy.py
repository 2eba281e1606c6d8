from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import TimesheetStatus
from .base import CheckInStatusStrategy, StatusDecision


class OnTimeStrategy(CheckInStatusStrategy):
    """Check-in within the grace period (or no expected start to compare with)."""

    def decide(self, *, check_in_at: datetime, expected_start: Optional[datetime]) -> StatusDecision:
        return StatusDecision(status=TimesheetStatus.ON_TIME)
