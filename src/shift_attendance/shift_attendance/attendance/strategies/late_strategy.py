from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import TimesheetStatus
from .base import CheckInStatusStrategy, StatusDecision


class LateStrategy(CheckInStatusStrategy):
    """Late check-in."""

    def decide(self, *, check_in_at: datetime, expected_start: Optional[datetime]) -> StatusDecision:
        late = 0
        if expected_start is not None:
            late = max(int((check_in_at - expected_start).total_seconds() // 60), 0)
        return StatusDecision(status=TimesheetStatus.LATE, late_minutes=late)
