from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import TimesheetStatus


@dataclass(frozen=True)
class StatusDecision:
    status: TimesheetStatus
    late_minutes: int = 0


class CheckInStatusStrategy(ABC):
    """Strategy Pattern: encapsulate how a check-in is classified."""

    @abstractmethod
    def decide(self, *, check_in_at: datetime, expected_start: Optional[datetime]) -> StatusDecision:
        raise NotImplementedError
