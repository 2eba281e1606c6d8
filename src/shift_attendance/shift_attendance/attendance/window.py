"""Check-in window evaluation.

Pure functions only: the caller supplies the authoritative ``now``. The window
opens ``lead`` minutes before the expected start and never closes; lateness is
classified elsewhere from the recorded check-in time. Check-out has no window.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from ..core.constants import DEFAULT_CHECKIN_LEAD_MINUTES
from ..core.exceptions import WindowClosedError


@dataclass(frozen=True)
class Countdown:
    minutes: int
    seconds: int

    @property
    def total_seconds(self) -> int:
        return self.minutes * 60 + self.seconds

    @property
    def label(self) -> str:
        return f"{self.minutes:02d}:{self.seconds:02d}"


ZERO = Countdown(0, 0)


def _as_start(expected_start: Any) -> Optional[datetime]:
    # Anything that is not a real timestamp keeps the window shut.
    return expected_start if isinstance(expected_start, datetime) else None


def window_opens_at(expected_start: Any, *, lead_minutes: int = DEFAULT_CHECKIN_LEAD_MINUTES) -> Optional[datetime]:
    start = _as_start(expected_start)
    if start is None:
        return None
    return start - timedelta(minutes=lead_minutes)


def is_check_in_open(now: datetime, expected_start: Any, *, lead_minutes: int = DEFAULT_CHECKIN_LEAD_MINUTES) -> bool:
    opens_at = window_opens_at(expected_start, lead_minutes=lead_minutes)
    if opens_at is None:
        return False
    return now >= opens_at


def countdown_to_open(now: datetime, expected_start: Any, *, lead_minutes: int = DEFAULT_CHECKIN_LEAD_MINUTES) -> Optional[Countdown]:
    """Whole minutes and seconds until the window opens; zero once open.

    ``None`` when the shift has no usable start (the window never opens).
    """
    opens_at = window_opens_at(expected_start, lead_minutes=lead_minutes)
    if opens_at is None:
        return None
    remaining = int(math.ceil((opens_at - now).total_seconds()))
    if remaining <= 0:
        return ZERO
    return Countdown(minutes=remaining // 60, seconds=remaining % 60)


def ensure_check_in_open(now: datetime, expected_start: Any, *, lead_minutes: int = DEFAULT_CHECKIN_LEAD_MINUTES) -> None:
    """Raise WindowClosedError unless check-in is permitted at ``now``."""
    opens_at = window_opens_at(expected_start, lead_minutes=lead_minutes)
    if opens_at is None:
        raise WindowClosedError("Check-in is unavailable for this shift")
    if now >= opens_at:
        return
    remaining = countdown_to_open(now, expected_start, lead_minutes=lead_minutes)
    raise WindowClosedError(
        f"Check-in opens at {opens_at.strftime('%H:%M')} (in {remaining.label})",
        opens_at=opens_at,
        remaining_seconds=remaining.total_seconds,
    )
