from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Any

from ..core.exceptions import ValidationError


class ShiftCode(str, Enum):
    """Named segments of a day used to bucket assignments."""

    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    EVENING = "EVENING"
    NIGHT = "NIGHT"


@dataclass(frozen=True)
class ShiftDefinition:
    """Default time-of-day window of a shift code."""

    code: ShiftCode
    start_time: time
    end_time: time

    @property
    def is_overnight(self) -> bool:
        return self.end_time < self.start_time


def parse_shift_code(value: Any) -> ShiftCode:
    if isinstance(value, ShiftCode):
        return value
    try:
        return ShiftCode(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown shift code: {value!r}") from None
