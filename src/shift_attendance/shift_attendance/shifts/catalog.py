from __future__ import annotations

from datetime import time
from typing import Mapping

from .model import ShiftCode, ShiftDefinition

DEFAULT_SHIFTS: Mapping[ShiftCode, ShiftDefinition] = {
    ShiftCode.MORNING: ShiftDefinition(ShiftCode.MORNING, time(8, 0), time(12, 0)),
    ShiftCode.AFTERNOON: ShiftDefinition(ShiftCode.AFTERNOON, time(13, 0), time(17, 0)),
    ShiftCode.EVENING: ShiftDefinition(ShiftCode.EVENING, time(18, 0), time(22, 0)),
    ShiftCode.NIGHT: ShiftDefinition(ShiftCode.NIGHT, time(22, 0), time(6, 0)),
}


def default_shift(code: ShiftCode) -> ShiftDefinition:
    return DEFAULT_SHIFTS[code]
