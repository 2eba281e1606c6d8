from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Station:
    """A shared physical terminal employees check in at."""

    station_id: int
    station_name: str
    is_active: bool = True
