from __future__ import annotations

from abc import ABC, abstractmethod

from ...schedules.model import WorkSchedule


class ShiftDurationCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll figures)."""

    @abstractmethod
    def duration_seconds(self, schedule: WorkSchedule) -> int:
        raise NotImplementedError
