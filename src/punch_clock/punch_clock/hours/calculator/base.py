from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from ...settings.model import PunchClockSettings


@dataclass(frozen=True)
class WorkedHours:
    total_hours: float
    overtime_hours: float
    break_minutes: int = 0


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked hours)."""

    @abstractmethod
    def calculate(self, punch_in: datetime, punch_out: datetime, settings: PunchClockSettings) -> WorkedHours:
        raise NotImplementedError
