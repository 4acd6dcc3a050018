from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import (
    DEFAULT_AUTO_BREAK_DURATION_MINUTES,
    DEFAULT_AUTO_BREAK_WAIT_HOURS,
    DEFAULT_OVERTIME_THRESHOLD_HOURS,
)


@dataclass(frozen=True)
class PunchClockSettings:
    """Overtime, auto-break and review-flag settings effective for one job."""

    calculate_overtime: bool = False
    overtime_threshold_hours: float = DEFAULT_OVERTIME_THRESHOLD_HOURS
    auto_break_duration_minutes: int = DEFAULT_AUTO_BREAK_DURATION_MINUTES
    auto_break_wait_hours: float = DEFAULT_AUTO_BREAK_WAIT_HOURS
    flag_timecards_over_12hrs: bool = True
    flag_timecards_over_24hrs: bool = True


DEFAULT_SETTINGS = PunchClockSettings()
