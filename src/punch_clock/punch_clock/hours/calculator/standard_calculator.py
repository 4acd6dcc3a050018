from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import elapsed_hours
from ...settings.model import PunchClockSettings
from .base import HoursCalculator, WorkedHours


class StandardHoursCalculator(HoursCalculator):
    """Standard rule: elapsed (out - in), one auto-break once past the wait, then overtime.

    - The break is deducted once when the span is strictly longer than
      ``auto_break_wait_hours``.
    - Overtime is only counted when ``calculate_overtime`` is on.
    """

    def calculate(self, punch_in: datetime, punch_out: datetime, settings: PunchClockSettings) -> WorkedHours:
        total_hours = max(0.0, elapsed_hours(punch_in, punch_out))

        break_minutes = 0
        if total_hours > settings.auto_break_wait_hours:
            break_minutes = int(settings.auto_break_duration_minutes)
            total_hours -= break_minutes / 60

        overtime_hours = 0.0
        if settings.calculate_overtime:
            overtime_hours = max(0.0, total_hours - settings.overtime_threshold_hours)

        return WorkedHours(total_hours=total_hours, overtime_hours=overtime_hours, break_minutes=break_minutes)
