"""Shift-window adjustment of punch times.

All functions here are pure: they take the punch times already expressed in
the business time zone and return new values, never touching storage.

Rules:
- Shift start is built on the punch-in date, shift end on the punch-out date;
  an end earlier than the start is moved one day forward (overnight shift).
- An early punch-in inside the grace window snaps to the shift start unless
  early time is counted. Outside the window it is kept as is.
- A late punch-out inside the grace window snaps to the shift end unless late
  time is counted. Outside the window it is kept as is.
- Adjustment only ever shortens the worked interval.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ..hours.calculator.base import HoursCalculator, WorkedHours
from ..hours.calculator.standard_calculator import StandardHoursCalculator
from ..jobs.model import JobShiftConfig
from ..settings.model import PunchClockSettings


@dataclass(frozen=True)
class ShiftWindow:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class AdjustedPunches:
    punch_in: datetime
    punch_out: datetime
    hours: WorkedHours


def _at(day_source: datetime, time_of_day: time) -> datetime:
    return datetime.combine(
        day_source.date(),
        time_of_day.replace(second=0, microsecond=0),
        tzinfo=day_source.tzinfo,
    )


def build_shift_window(punch_in: datetime, punch_out: datetime, config: JobShiftConfig) -> Optional[ShiftWindow]:
    if not config.has_shift_window:
        return None

    start = _at(punch_in, config.shift_start_time)
    end = _at(punch_out, config.shift_end_time)
    if end < start:
        end += timedelta(days=1)
    return ShiftWindow(start=start, end=end)


def adjust_punch_in(punch_in: datetime, window: ShiftWindow, config: JobShiftConfig) -> datetime:
    if punch_in >= window.start:
        return punch_in

    grace_start = window.start - timedelta(minutes=config.early_punch_in_grace_minutes)
    if punch_in >= grace_start and not config.count_early_punch_in:
        return window.start
    return punch_in


def adjust_punch_out(punch_out: datetime, window: ShiftWindow, config: JobShiftConfig) -> datetime:
    if punch_out <= window.end:
        return punch_out

    grace_end = window.end + timedelta(minutes=config.late_punch_out_grace_minutes)
    if punch_out <= grace_end and not config.count_late_punch_out:
        return window.end
    return punch_out


def adjust_punches(
    punch_in: datetime,
    punch_out: datetime,
    *,
    config: Optional[JobShiftConfig],
    settings: PunchClockSettings,
    calculator: Optional[HoursCalculator] = None,
) -> AdjustedPunches:
    """Apply the shift window (when the job has one) and compute worked hours."""
    adjusted_in, adjusted_out = punch_in, punch_out

    window = build_shift_window(punch_in, punch_out, config) if config else None
    if window:
        adjusted_in = adjust_punch_in(punch_in, window, config)
        adjusted_out = adjust_punch_out(punch_out, window, config)

    hours = (calculator or StandardHoursCalculator()).calculate(adjusted_in, adjusted_out, settings)
    return AdjustedPunches(punch_in=adjusted_in, punch_out=adjusted_out, hours=hours)
