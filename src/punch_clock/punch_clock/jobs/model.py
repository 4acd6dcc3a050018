from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..core.constants import DEFAULT_EARLY_GRACE_MINUTES, DEFAULT_LATE_GRACE_MINUTES


@dataclass(frozen=True)
class JobShiftConfig:
    """Thực thể miền (domain): Shift window, grace rules and site location of a job."""

    job_id: str
    company_id: str
    shift_start_time: Optional[time] = None
    shift_end_time: Optional[time] = None
    count_early_punch_in: bool = False
    early_punch_in_grace_minutes: int = DEFAULT_EARLY_GRACE_MINUTES
    count_late_punch_out: bool = True
    late_punch_out_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_shift_window(self) -> bool:
        return self.shift_start_time is not None and self.shift_end_time is not None

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None
