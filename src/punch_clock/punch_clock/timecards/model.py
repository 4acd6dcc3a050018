from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import TimeCardStatus


@dataclass(frozen=True)
class TimeCard:
    """Thực thể miền (domain): one continuous worked interval on one job.

    Times are naive UTC, as stored.
    """

    timecard_id: str
    company_id: str
    job_id: Optional[str]
    user_id: str
    punch_in_time: datetime
    punch_out_time: Optional[datetime]
    total_hours: Optional[float] = None
    overtime_hours: Optional[float] = None
    break_minutes: int = 0
    cost_code_id: Optional[str] = None
    status: TimeCardStatus = TimeCardStatus.APPROVED
    notes: Optional[str] = None
    requires_approval: bool = False
    distance_warning: bool = False
    punch_in_latitude: Optional[float] = None
    punch_in_longitude: Optional[float] = None
    punch_out_latitude: Optional[float] = None
    punch_out_longitude: Optional[float] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_closed(self) -> bool:
        return self.punch_out_time is not None


@dataclass(frozen=True)
class TimeCardAdjustment:
    """Recalculated fields written back onto a card (naive UTC times)."""

    punch_in_time: datetime
    punch_out_time: datetime
    total_hours: float
    overtime_hours: float
    break_minutes: int = 0


@dataclass(frozen=True)
class TimeCardClosure:
    """Everything written when an open card is closed on punch-out."""

    adjustment: TimeCardAdjustment
    cost_code_id: Optional[str]
    status: TimeCardStatus
    requires_approval: bool
    distance_warning: bool
    notes: Optional[str] = None
    punch_out_latitude: Optional[float] = None
    punch_out_longitude: Optional[float] = None
