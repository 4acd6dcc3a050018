from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PunchType


@dataclass(frozen=True)
class PunchRecord:
    """Thực thể miền (domain): a single punch-in or punch-out event."""

    punch_id: str
    user_id: str
    company_id: str
    job_id: Optional[str]
    punch_type: PunchType
    punch_time: datetime
    cost_code_id: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    photo_url: Optional[str] = None
