from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PunchType
from .model import PunchRecord


class PunchRepository(Protocol):
    def create(
        self,
        *,
        user_id: str,
        company_id: str,
        job_id: Optional[str],
        punch_type: PunchType,
        punch_time: datetime,
        cost_code_id: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        photo_url: Optional[str] = None,
    ) -> str:
        raise NotImplementedError

    def list_between(
        self,
        *,
        user_id: str,
        job_id: Optional[str],
        start: datetime,
        end: datetime,
    ) -> Sequence[PunchRecord]:
        """Punches of a user on a job in [start, end], ordered by punch_time."""

        raise NotImplementedError

    def fill_missing_cost_code(
        self,
        *,
        user_id: str,
        job_id: Optional[str],
        punch_type: PunchType,
        start: datetime,
        end: datetime,
        cost_code_id: str,
    ) -> int:
        """Set the cost code on matching punches that have none; returns rows changed."""

        raise NotImplementedError
