from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import TimeCard, TimeCardAdjustment, TimeCardClosure


class TimeCardRepository(Protocol):
    def get_by_id(self, timecard_id: str) -> Optional[TimeCard]:
        raise NotImplementedError

    def list_closed_for_company(
        self,
        *,
        company_id: str,
        job_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[TimeCard]:
        """Closed (punch_out_time set), non-deleted cards of a company."""

        raise NotImplementedError

    def update_adjustment(self, *, timecard_id: str, adjustment: TimeCardAdjustment) -> bool:
        raise NotImplementedError

    def get_open_for_user(self, user_id: str) -> Optional[TimeCard]:
        raise NotImplementedError

    def create_open(
        self,
        *,
        company_id: str,
        job_id: str,
        user_id: str,
        punch_in_time: datetime,
        cost_code_id: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> str:
        raise NotImplementedError

    def close(self, *, timecard_id: str, closure: TimeCardClosure) -> bool:
        raise NotImplementedError

    def list_missing_cost_code(
        self,
        *,
        company_id: str,
        start: datetime,
        end: datetime,
        limit: int,
    ) -> Sequence[TimeCard]:
        """Non-deleted cards without a cost code whose punch-in is in [start, end], oldest first."""

        raise NotImplementedError

    def set_cost_code(self, *, timecard_id: str, cost_code_id: str) -> bool:
        raise NotImplementedError
