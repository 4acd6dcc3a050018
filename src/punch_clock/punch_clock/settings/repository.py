from __future__ import annotations

from typing import Optional, Protocol

from .model import PunchClockSettings


class SettingsRepository(Protocol):
    def get_for_job(self, *, company_id: str, job_id: str) -> Optional[PunchClockSettings]:
        raise NotImplementedError

    def get_company_default(self, *, company_id: str) -> Optional[PunchClockSettings]:
        """Company-level row (``job_id IS NULL``)."""

        raise NotImplementedError
