from __future__ import annotations

from typing import Optional

from .model import DEFAULT_SETTINGS, PunchClockSettings
from .repository import SettingsRepository


def resolve_settings(
    settings: SettingsRepository,
    *,
    job_id: Optional[str],
    company_id: str,
) -> PunchClockSettings:
    """Job row first, then the company row (job_id NULL), then hard defaults."""
    if job_id:
        job_row = settings.get_for_job(company_id=company_id, job_id=job_id)
        if job_row is not None:
            return job_row
    company_row = settings.get_company_default(company_id=company_id)
    if company_row is not None:
        return company_row
    return DEFAULT_SETTINGS


class SettingsResolver:
    """Caches resolved settings for the lifetime of one run.

    Settings are treated as immutable during a recalculation, so each
    (company, job) pair hits the store at most once.
    """

    def __init__(self, settings: SettingsRepository):
        self._settings = settings
        self._cache: dict[tuple[str, Optional[str]], PunchClockSettings] = {}

    def resolve(self, *, job_id: Optional[str], company_id: str) -> PunchClockSettings:
        key = (company_id, job_id)
        found = self._cache.get(key)
        if found is None:
            found = resolve_settings(self._settings, job_id=job_id, company_id=company_id)
            self._cache[key] = found
        return found
