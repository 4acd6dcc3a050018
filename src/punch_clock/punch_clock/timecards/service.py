from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import local_to_utc, utc_to_local
from ..common.validators import optional_id_list, require_non_empty
from ..core.enums import OutcomeStatus
from ..hours.calculator.base import HoursCalculator
from ..hours.calculator.standard_calculator import StandardHoursCalculator
from ..jobs.model import JobShiftConfig
from ..jobs.repository import JobRepository
from ..settings.model import PunchClockSettings
from ..settings.repository import SettingsRepository
from ..settings.resolver import SettingsResolver
from .adjustment import adjust_punches
from .model import TimeCard, TimeCardAdjustment
from .repository import TimeCardRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CardOutcome:
    timecard_id: str
    status: OutcomeStatus
    error: Optional[str] = None


@dataclass(frozen=True)
class RecalculationResult:
    total_processed: int
    updated_count: int
    skipped_count: int
    errors: list[dict] = field(default_factory=list)

    @classmethod
    def from_outcomes(cls, *, total_processed: int, outcomes: Iterable[CardOutcome]) -> "RecalculationResult":
        updated = skipped = 0
        errors: list[dict] = []
        for o in outcomes:
            if o.status == OutcomeStatus.UPDATED:
                updated += 1
            elif o.status == OutcomeStatus.SKIPPED:
                skipped += 1
            else:
                errors.append({"timecard_id": o.timecard_id, "error": o.error})
        return cls(total_processed=total_processed, updated_count=updated, skipped_count=skipped, errors=errors)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "success": True,
            "total_processed": self.total_processed,
            "updated_count": self.updated_count,
        }
        if self.errors:
            out["errors"] = list(self.errors)
        return out


def calculate_adjustment(
    card: TimeCard,
    *,
    config: Optional[JobShiftConfig],
    settings: PunchClockSettings,
    zone: tzinfo = timezone.utc,
    calculator: Optional[HoursCalculator] = None,
) -> TimeCardAdjustment:
    """Adjust one closed card in the business time zone; returns naive UTC times."""
    if card.punch_out_time is None:
        raise ValueError(f"time card {card.timecard_id} is still open")

    adjusted = adjust_punches(
        utc_to_local(card.punch_in_time, zone),
        utc_to_local(card.punch_out_time, zone),
        config=config,
        settings=settings,
        calculator=calculator,
    )
    return TimeCardAdjustment(
        punch_in_time=local_to_utc(adjusted.punch_in),
        punch_out_time=local_to_utc(adjusted.punch_out),
        total_hours=adjusted.hours.total_hours,
        overtime_hours=adjusted.hours.overtime_hours,
        break_minutes=adjusted.hours.break_minutes,
    )


class TimeCardRecalculationService:
    """Recomputes adjusted punch times, total and overtime hours for closed cards.

    Cards are processed one at a time and each update is committed on its
    own; a failure on one card is recorded and the batch moves on.
    """

    def __init__(
        self,
        timecards: TimeCardRepository,
        jobs: JobRepository,
        settings: SettingsRepository,
        *,
        calculator: Optional[HoursCalculator] = None,
        zone: tzinfo = timezone.utc,
    ):
        self._timecards = timecards
        self._jobs = jobs
        self._settings = settings
        self._calculator = calculator or StandardHoursCalculator()
        self._zone = zone

    def recalculate(self, *, company_id: Any, job_ids: Any = None) -> RecalculationResult:
        company_id = require_non_empty(company_id, "company_id")
        job_filter = optional_id_list(job_ids, "job_ids")

        cards = list(self._timecards.list_closed_for_company(company_id=company_id, job_ids=job_filter))
        configs = self._jobs.get_shift_configs(self._unique_job_ids(cards))
        resolver = SettingsResolver(self._settings)

        outcomes = [self._process(card, configs, resolver) for card in cards]
        result = RecalculationResult.from_outcomes(total_processed=len(cards), outcomes=outcomes)

        logger.info(
            "Recalculated time cards company=%s processed=%d updated=%d skipped=%d failed=%d",
            company_id,
            result.total_processed,
            result.updated_count,
            result.skipped_count,
            len(result.errors),
        )
        return result

    @staticmethod
    def _unique_job_ids(cards: Sequence[TimeCard]) -> list[str]:
        return list(dict.fromkeys(c.job_id for c in cards if c.job_id))

    def _process(
        self,
        card: TimeCard,
        configs: Mapping[str, JobShiftConfig],
        resolver: SettingsResolver,
    ) -> CardOutcome:
        config = configs.get(card.job_id) if card.job_id else None
        if config is None:
            return CardOutcome(card.timecard_id, OutcomeStatus.SKIPPED)

        try:
            settings = resolver.resolve(job_id=card.job_id, company_id=card.company_id)
            adjustment = calculate_adjustment(
                card,
                config=config,
                settings=settings,
                zone=self._zone,
                calculator=self._calculator,
            )
            if not self._timecards.update_adjustment(timecard_id=card.timecard_id, adjustment=adjustment):
                raise LookupError("time card not found")
        except Exception as e:
            logger.exception("Failed to recalculate time card %s", card.timecard_id)
            return CardOutcome(card.timecard_id, OutcomeStatus.FAILED, str(e))

        return CardOutcome(card.timecard_id, OutcomeStatus.UPDATED)
