from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_iso_datetime, utc_now
from ..common.validators import require_non_empty
from ..core.constants import (
    BACKFILL_DEFAULT_DAYS,
    BACKFILL_DEFAULT_LIMIT,
    BACKFILL_MAX_LIMIT,
    BACKFILL_OPEN_CARD_HOURS,
    BACKFILL_PUNCH_IN_MATCH_MINUTES,
    BACKFILL_WINDOW_MINUTES,
)
from ..core.enums import PunchType
from ..core.exceptions import ValidationError
from ..punches.model import PunchRecord
from ..punches.repository import PunchRepository
from ..timecards.model import TimeCard
from ..timecards.repository import TimeCardRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackfillResult:
    processed: int
    updated_time_cards: int
    skipped: int

    def to_dict(self) -> dict:
        return asdict(self)


def infer_cost_code(punches: Sequence[PunchRecord]) -> Optional[str]:
    """Last coded punch-out wins; otherwise the first punch carrying any code."""
    coded_outs = [p for p in punches if p.punch_type == PunchType.PUNCHED_OUT and p.cost_code_id]
    if coded_outs:
        return coded_outs[-1].cost_code_id
    for p in punches:
        if p.cost_code_id:
            return p.cost_code_id
    return None


def _clamp_limit(value: Any) -> int:
    if value is None:
        return BACKFILL_DEFAULT_LIMIT
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError("limit must be an integer")
    if limit == 0:
        limit = BACKFILL_DEFAULT_LIMIT
    return min(max(limit, 1), BACKFILL_MAX_LIMIT)


def _parse_bound(value: Any, field_name: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO-8601 timestamp")


class CostCodeBackfillService:
    """Fills in missing cost codes on time cards from the surrounding punches."""

    def __init__(self, timecards: TimeCardRepository, punches: PunchRepository):
        self._timecards = timecards
        self._punches = punches

    def backfill(
        self,
        *,
        company_id: Any,
        days: Any = None,
        start: Any = None,
        end: Any = None,
        limit: Any = None,
        now: Optional[datetime] = None,
    ) -> BackfillResult:
        company_id = require_non_empty(company_id, "company_id")
        now = now or utc_now()

        if isinstance(days, bool) or not isinstance(days, (int, float)) or days <= 0:
            days = BACKFILL_DEFAULT_DAYS
        range_start = _parse_bound(start, "from") or now - timedelta(days=days)
        range_end = _parse_bound(end, "to") or now

        cards = self._timecards.list_missing_cost_code(
            company_id=company_id,
            start=range_start,
            end=range_end,
            limit=_clamp_limit(limit),
        )

        updated = skipped = 0
        for card in cards:
            try:
                if self._backfill_card(card):
                    updated += 1
                else:
                    skipped += 1
            except Exception:
                logger.exception("Cost code backfill failed for time card %s", card.timecard_id)
                skipped += 1

        result = BackfillResult(processed=len(cards), updated_time_cards=updated, skipped=skipped)
        logger.info("Backfill result company=%s %s", company_id, result.to_dict())
        return result

    def _backfill_card(self, card: TimeCard) -> bool:
        in_time = card.punch_in_time
        out_time = card.punch_out_time or in_time + timedelta(hours=BACKFILL_OPEN_CARD_HOURS)
        window_start = in_time - timedelta(minutes=BACKFILL_WINDOW_MINUTES)
        window_end = out_time + timedelta(minutes=BACKFILL_WINDOW_MINUTES)

        punches = self._punches.list_between(
            user_id=card.user_id,
            job_id=card.job_id,
            start=window_start,
            end=window_end,
        )
        code = infer_cost_code(punches)
        if not code:
            return False

        self._timecards.set_cost_code(timecard_id=card.timecard_id, cost_code_id=code)

        match = timedelta(minutes=BACKFILL_PUNCH_IN_MATCH_MINUTES)
        self._punches.fill_missing_cost_code(
            user_id=card.user_id,
            job_id=card.job_id,
            punch_type=PunchType.PUNCHED_IN,
            start=in_time - match,
            end=in_time + match,
            cost_code_id=code,
        )
        self._punches.fill_missing_cost_code(
            user_id=card.user_id,
            job_id=card.job_id,
            punch_type=PunchType.PUNCHED_OUT,
            start=window_start,
            end=window_end,
            cost_code_id=code,
        )
        return True
