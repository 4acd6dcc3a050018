from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

from ..common.datetime_utils import utc_now
from ..common.geo import distance_between
from ..common.validators import require_non_empty
from ..core.constants import PUNCH_IN_MATCH_SECONDS
from ..core.enums import PunchType
from ..core.exceptions import GeofenceError, NotFoundError, ValidationError
from ..costcodes.repository import CostCodeRepository
from ..geofence.repository import GeofenceRepository
from ..geofence.rules import check_geofence, pick_settings
from ..hours.calculator.base import HoursCalculator
from ..jobs.model import JobShiftConfig
from ..jobs.repository import JobRepository
from ..settings.repository import SettingsRepository
from ..settings.resolver import resolve_settings
from ..timecards.model import TimeCard, TimeCardClosure
from ..timecards.repository import TimeCardRepository
from ..timecards.review import review_time_card
from ..timecards.service import calculate_adjustment
from .repository import PunchRepository

logger = logging.getLogger(__name__)


def _join_notes(*parts: Optional[str]) -> Optional[str]:
    kept = [p.strip() for p in parts if p and p.strip()]
    return " | ".join(kept) or None


class PunchService:
    """Opens a time card on punch-in and closes it on punch-out."""

    def __init__(
        self,
        timecards: TimeCardRepository,
        punches: PunchRepository,
        jobs: JobRepository,
        settings: SettingsRepository,
        cost_codes: CostCodeRepository,
        geofence: GeofenceRepository,
        *,
        calculator: Optional[HoursCalculator] = None,
        zone: tzinfo = timezone.utc,
    ):
        self._timecards = timecards
        self._punches = punches
        self._jobs = jobs
        self._settings = settings
        self._cost_codes = cost_codes
        self._geofence = geofence
        self._calculator = calculator
        self._zone = zone

    def _get_job(self, job_id: str) -> JobShiftConfig:
        job = self._jobs.get_by_id(job_id)
        if not job:
            raise NotFoundError("Unable to find job")
        return job

    def _check_cost_code(self, cost_code_id: str, job_id: Optional[str]) -> str:
        code = self._cost_codes.get_by_id(cost_code_id)
        if not code or not code.is_active:
            raise ValidationError("Invalid cost code")
        if code.job_id != job_id:
            raise ValidationError("Cost code does not belong to the job")
        return code.cost_code_id

    def _enforce_geofence(
        self,
        *,
        user_id: str,
        job: JobShiftConfig,
        action: str,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> None:
        try:
            rows = self._geofence.list_for_user(user_id=user_id, company_id=job.company_id)
        except Exception:
            # Settings lookup failures never block a punch.
            logger.exception("Geofence settings lookup failed for user %s", user_id)
            return

        try:
            check_geofence(pick_settings(rows), job, action=action, latitude=latitude, longitude=longitude)
        except GeofenceError as e:
            logger.warning("Punch %s blocked for user %s on job %s: %s", action, user_id, job.job_id, e.code)
            raise

    def punch_in(
        self,
        *,
        user_id: str,
        job_id: str,
        cost_code_id: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        photo_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TimeCard:
        now = now or utc_now()
        user_id = require_non_empty(user_id, "user_id")
        job_id = require_non_empty(job_id, "job_id")

        job = self._get_job(job_id)
        self._enforce_geofence(user_id=user_id, job=job, action="in", latitude=latitude, longitude=longitude)
        if cost_code_id:
            cost_code_id = self._check_cost_code(cost_code_id, job.job_id)

        if self._timecards.get_open_for_user(user_id):
            raise ValidationError("User is already punched in")

        self._punches.create(
            user_id=user_id,
            company_id=job.company_id,
            job_id=job.job_id,
            punch_type=PunchType.PUNCHED_IN,
            punch_time=now,
            cost_code_id=cost_code_id,
            latitude=latitude,
            longitude=longitude,
            photo_url=photo_url,
        )
        timecard_id = self._timecards.create_open(
            company_id=job.company_id,
            job_id=job.job_id,
            user_id=user_id,
            punch_in_time=now,
            cost_code_id=cost_code_id,
            latitude=latitude,
            longitude=longitude,
        )
        logger.info("User %s punched in on job %s (time card %s)", user_id, job.job_id, timecard_id)
        return self._reload(timecard_id)

    def punch_out(
        self,
        *,
        user_id: str,
        cost_code_id: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        photo_url: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TimeCard:
        now = now or utc_now()
        user_id = require_non_empty(user_id, "user_id")

        card = self._timecards.get_open_for_user(user_id)
        if not card:
            raise ValidationError("User is not currently punched in")
        if now < card.punch_in_time:
            raise ValidationError("Punch-out cannot be earlier than punch-in")

        config = self._get_job(card.job_id) if card.job_id else None
        if config:
            self._enforce_geofence(user_id=user_id, job=config, action="out", latitude=latitude, longitude=longitude)

        code_to_use = card.cost_code_id
        if cost_code_id:
            code_to_use = self._check_cost_code(cost_code_id, card.job_id)

        settings = resolve_settings(self._settings, job_id=card.job_id, company_id=card.company_id)
        closed = replace(card, punch_out_time=now)
        adjustment = calculate_adjustment(
            closed,
            config=config,
            settings=settings,
            zone=self._zone,
            calculator=self._calculator,
        )

        distance = distance_between(card.punch_in_latitude, card.punch_in_longitude, latitude, longitude)
        review = review_time_card(adjustment.total_hours, settings, distance_meters=distance)

        closure = TimeCardClosure(
            adjustment=adjustment,
            cost_code_id=code_to_use,
            status=review.status,
            requires_approval=review.requires_approval,
            distance_warning=review.distance_warning,
            notes=_join_notes(card.notes, notes, review.reason if review.distance_warning else None),
            punch_out_latitude=latitude,
            punch_out_longitude=longitude,
        )
        # No punch record is written unless the close succeeds.
        if not self._timecards.close(timecard_id=card.timecard_id, closure=closure):
            raise ValidationError("Time card was already closed")

        if code_to_use and not card.cost_code_id:
            # Carry the code back onto the matching punch-in record.
            window = timedelta(seconds=PUNCH_IN_MATCH_SECONDS)
            self._punches.fill_missing_cost_code(
                user_id=user_id,
                job_id=card.job_id,
                punch_type=PunchType.PUNCHED_IN,
                start=card.punch_in_time - window,
                end=card.punch_in_time + window,
                cost_code_id=code_to_use,
            )

        self._punches.create(
            user_id=user_id,
            company_id=card.company_id,
            job_id=card.job_id,
            punch_type=PunchType.PUNCHED_OUT,
            punch_time=now,
            cost_code_id=code_to_use,
            latitude=latitude,
            longitude=longitude,
            photo_url=photo_url,
        )

        logger.info(
            "User %s punched out (time card %s, %.2fh, status=%s)",
            user_id,
            card.timecard_id,
            adjustment.total_hours,
            review.status.value,
        )
        return self._reload(card.timecard_id)

    def _reload(self, timecard_id: str) -> TimeCard:
        card = self._timecards.get_by_id(timecard_id)
        if not card:
            raise NotFoundError("Time card not found")
        return card
