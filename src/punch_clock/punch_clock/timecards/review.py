from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import LOCATION_MISMATCH_METERS, LONG_TIMECARD_HOURS, VERY_LONG_TIMECARD_HOURS
from ..core.enums import TimeCardStatus
from ..settings.model import PunchClockSettings


@dataclass(frozen=True)
class ReviewDecision:
    status: TimeCardStatus
    requires_approval: bool
    distance_warning: bool
    reason: Optional[str] = None


def review_time_card(
    total_hours: float,
    settings: PunchClockSettings,
    *,
    distance_meters: Optional[float] = None,
) -> ReviewDecision:
    """Decide whether a freshly closed card needs manager approval.

    A location mismatch takes precedence over the long-card reason.
    """
    over_24 = settings.flag_timecards_over_24hrs and total_hours > VERY_LONG_TIMECARD_HOURS
    over_12 = settings.flag_timecards_over_12hrs and total_hours > LONG_TIMECARD_HOURS
    locations_differ = distance_meters is not None and distance_meters > LOCATION_MISMATCH_METERS

    reason = None
    if locations_differ:
        reason = f"Punch-out location differs from punch-in ({distance_meters:.0f}m apart)"
    elif over_24 or over_12:
        limit = VERY_LONG_TIMECARD_HOURS if total_hours > VERY_LONG_TIMECARD_HOURS else LONG_TIMECARD_HOURS
        reason = f"Time card exceeds {limit} hours"

    flagged = over_24 or over_12 or locations_differ
    return ReviewDecision(
        status=TimeCardStatus.PENDING if flagged else TimeCardStatus.APPROVED,
        requires_approval=flagged,
        distance_warning=locations_differ,
        reason=reason,
    )
