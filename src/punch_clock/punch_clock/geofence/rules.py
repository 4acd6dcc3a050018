"""Job-site distance rule applied at punch time.

- No settings row, or no row with enforcement on: the punch goes through.
- Enforced and the job has no site location: ``JOB_LOCATION_MISSING``.
- Enforced and the device sent no location: ``LOCATION_REQUIRED``.
- Enforced and the device is farther than the limit: ``OUT_OF_GEOFENCE_RANGE``.
"""
from __future__ import annotations

from typing import Optional, Sequence

from ..common.geo import haversine_distance
from ..core.exceptions import GeofenceError
from ..jobs.model import JobShiftConfig
from .model import GeofenceSettings

JOB_LOCATION_MISSING = "JOB_LOCATION_MISSING"
LOCATION_REQUIRED = "LOCATION_REQUIRED"
OUT_OF_GEOFENCE_RANGE = "OUT_OF_GEOFENCE_RANGE"

_ACTION_LABELS = {"in": "punch in", "out": "punch out"}


def pick_settings(rows: Sequence[GeofenceSettings]) -> Optional[GeofenceSettings]:
    """An enabled row wins over newer disabled ones; otherwise the latest row."""
    if not rows:
        return None
    for row in rows:
        if row.enforce_punch_distance:
            return row
    return rows[0]


def check_geofence(
    settings: Optional[GeofenceSettings],
    job: JobShiftConfig,
    *,
    action: str,
    latitude: Optional[float],
    longitude: Optional[float],
) -> Optional[float]:
    """Raise ``GeofenceError`` when the punch is blocked; returns the distance checked."""
    if settings is None or not settings.enforce_punch_distance:
        return None

    label = _ACTION_LABELS.get(action, action)
    if not job.has_location:
        raise GeofenceError(
            JOB_LOCATION_MISSING,
            "This job does not have a job-site location set. Contact your administrator.",
            action=action,
        )
    if latitude is None or longitude is None:
        raise GeofenceError(LOCATION_REQUIRED, f"Location is required to {label} for this job.", action=action)

    distance = haversine_distance(latitude, longitude, job.latitude, job.longitude)
    if distance > settings.distance_limit_meters:
        raise GeofenceError(
            OUT_OF_GEOFENCE_RANGE,
            f"You are not at the job site and cannot {label}.",
            action=action,
            distance_from_job_meters=round(distance),
            distance_limit_meters=settings.distance_limit_meters,
        )
    return distance
