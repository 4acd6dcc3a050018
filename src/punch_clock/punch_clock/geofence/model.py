from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_GEOFENCE_LIMIT_METERS


@dataclass(frozen=True)
class GeofenceSettings:
    """Thực thể miền (domain): an employee's job-site distance rule."""

    enforce_punch_distance: bool = False
    distance_limit_meters: float = DEFAULT_GEOFENCE_LIMIT_METERS
