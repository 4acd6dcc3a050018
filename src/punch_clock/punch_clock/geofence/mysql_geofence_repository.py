from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.constants import DEFAULT_GEOFENCE_LIMIT_METERS
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall
from .model import GeofenceSettings
from .repository import GeofenceRepository


def _to_model(r: Dict[str, Any]) -> GeofenceSettings:
    limit = as_float(r.get("punch_in_distance_limit_meters"))
    return GeofenceSettings(
        enforce_punch_distance=bool(as_bool(r.get("enforce_punch_in_distance"))),
        distance_limit_meters=DEFAULT_GEOFENCE_LIMIT_METERS if limit is None else limit,
    )


class MySQLGeofenceRepository(GeofenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, *, user_id: str, company_id: Optional[str]) -> Sequence[GeofenceSettings]:
        sql = """
            SELECT enforce_punch_in_distance, punch_in_distance_limit_meters
            FROM employee_timecard_settings
            WHERE user_id=%s
        """
        params: list[Any] = [user_id]
        if company_id:
            sql += " AND company_id=%s"
            params.append(company_id)
        sql += " ORDER BY updated_at DESC LIMIT 5"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_model(r) for r in fetchall(cur)]
