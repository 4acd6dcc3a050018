from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.constants import DEFAULT_EARLY_GRACE_MINUTES, DEFAULT_LATE_GRACE_MINUTES
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import JobShiftConfig
from .repository import JobRepository

_COLUMNS = """
    job_id, company_id, shift_start_time, shift_end_time,
    count_early_punch_in, early_punch_in_grace_minutes,
    count_late_punch_out, late_punch_out_grace_minutes,
    latitude, longitude
"""


def _to_model(r: Dict[str, Any]) -> JobShiftConfig:
    count_early = as_bool(r.get("count_early_punch_in"))
    count_late = as_bool(r.get("count_late_punch_out"))
    early_grace = r.get("early_punch_in_grace_minutes")
    late_grace = r.get("late_punch_out_grace_minutes")
    return JobShiftConfig(
        job_id=str(r["job_id"]),
        company_id=str(r["company_id"]),
        shift_start_time=normalize_mysql_time(r.get("shift_start_time")),
        shift_end_time=normalize_mysql_time(r.get("shift_end_time")),
        count_early_punch_in=bool(count_early),
        early_punch_in_grace_minutes=DEFAULT_EARLY_GRACE_MINUTES if early_grace is None else int(early_grace),
        count_late_punch_out=True if count_late is None else count_late,
        late_punch_out_grace_minutes=DEFAULT_LATE_GRACE_MINUTES if late_grace is None else int(late_grace),
        latitude=as_float(r.get("latitude")),
        longitude=as_float(r.get("longitude")),
    )


class MySQLJobRepository(JobRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, job_id: str) -> Optional[JobShiftConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM jobs WHERE job_id=%s", (job_id,))
            r = fetchone(cur)
            return _to_model(r) if r else None

    def get_shift_configs(self, job_ids: Sequence[str]) -> Mapping[str, JobShiftConfig]:
        ids = list(dict.fromkeys(job_ids))
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM jobs WHERE job_id IN ({in_clause(ids)})",
                tuple(ids),
            )
            return {cfg.job_id: cfg for cfg in map(_to_model, fetchall(cur))}
