from __future__ import annotations

from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchone
from .model import DEFAULT_SETTINGS, PunchClockSettings
from .repository import SettingsRepository

_COLUMNS = """
    calculate_overtime, overtime_threshold, auto_break_duration, auto_break_wait_hours,
    flag_timecards_over_12hrs, flag_timecards_over_24hrs
"""


def _pick(value: Any, default: Any) -> Any:
    return default if value is None else value


def _to_model(r: Dict[str, Any]) -> PunchClockSettings:
    # NULL columns fall back per field, a stored row never blanks the defaults.
    d = DEFAULT_SETTINGS
    break_minutes = r.get("auto_break_duration")
    return PunchClockSettings(
        calculate_overtime=_pick(as_bool(r.get("calculate_overtime")), d.calculate_overtime),
        overtime_threshold_hours=_pick(as_float(r.get("overtime_threshold")), d.overtime_threshold_hours),
        auto_break_duration_minutes=d.auto_break_duration_minutes if break_minutes is None else int(break_minutes),
        auto_break_wait_hours=_pick(as_float(r.get("auto_break_wait_hours")), d.auto_break_wait_hours),
        flag_timecards_over_12hrs=_pick(as_bool(r.get("flag_timecards_over_12hrs")), d.flag_timecards_over_12hrs),
        flag_timecards_over_24hrs=_pick(as_bool(r.get("flag_timecards_over_24hrs")), d.flag_timecards_over_24hrs),
    )


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_job(self, *, company_id: str, job_id: str) -> Optional[PunchClockSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM job_punch_clock_settings
                WHERE company_id=%s AND job_id=%s
                LIMIT 1
                """,
                (company_id, job_id),
            )
            r = fetchone(cur)
            return _to_model(r) if r else None

    def get_company_default(self, *, company_id: str) -> Optional[PunchClockSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM job_punch_clock_settings
                WHERE company_id=%s AND job_id IS NULL
                LIMIT 1
                """,
                (company_id,),
            )
            r = fetchone(cur)
            return _to_model(r) if r else None
