from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import utc_now
from ..core.enums import TimeCardStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall, fetchone, in_clause
from .model import TimeCard, TimeCardAdjustment, TimeCardClosure
from .repository import TimeCardRepository

_COLUMNS = """
    timecard_id, company_id, job_id, user_id, cost_code_id,
    punch_in_time, punch_out_time, total_hours, overtime_hours, break_minutes,
    status, notes, requires_approval, distance_warning,
    punch_in_latitude, punch_in_longitude, punch_out_latitude, punch_out_longitude,
    deleted_at
"""


def _to_model(r: Dict[str, Any]) -> TimeCard:
    return TimeCard(
        timecard_id=str(r["timecard_id"]),
        company_id=str(r["company_id"]),
        job_id=r.get("job_id"),
        user_id=str(r["user_id"]),
        cost_code_id=r.get("cost_code_id"),
        punch_in_time=r["punch_in_time"],
        punch_out_time=r.get("punch_out_time"),
        total_hours=as_float(r.get("total_hours")),
        overtime_hours=as_float(r.get("overtime_hours")),
        break_minutes=int(r.get("break_minutes") or 0),
        status=TimeCardStatus(r.get("status") or TimeCardStatus.APPROVED.value),
        notes=r.get("notes"),
        requires_approval=bool(as_bool(r.get("requires_approval"))),
        distance_warning=bool(as_bool(r.get("distance_warning"))),
        punch_in_latitude=as_float(r.get("punch_in_latitude")),
        punch_in_longitude=as_float(r.get("punch_in_longitude")),
        punch_out_latitude=as_float(r.get("punch_out_latitude")),
        punch_out_longitude=as_float(r.get("punch_out_longitude")),
        deleted_at=r.get("deleted_at"),
    )


class MySQLTimeCardRepository(TimeCardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, timecard_id: str) -> Optional[TimeCard]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_cards WHERE timecard_id=%s", (timecard_id,))
            r = fetchone(cur)
            return _to_model(r) if r else None

    def list_closed_for_company(
        self,
        *,
        company_id: str,
        job_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[TimeCard]:
        sql = f"""
            SELECT {_COLUMNS}
            FROM time_cards
            WHERE company_id=%s
              AND punch_out_time IS NOT NULL
              AND deleted_at IS NULL
        """
        params: list[Any] = [company_id]
        if job_ids:
            sql += f" AND job_id IN ({in_clause(job_ids)})"
            params.extend(job_ids)
        sql += " ORDER BY punch_in_time"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_model(r) for r in fetchall(cur)]

    def update_adjustment(self, *, timecard_id: str, adjustment: TimeCardAdjustment) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_cards
                SET punch_in_time=%s, punch_out_time=%s, total_hours=%s, overtime_hours=%s,
                    break_minutes=%s, updated_at=%s
                WHERE timecard_id=%s
                """,
                (
                    adjustment.punch_in_time,
                    adjustment.punch_out_time,
                    adjustment.total_hours,
                    adjustment.overtime_hours,
                    adjustment.break_minutes,
                    utc_now(),
                    timecard_id,
                ),
            )
            return cur.rowcount > 0

    def get_open_for_user(self, user_id: str) -> Optional[TimeCard]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_cards
                WHERE user_id=%s AND punch_out_time IS NULL AND deleted_at IS NULL
                ORDER BY punch_in_time DESC
                LIMIT 1
                """,
                (user_id,),
            )
            r = fetchone(cur)
            return _to_model(r) if r else None

    def create_open(
        self,
        *,
        company_id: str,
        job_id: str,
        user_id: str,
        punch_in_time: datetime,
        cost_code_id: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> str:
        timecard_id = str(uuid.uuid4())
        now = utc_now()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_cards(
                    timecard_id, company_id, job_id, user_id, cost_code_id, punch_in_time,
                    status, punch_in_latitude, punch_in_longitude, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    timecard_id,
                    company_id,
                    job_id,
                    user_id,
                    cost_code_id,
                    punch_in_time,
                    TimeCardStatus.APPROVED.value,
                    latitude,
                    longitude,
                    now,
                    now,
                ),
            )
        return timecard_id

    def close(self, *, timecard_id: str, closure: TimeCardClosure) -> bool:
        adj = closure.adjustment
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_cards
                SET punch_in_time=%s, punch_out_time=%s, total_hours=%s, overtime_hours=%s,
                    break_minutes=%s, cost_code_id=%s, status=%s, requires_approval=%s,
                    distance_warning=%s, notes=%s, punch_out_latitude=%s, punch_out_longitude=%s,
                    updated_at=%s
                WHERE timecard_id=%s AND punch_out_time IS NULL
                """,
                (
                    adj.punch_in_time,
                    adj.punch_out_time,
                    adj.total_hours,
                    adj.overtime_hours,
                    adj.break_minutes,
                    closure.cost_code_id,
                    closure.status.value,
                    int(closure.requires_approval),
                    int(closure.distance_warning),
                    closure.notes,
                    closure.punch_out_latitude,
                    closure.punch_out_longitude,
                    utc_now(),
                    timecard_id,
                ),
            )
            return cur.rowcount > 0

    def list_missing_cost_code(
        self,
        *,
        company_id: str,
        start: datetime,
        end: datetime,
        limit: int,
    ) -> Sequence[TimeCard]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_cards
                WHERE company_id=%s
                  AND cost_code_id IS NULL
                  AND status <> %s
                  AND deleted_at IS NULL
                  AND punch_in_time BETWEEN %s AND %s
                ORDER BY punch_in_time ASC
                LIMIT %s
                """,
                (company_id, TimeCardStatus.DELETED.value, start, end, int(limit)),
            )
            return [_to_model(r) for r in fetchall(cur)]

    def set_cost_code(self, *, timecard_id: str, cost_code_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE time_cards SET cost_code_id=%s, updated_at=%s WHERE timecard_id=%s",
                (cost_code_id, utc_now(), timecard_id),
            )
            return cur.rowcount > 0
