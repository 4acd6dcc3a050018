from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PunchType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall
from .model import PunchRecord
from .repository import PunchRepository


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: str,
        company_id: str,
        job_id: Optional[str],
        punch_type: PunchType,
        punch_time: datetime,
        cost_code_id: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        photo_url: Optional[str] = None,
    ) -> str:
        punch_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO punch_records(
                    punch_id, user_id, company_id, job_id, cost_code_id,
                    punch_type, punch_time, latitude, longitude, photo_url
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    punch_id,
                    user_id,
                    company_id,
                    job_id,
                    cost_code_id,
                    punch_type.value,
                    punch_time,
                    latitude,
                    longitude,
                    photo_url,
                ),
            )
        return punch_id

    def list_between(
        self,
        *,
        user_id: str,
        job_id: Optional[str],
        start: datetime,
        end: datetime,
    ) -> Sequence[PunchRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT punch_id, user_id, company_id, job_id, cost_code_id,
                       punch_type, punch_time, latitude, longitude, photo_url
                FROM punch_records
                WHERE user_id=%s AND job_id <=> %s AND punch_time BETWEEN %s AND %s
                ORDER BY punch_time ASC
                """,
                (user_id, job_id, start, end),
            )
            return [
                PunchRecord(
                    punch_id=str(r["punch_id"]),
                    user_id=str(r["user_id"]),
                    company_id=str(r["company_id"]),
                    job_id=r.get("job_id"),
                    cost_code_id=r.get("cost_code_id"),
                    punch_type=PunchType(r["punch_type"]),
                    punch_time=r["punch_time"],
                    latitude=as_float(r.get("latitude")),
                    longitude=as_float(r.get("longitude")),
                    photo_url=r.get("photo_url"),
                )
                for r in fetchall(cur)
            ]

    def fill_missing_cost_code(
        self,
        *,
        user_id: str,
        job_id: Optional[str],
        punch_type: PunchType,
        start: datetime,
        end: datetime,
        cost_code_id: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE punch_records
                SET cost_code_id=%s
                WHERE user_id=%s AND job_id <=> %s AND punch_type=%s
                  AND punch_time BETWEEN %s AND %s
                  AND cost_code_id IS NULL
                """,
                (cost_code_id, user_id, job_id, punch_type.value, start, end),
            )
            return int(cur.rowcount or 0)
