from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import CostCode
from .repository import CostCodeRepository


class MySQLCostCodeRepository(CostCodeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, cost_code_id: str) -> Optional[CostCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT cost_code_id, job_id, code, description, is_active
                FROM cost_codes
                WHERE cost_code_id=%s
                """,
                (cost_code_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return CostCode(
                cost_code_id=str(r["cost_code_id"]),
                job_id=str(r["job_id"]),
                code=str(r["code"]),
                description=r.get("description"),
                is_active=bool(r.get("is_active", 1)),
            )
