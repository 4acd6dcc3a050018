from __future__ import annotations

from dataclasses import dataclass
from datetime import timezone, tzinfo

from .costcodes.mysql_cost_code_repository import MySQLCostCodeRepository
from .costcodes.service import CostCodeBackfillService
from .database.connection import DBConfig, DatabaseConnection
from .geofence.mysql_geofence_repository import MySQLGeofenceRepository
from .hours.calculator.standard_calculator import StandardHoursCalculator
from .jobs.mysql_job_repository import MySQLJobRepository
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.service import PunchService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .timecards.mysql_timecard_repository import MySQLTimeCardRepository
from .timecards.service import TimeCardRecalculationService


@dataclass(frozen=True)
class Container:
    recalculation_service: TimeCardRecalculationService
    punch_service: PunchService
    backfill_service: CostCodeBackfillService


def build_container(*, db_config: dict, zone: tzinfo = timezone.utc) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    timecards_repo = MySQLTimeCardRepository(conn)
    jobs_repo = MySQLJobRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    punches_repo = MySQLPunchRepository(conn)
    cost_codes_repo = MySQLCostCodeRepository(conn)
    geofence_repo = MySQLGeofenceRepository(conn)

    calculator = StandardHoursCalculator()

    recalculation_service = TimeCardRecalculationService(
        timecards_repo,
        jobs_repo,
        settings_repo,
        calculator=calculator,
        zone=zone,
    )
    punch_service = PunchService(
        timecards_repo,
        punches_repo,
        jobs_repo,
        settings_repo,
        cost_codes_repo,
        geofence_repo,
        calculator=calculator,
        zone=zone,
    )
    backfill_service = CostCodeBackfillService(timecards_repo, punches_repo)

    return Container(
        recalculation_service=recalculation_service,
        punch_service=punch_service,
        backfill_service=backfill_service,
    )
