from __future__ import annotations

import importlib
import logging
import logging.config
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from config import get_settings_module

from .cli import register as register_cli
from .common.datetime_utils import resolve_zone
from .container import Container, build_container
from .costcodes.controller import register as register_costcodes
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .punches.controller import register as register_punches
from .timecards.controller import register as register_timecards

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.config.dictConfig(getattr(settings, "LOGGING"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SHIFT_TIMEZONE"] = getattr(settings, "SHIFT_TIMEZONE", "UTC")
    db_config = getattr(settings, "DB_CONFIG")

    CORS(app, resources={r"/*": {"origins": getattr(settings, "CORS_ORIGINS", "*")}})

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(db_config=db_config, zone=resolve_zone(app.config["SHIFT_TIMEZONE"]))

    register_timecards(app, container)
    register_punches(app, container)
    register_costcodes(app, container)
    register_cli(app, container)

    return app
