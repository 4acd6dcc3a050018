import os

from .config import build_logging, db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_password="12345")

DEBUG = False
TESTING = True

SHIFT_TIMEZONE = "UTC"

CORS_ORIGINS = "*"

LOG_LEVEL = "WARNING"
LOGGING = build_logging(LOG_LEVEL)

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
