"""Per-environment settings modules for the punch clock service."""

import os

_ENV_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    # APP_ENV chọn module cấu hình; mọi giá trị khác dùng development
    return _ENV_MODULES.get(os.getenv("APP_ENV", "development").strip().lower(), "config.development")
