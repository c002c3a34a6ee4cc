"""Filesystem path utilities for shift-hours."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

APP_NAME = "shift-hours"
HOME_ENV_VAR = "SHIFT_HOURS_HOME"
STORE_FILENAME = "timesheet.json"
SETTINGS_FILENAME = "settings.json"
LOG_FILENAME = "shift-hours.log"
BACKUPS_DIRNAME = "backups"
EXPORTS_DIRNAME = "exports"

_DATA_DIR_OVERRIDE: Path | None = None


def default_app_data_dir() -> Path:
    env = os.environ.get(HOME_ENV_VAR)
    if env:
        return Path(env).expanduser()
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata) / APP_NAME
    return Path.home() / f".{APP_NAME}"


def set_app_data_directory(path: Path | str | None) -> Path:
    global _DATA_DIR_OVERRIDE
    _DATA_DIR_OVERRIDE = Path(path).expanduser() if path else None
    app_data_dir.cache_clear()
    return app_data_dir()


def reset_app_data_directory() -> Path:
    return set_app_data_directory(None)


@lru_cache(maxsize=1)
def app_data_dir() -> Path:
    """Return the base application data directory, ensuring it exists."""
    base = _DATA_DIR_OVERRIDE or default_app_data_dir()
    base.mkdir(parents=True, exist_ok=True)
    return base


def store_path() -> Path:
    return app_data_dir() / STORE_FILENAME


def settings_path() -> Path:
    return app_data_dir() / SETTINGS_FILENAME


def log_path() -> Path:
    return app_data_dir() / LOG_FILENAME


def backups_dir() -> Path:
    path = app_data_dir() / BACKUPS_DIRNAME
    path.mkdir(parents=True, exist_ok=True)
    return path


def exports_dir() -> Path:
    path = app_data_dir() / EXPORTS_DIRNAME
    path.mkdir(parents=True, exist_ok=True)
    return path


def ensure_app_structure() -> None:
    """Proactively create the directory structure the app relies on."""
    app_data_dir()
    backups_dir()
