"""Settings management for shift-hours."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from .exceptions import SettingsError
from .paths import ensure_app_structure, settings_path
from .totals import PauseUnit


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


DEFAULT_EXPORT_DATE_FORMAT = "%d/%m/%Y"
_SUPPORTED_THEMES = {member.value for member in Theme}
_SUPPORTED_PAUSE_UNITS = {member.value for member in PauseUnit}


@dataclass(slots=True)
class Settings:
    theme: Theme = Theme.LIGHT
    default_pause_unit: PauseUnit = PauseUnit.MINUTES
    export_date_format: str = DEFAULT_EXPORT_DATE_FORMAT

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["theme"] = self.theme.value
        payload["default_pause_unit"] = self.default_pause_unit.value
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Settings":
        if not isinstance(payload, dict):
            raise SettingsError("Settings payload must be a JSON object")
        theme_value = str(payload.get("theme", Theme.LIGHT.value)).lower()
        if theme_value not in _SUPPORTED_THEMES:
            raise SettingsError(f"Unsupported theme: {theme_value}")
        unit_value = str(payload.get("default_pause_unit", PauseUnit.MINUTES.value)).lower()
        if unit_value not in _SUPPORTED_PAUSE_UNITS:
            raise SettingsError(f"Unsupported pause unit: {unit_value}")
        date_format = str(payload.get("export_date_format") or DEFAULT_EXPORT_DATE_FORMAT)
        _validate_date_format(date_format)
        return cls(
            theme=Theme(theme_value),
            default_pause_unit=PauseUnit(unit_value),
            export_date_format=date_format,
        )


class SettingsManager:
    def __init__(self, path: Path | None = None, logger: logging.Logger | None = None) -> None:
        if path is None:
            ensure_app_structure()
        self._path = Path(path) if path is not None else settings_path()
        self._logger = logger or logging.getLogger("shift_hours.settings")

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Settings:
        if not self._path.exists():
            self._logger.info(
                "Settings file missing; using defaults",
                extra={"event": "settings_load_default", "path": str(self._path)},
            )
            return Settings()

        try:
            with self._path.open("r", encoding="utf-8") as infile:
                payload = json.load(infile)
        except json.JSONDecodeError as exc:
            self._logger.exception(
                "Invalid JSON in settings file",
                extra={"event": "settings_load_invalid_json"},
            )
            raise SettingsError("Settings file is malformed") from exc
        except OSError as exc:
            self._logger.exception("Unexpected error loading settings")
            raise SettingsError("Unable to load settings") from exc

        settings = Settings.from_dict(payload)
        self._logger.info(
            "Settings loaded successfully",
            extra={"event": "settings_loaded", **settings.to_dict()},
        )
        return settings

    def save(self, settings: Settings) -> None:
        if not isinstance(settings.theme, Theme):
            raise SettingsError(f"Unsupported theme: {settings.theme}")
        if not isinstance(settings.default_pause_unit, PauseUnit):
            raise SettingsError(f"Unsupported pause unit: {settings.default_pause_unit}")
        _validate_date_format(settings.export_date_format)
        self._logger.info("Saving settings", extra={"event": "settings_save", **settings.to_dict()})

        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as outfile:
                json.dump(settings.to_dict(), outfile, indent=2)
                outfile.flush()
                os.fsync(outfile.fileno())
            temp_path.replace(self._path)
        except OSError as exc:
            self._logger.exception("Failed to save settings")
            raise SettingsError("Unable to save settings") from exc

    def update(self, transform: Callable[[Settings], Settings]) -> Settings:
        current = self.load()
        updated = transform(current)
        self.save(updated)
        return updated


def _validate_date_format(pattern: str) -> None:
    if "%" not in pattern:
        raise SettingsError(f"Date format has no directives: {pattern!r}")
    try:
        date(2000, 1, 31).strftime(pattern)
    except ValueError as exc:
        raise SettingsError(f"Invalid date format: {pattern!r}") from exc
