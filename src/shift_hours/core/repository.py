"""Persistence layer for user profiles and their time entries."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

import portalocker

from .exceptions import BackupError, PersistenceError, StoreFormatError
from .models import Entry, UserProfile
from .paths import backups_dir, store_path

DOCUMENT_VERSION = 2
LEGACY_USER_NAME = "Default"

LOGGER = logging.getLogger("shift_hours.repository")


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    """Immutable view of every profile and entry at one point in time."""

    users: tuple[UserProfile, ...] = ()
    entries: Mapping[str, tuple[Entry, ...]] = field(default_factory=dict)
    selected_user_id: str | None = None

    def user(self, user_id: str) -> UserProfile | None:
        for profile in self.users:
            if profile.user_id == user_id:
                return profile
        return None

    def entries_for(self, user_id: str) -> tuple[Entry, ...]:
        return self.entries.get(user_id, ())


def dump_document(snapshot: StoreSnapshot) -> dict[str, Any]:
    return {
        "version": DOCUMENT_VERSION,
        "users": [profile.to_json_dict() for profile in snapshot.users],
        "entries": {
            profile.user_id: [entry.to_json_dict() for entry in snapshot.entries_for(profile.user_id)]
            for profile in snapshot.users
        },
        "selected_user_id": snapshot.selected_user_id,
    }


def load_document(payload: Any) -> StoreSnapshot:
    """Turn a decoded JSON document into a snapshot.

    Accepts the current per-user document and the legacy flat entry list
    (either a bare list or a version-less object whose ``entries`` is a list).
    """
    if isinstance(payload, list):
        return _migrate_legacy(payload)
    if not isinstance(payload, dict):
        raise StoreFormatError(f"Unsupported document type: {type(payload).__name__}")

    version = payload.get("version")
    if version is None and isinstance(payload.get("entries"), list):
        return _migrate_legacy(payload["entries"])
    if version != DOCUMENT_VERSION:
        raise StoreFormatError(f"Unsupported document version: {version!r}")

    raw_users = payload.get("users") or []
    if not isinstance(raw_users, list):
        raise StoreFormatError("Users must be a list")
    users: list[UserProfile] = []
    for index, raw in enumerate(raw_users):
        try:
            users.append(UserProfile.from_json_dict(raw))
        except (TypeError, ValueError, AttributeError):
            LOGGER.exception(
                "Skipping malformed user profile",
                extra={"event": "store_skip_invalid_user", "index": index},
            )

    raw_entries = payload.get("entries") or {}
    if not isinstance(raw_entries, dict):
        raise StoreFormatError("Entries must be keyed by user id")
    known_ids = {profile.user_id for profile in users}
    entries: dict[str, tuple[Entry, ...]] = {}
    for user_id, items in raw_entries.items():
        if user_id not in known_ids:
            LOGGER.warning(
                "Dropping entries for unknown user",
                extra={"event": "store_orphan_entries", "user_id": user_id},
            )
            continue
        if not isinstance(items, list):
            LOGGER.warning(
                "Dropping non-list entries for user",
                extra={"event": "store_skip_invalid_entries", "user_id": user_id},
            )
            continue
        entries[user_id] = _deserialize_entries(items)
    for user_id in known_ids:
        entries.setdefault(user_id, ())

    selected = payload.get("selected_user_id")
    if selected not in known_ids:
        selected = None
    return StoreSnapshot(users=tuple(users), entries=entries, selected_user_id=selected)


def _migrate_legacy(items: list[Any]) -> StoreSnapshot:
    profile = UserProfile(name=LEGACY_USER_NAME)
    entries = _deserialize_entries([_legacy_entry_payload(item) for item in items])
    LOGGER.info(
        "Migrated legacy entry list",
        extra={"event": "store_legacy_migrated", "count": len(entries), "user_id": profile.user_id},
    )
    return StoreSnapshot(
        users=(profile,),
        entries={profile.user_id: entries},
        selected_user_id=profile.user_id,
    )


def _legacy_entry_payload(item: Any) -> Any:
    # Old documents stored a single duration under "time" instead of start/end.
    if not isinstance(item, dict) or "start" in item or "end" in item:
        return item
    converted = dict(item)
    duration_text = str(item.get("time") or "").strip()
    if duration_text and duration_text != "00:00":
        converted["start"] = "00:00"
        converted["end"] = duration_text
    return converted


def _deserialize_entries(items: Any) -> tuple[Entry, ...]:
    entries: list[Entry] = []
    for index, raw in enumerate(items):
        try:
            entries.append(Entry.from_json_dict(raw))
        except (TypeError, ValueError, AttributeError):
            LOGGER.exception(
                "Skipping malformed entry",
                extra={"event": "store_skip_invalid_entry", "index": index},
            )
    return tuple(entries)


class TimesheetRepository:
    """Handles durable persistence of the timesheet document."""

    def __init__(
        self,
        path: Path | None = None,
        logger: logging.Logger | None = None,
        lock_timeout: float = 10.0,
    ) -> None:
        self._path = Path(path) if path is not None else store_path()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock_timeout = lock_timeout
        self._logger = logger or LOGGER

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StoreSnapshot:
        if not self._path.exists():
            self._logger.debug(
                "Store file missing; starting empty",
                extra={"event": "store_load_empty", "path": str(self._path)},
            )
            return StoreSnapshot()

        try:
            with portalocker.Lock(
                self._path,
                mode="r",
                timeout=self._lock_timeout,
                flags=portalocker.LockFlags.SHARED,
                encoding="utf-8",
            ) as locked_file:
                raw = locked_file.read()
        except Exception as exc:
            self._logger.exception("Failed reading store file", extra={"event": "store_read_failed"})
            raise PersistenceError("Unable to read timesheet store") from exc

        if not raw.strip():
            return StoreSnapshot()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            self._logger.exception("Invalid JSON in store file", extra={"event": "store_invalid_json"})
            raise StoreFormatError("Timesheet store is malformed") from exc

        snapshot = load_document(payload)
        self._logger.info(
            "Store loaded",
            extra={
                "event": "store_loaded",
                "users": len(snapshot.users),
                "entries": sum(len(items) for items in snapshot.entries.values()),
            },
        )
        return snapshot

    def save(self, snapshot: StoreSnapshot) -> None:
        temp_path = self._path.with_suffix(".tmp")
        try:
            document = dump_document(snapshot)
            with portalocker.Lock(
                temp_path,
                mode="w",
                timeout=self._lock_timeout,
                flags=portalocker.LockFlags.EXCLUSIVE,
                encoding="utf-8",
            ) as locked_file:
                json.dump(document, locked_file, indent=2)
                locked_file.flush()
                os.fsync(locked_file.fileno())
            temp_path.replace(self._path)
        except Exception as exc:
            self._logger.exception("Failed to save store", extra={"event": "store_save_failed"})
            raise PersistenceError("Unable to persist timesheet store") from exc
        self._logger.debug(
            "Store saved",
            extra={"event": "store_saved", "users": len(snapshot.users), "path": str(self._path)},
        )

    def backup(self) -> Path:
        self._logger.info("Starting backup", extra={"event": "store_backup_start"})
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        target_path = backups_dir() / f"{self._path.stem}-{timestamp}-backup{self._path.suffix or '.json'}"

        try:
            with portalocker.Lock(
                self._path,
                mode="r",
                timeout=self._lock_timeout,
                flags=portalocker.LockFlags.SHARED,
                encoding="utf-8",
            ) as source_file:
                data = source_file.read()
            target_path.write_text(data, encoding="utf-8")
        except Exception as exc:  # pragma: no cover - filesystem dependent
            self._logger.exception("Backup failed", extra={"event": "store_backup_failed"})
            raise BackupError("Failed to create backup") from exc

        self._logger.info(
            "Backup completed",
            extra={"event": "store_backup_success", "path": str(target_path)},
        )
        return target_path
