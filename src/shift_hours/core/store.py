"""In-memory timesheet state shared with the presentation layer."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from types import MappingProxyType
from typing import Any

from .exceptions import UnknownEntryError, UnknownUserError, ValidationError
from .models import Entry, UserProfile, normalize_time
from .repository import StoreSnapshot, TimesheetRepository
from .totals import Totals, summarize_entries

_USER_FIELDS = {"name", "work_start", "work_end"}
_ENTRY_FIELDS = {"start", "end", "work_date", "note"}


class TimesheetStore:
    """Owns user profiles, their entries and the current selection.

    Calculations never read this object directly; they receive immutable
    snapshots or tuples of entries.
    """

    def __init__(
        self,
        repository: TimesheetRepository | None = None,
        *,
        autosave: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self._repository = repository
        self._autosave = autosave
        self._logger = logger or logging.getLogger("shift_hours.store")
        snapshot = repository.load() if repository is not None else StoreSnapshot()
        self._users: list[UserProfile] = list(snapshot.users)
        self._entries: dict[str, list[Entry]] = {
            profile.user_id: list(snapshot.entries_for(profile.user_id)) for profile in self._users
        }
        self._selected_user_id = snapshot.selected_user_id

    # ------------------------------------------------------------------
    # Users
    @property
    def users(self) -> tuple[UserProfile, ...]:
        return tuple(self._users)

    @property
    def selected_user(self) -> UserProfile | None:
        if self._selected_user_id is None:
            return None
        return self.get_user(self._selected_user_id)

    def get_user(self, user_id: str) -> UserProfile:
        for profile in self._users:
            if profile.user_id == user_id:
                return profile
        raise UnknownUserError(user_id)

    def add_user(self, name: str, work_start: str | None = None, work_end: str | None = None) -> UserProfile:
        profile = UserProfile(
            name=_require_name(name),
            work_start=normalize_time(work_start),
            work_end=normalize_time(work_end),
        )
        self._users.append(profile)
        self._entries[profile.user_id] = []
        if self._selected_user_id is None:
            self._selected_user_id = profile.user_id
        self._logger.info(
            "User added",
            extra={"event": "store_user_added", "user_id": profile.user_id, "shift": profile.shift_label},
        )
        self._persist()
        return profile

    def update_user(self, user_id: str, **changes: Any) -> UserProfile:
        unknown = set(changes) - _USER_FIELDS
        if unknown:
            raise TypeError(f"Unsupported user fields: {', '.join(sorted(unknown))}")
        current = self.get_user(user_id)
        if "name" in changes:
            changes["name"] = _require_name(changes["name"])
        for key in ("work_start", "work_end"):
            if key in changes:
                changes[key] = normalize_time(changes[key])
        updated = replace(current, **changes)
        self._users[self._users.index(current)] = updated
        self._logger.info("User updated", extra={"event": "store_user_updated", "user_id": user_id})
        self._persist()
        return updated

    def remove_user(self, user_id: str) -> UserProfile:
        profile = self.get_user(user_id)
        self._users.remove(profile)
        removed_entries = self._entries.pop(user_id, [])
        if self._selected_user_id == user_id:
            self._selected_user_id = self._users[0].user_id if self._users else None
        self._logger.info(
            "User removed",
            extra={"event": "store_user_removed", "user_id": user_id, "entries": len(removed_entries)},
        )
        self._persist()
        return profile

    def select_user(self, user_id: str | None) -> None:
        if user_id is not None:
            self.get_user(user_id)
        self._selected_user_id = user_id
        self._persist()

    # ------------------------------------------------------------------
    # Entries
    def entries_for(self, user_id: str | None = None) -> tuple[Entry, ...]:
        return tuple(self._entries[self._resolve_user_id(user_id)])

    def add_entry(
        self,
        user_id: str | None = None,
        start: str | None = None,
        end: str | None = None,
        work_date: date | str | None = None,
        note: str = "",
    ) -> Entry:
        target = self._resolve_user_id(user_id)
        entry = Entry(
            start=normalize_time(start),
            end=normalize_time(end),
            work_date=_coerce_work_date(work_date),
            note=note or "",
        )
        self._entries[target].append(entry)
        self._logger.info(
            "Adding entry",
            extra={
                "event": "store_entry_added",
                "user_id": target,
                "entry_id": entry.entry_id,
                "start": entry.start,
                "end": entry.end,
            },
        )
        self._persist()
        return entry

    def update_entry(self, entry_id: str, **changes: Any) -> Entry:
        unknown = set(changes) - _ENTRY_FIELDS
        if unknown:
            raise TypeError(f"Unsupported entry fields: {', '.join(sorted(unknown))}")
        user_id, index = self._locate_entry(entry_id)
        for key in ("start", "end"):
            if key in changes:
                changes[key] = normalize_time(changes[key])
        if "work_date" in changes:
            changes["work_date"] = _coerce_work_date(changes["work_date"])
        if "note" in changes:
            changes["note"] = changes["note"] or ""
        updated = replace(self._entries[user_id][index], **changes)
        self._entries[user_id][index] = updated
        self._logger.debug("Entry updated", extra={"event": "store_entry_updated", "entry_id": entry_id})
        self._persist()
        return updated

    def remove_entry(self, entry_id: str) -> Entry:
        user_id, index = self._locate_entry(entry_id)
        removed = self._entries[user_id].pop(index)
        self._logger.info("Entry removed", extra={"event": "store_entry_removed", "entry_id": entry_id})
        self._persist()
        return removed

    def clear_entries(self, user_id: str | None = None) -> int:
        target = self._resolve_user_id(user_id)
        count = len(self._entries[target])
        self._entries[target] = []
        self._logger.info(
            "Entries cleared",
            extra={"event": "store_entries_cleared", "user_id": target, "count": count},
        )
        self._persist()
        return count

    # ------------------------------------------------------------------
    # Views
    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            users=tuple(self._users),
            entries=MappingProxyType({user_id: tuple(items) for user_id, items in self._entries.items()}),
            selected_user_id=self._selected_user_id,
        )

    def totals_for(self, user_id: str | None = None) -> Totals:
        target = self._resolve_user_id(user_id)
        return summarize_entries(tuple(self._entries[target]), self.get_user(target))

    def save(self) -> None:
        if self._repository is None:
            return
        self._repository.save(self.snapshot())

    # ------------------------------------------------------------------
    # Internal helpers
    def _persist(self) -> None:
        if self._autosave:
            self.save()

    def _resolve_user_id(self, user_id: str | None) -> str:
        target = user_id if user_id is not None else self._selected_user_id
        if target is None:
            raise UnknownUserError("No user selected")
        self.get_user(target)
        return target

    def _locate_entry(self, entry_id: str) -> tuple[str, int]:
        for user_id, items in self._entries.items():
            for index, entry in enumerate(items):
                if entry.entry_id == entry_id:
                    return user_id, index
        raise UnknownEntryError(entry_id)


def _require_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("User name must be non-empty", name)
    return cleaned


def _coerce_work_date(value: date | str | None) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValidationError(f"Work date must be YYYY-MM-DD: {value!r}", value) from exc
    raise ValidationError(f"Work date must be a date, got {type(value).__name__}", value)
