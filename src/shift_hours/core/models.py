"""Domain models for shift-hours."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any
import uuid

from .clock import format_clock_time, is_unset, parse_clock_time
from .time_segments import Interval

DATE_FORMAT = "%Y-%m-%d"


def _default_id() -> str:
    return uuid.uuid4().hex


def normalize_time(value: str | None) -> str | None:
    """Return ``value`` as canonical ``HH:MM``, or ``None`` when unset.

    Malformed values raise ``MalformedTimeError``.
    """
    if is_unset(value):
        return None
    return format_clock_time(parse_clock_time(value))


def interval_from_strings(start: str | None, end: str | None) -> Interval | None:
    """Build an ``Interval`` from two wall-clock strings; ``None`` if either is unset."""
    if is_unset(start) or is_unset(end):
        return None
    return Interval.from_strings(start, end)


@dataclass(frozen=True, slots=True)
class Entry:
    """One logged work span for a user."""

    start: str | None = None
    end: str | None = None
    work_date: date = field(default_factory=date.today)
    note: str = ""
    entry_id: str = field(default_factory=_default_id)

    @property
    def has_times(self) -> bool:
        return not (is_unset(self.start) or is_unset(self.end))

    def as_interval(self) -> Interval | None:
        return interval_from_strings(self.start, self.end)

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "start": self.start,
            "end": self.end,
            "date": self.work_date.strftime(DATE_FORMAT),
            "note": self.note,
        }

    @classmethod
    def from_json_dict(cls, payload: dict[str, Any]) -> "Entry":
        return cls(
            start=normalize_time(payload.get("start")),
            end=normalize_time(payload.get("end")),
            work_date=_parse_date(payload.get("date")),
            note=str(payload.get("note") or ""),
            entry_id=str(payload.get("entry_id") or _default_id()),
        )


@dataclass(frozen=True, slots=True)
class UserProfile:
    """A tracked person and their registered shift."""

    name: str
    work_start: str | None = None
    work_end: str | None = None
    user_id: str = field(default_factory=_default_id)

    def shift_window(self) -> Interval | None:
        return interval_from_strings(self.work_start, self.work_end)

    @property
    def shift_label(self) -> str:
        window = self.shift_window()
        return window.label if window is not None else ""

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "work_start": self.work_start,
            "work_end": self.work_end,
        }

    @classmethod
    def from_json_dict(cls, payload: dict[str, Any]) -> "UserProfile":
        name = str(payload.get("name") or "").strip()
        if not name:
            raise ValueError("User profile requires a name")
        return cls(
            name=name,
            work_start=normalize_time(payload.get("work_start")),
            work_end=normalize_time(payload.get("work_end")),
            user_id=str(payload.get("user_id") or _default_id()),
        )


def _parse_date(value: str | date | None) -> date:
    if isinstance(value, date):
        return value
    if not value:
        return date.today()
    # Legacy documents stored full ISO timestamps.
    return date.fromisoformat(str(value)[:10])
