"""Worked-time totals and overtime ("extra") accounting."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .clock import is_unset, minutes_to_duration_string
from .exceptions import InvalidPauseError
from .models import Entry, UserProfile, interval_from_strings
from .time_segments import Interval, duration, overlap_minutes

LOGGER = logging.getLogger("shift_hours.totals")


class PauseUnit(str, Enum):
    MINUTES = "minutes"
    HOURS = "hours"


@dataclass(frozen=True, slots=True)
class Totals:
    total_minutes: int = 0
    extra_minutes: int = 0

    @property
    def total_label(self) -> str:
        return minutes_to_duration_string(self.total_minutes)

    @property
    def extra_label(self) -> str:
        return minutes_to_duration_string(self.extra_minutes)


def extra_minutes_for(interval: Interval, shift: Interval) -> int:
    """Minutes of ``interval`` that fall outside ``shift``."""
    return max(duration(interval) - overlap_minutes(interval, shift), 0)


def compute_totals(entries: Iterable[Interval | None], shift: Interval | None) -> Totals:
    """Sum worked minutes and, when a shift is given, the minutes outside it.

    ``None`` items stand for entries with an unset start or end and are skipped.
    """
    total = 0
    extra = 0
    for interval in entries:
        if interval is None:
            continue
        total += duration(interval)
        if shift is not None:
            extra += extra_minutes_for(interval, shift)
    return Totals(total_minutes=total, extra_minutes=extra)


def compute_ad_hoc_duration(start: int, end: int, pause_minutes: int) -> int:
    return max(duration(Interval(start, end)) - pause_minutes, 0)


def pause_to_minutes(raw: int | float | str | None, unit: PauseUnit = PauseUnit.MINUTES) -> int:
    """Validate a pause amount and convert it to whole minutes.

    Blank input means no pause. Non-numeric, non-finite and negative values
    raise ``InvalidPauseError``.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return 0
    if isinstance(raw, bool):
        raise InvalidPauseError(f"Pause must be a number: {raw!r}", raw)
    try:
        amount = float(raw.strip().replace(",", ".")) if isinstance(raw, str) else float(raw)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidPauseError(f"Pause must be a number: {raw!r}", raw) from exc
    if not math.isfinite(amount):
        raise InvalidPauseError(f"Pause must be finite: {raw!r}", raw)
    if amount < 0:
        raise InvalidPauseError(f"Pause cannot be negative: {raw!r}", raw)
    if PauseUnit(unit) is PauseUnit.HOURS:
        amount *= 60
        if not math.isfinite(amount):
            raise InvalidPauseError(f"Pause is too large: {raw!r}", raw)
    return int(amount)


def summarize_entries(entries: Iterable[Entry], profile: UserProfile | None = None) -> Totals:
    """Compute totals for stored entries against the profile's shift window."""
    shift = profile.shift_window() if profile is not None else None
    totals = compute_totals((entry.as_interval() for entry in entries), shift)
    LOGGER.debug(
        "Totals computed",
        extra={
            "event": "totals_computed",
            "user_id": profile.user_id if profile is not None else None,
            "total_minutes": totals.total_minutes,
            "extra_minutes": totals.extra_minutes,
        },
    )
    return totals


def calculate_worked_time(
    start: str | None,
    end: str | None,
    pause: int | float | str | None = None,
    unit: PauseUnit = PauseUnit.MINUTES,
) -> str:
    """Ad-hoc calculator: worked ``HH:MM`` between two times minus a pause."""
    if is_unset(start) or is_unset(end):
        return minutes_to_duration_string(0)
    interval = interval_from_strings(start, end)
    pause_minutes = pause_to_minutes(pause, unit)
    worked = compute_ad_hoc_duration(interval.start, interval.end, pause_minutes)
    return minutes_to_duration_string(worked)
