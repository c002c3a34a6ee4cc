"""Conversions between ``HH:MM`` wall-clock strings and minutes since midnight."""

from __future__ import annotations

from .exceptions import MalformedTimeError

MINUTES_PER_DAY = 24 * 60


def is_unset(value: str | None) -> bool:
    """Return True when ``value`` means "no time set" (``None`` or blank)."""
    return value is None or not str(value).strip()


def parse_clock_time(value: str) -> int:
    """Parse ``HH:MM`` (or ``H:MM``) into minutes since midnight.

    Raises ``MalformedTimeError`` for anything that is not two numeric parts
    separated by a single colon, or whose hour/minute fall outside the clock.
    """
    if not isinstance(value, str):
        raise MalformedTimeError(f"Time must be a string, got {type(value).__name__}", value)
    parts = value.strip().split(":")
    if len(parts) != 2:
        raise MalformedTimeError(f"Time must look like HH:MM: {value!r}", value)
    hour_text, minute_text = parts
    if not all(part.isascii() and part.isdigit() for part in parts):
        raise MalformedTimeError(f"Time components must be numeric: {value!r}", value)
    if len(hour_text) > 2 or len(minute_text) != 2:
        raise MalformedTimeError(f"Time must look like HH:MM: {value!r}", value)
    hours, minutes = int(hour_text), int(minute_text)
    if hours > 23 or minutes > 59:
        raise MalformedTimeError(f"Time out of range: {value!r}", value)
    return hours * 60 + minutes


def format_clock_time(minutes: int) -> str:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Clock time must be within one day, got {minutes}")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def minutes_to_duration_string(total_minutes: int) -> str:
    """Format a duration as ``HH:MM``; hours are not wrapped at 24."""
    if total_minutes < 0:
        raise ValueError(f"Duration must be non-negative, got {total_minutes}")
    hours, mins = divmod(total_minutes, 60)
    return f"{hours:02d}:{mins:02d}"
