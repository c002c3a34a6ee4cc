"""Interval arithmetic on the circular 24-hour clock."""

from __future__ import annotations

from dataclasses import dataclass

from .clock import MINUTES_PER_DAY, format_clock_time, parse_clock_time


@dataclass(frozen=True, slots=True)
class LinearRange:
    """Half-open range ``[start, end)`` of minutes within a single day."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end <= MINUTES_PER_DAY:
            raise ValueError(f"Invalid linear range [{self.start}, {self.end})")

    @property
    def minutes(self) -> int:
        return self.end - self.start

    def intersection_minutes(self, other: "LinearRange") -> int:
        return max(0, min(self.end, other.end) - max(self.start, other.start))


@dataclass(frozen=True, slots=True)
class Interval:
    """A worked span between two clock times.

    An end earlier than the start crosses midnight. Equal start and end cover
    the whole day (1440 minutes), never zero.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        for value in (self.start, self.end):
            if not 0 <= value < MINUTES_PER_DAY:
                raise ValueError(f"Clock minute out of range: {value}")

    @classmethod
    def from_strings(cls, start: str, end: str) -> "Interval":
        return cls(start=parse_clock_time(start), end=parse_clock_time(end))

    @property
    def wraps_midnight(self) -> bool:
        return self.end <= self.start

    @property
    def minutes(self) -> int:
        return duration(self)

    @property
    def label(self) -> str:
        return f"{format_clock_time(self.start)} - {format_clock_time(self.end)}"


def duration(interval: Interval) -> int:
    if interval.end > interval.start:
        return interval.end - interval.start
    return (MINUTES_PER_DAY - interval.start) + interval.end


def split_at_midnight(interval: Interval) -> list[LinearRange]:
    """Break ``interval`` into linear ranges that together cover its duration.

    Equal start and end split into the whole day, never a single empty range.
    """
    if interval.start < interval.end:
        return [LinearRange(interval.start, interval.end)]
    ranges = [LinearRange(interval.start, MINUTES_PER_DAY)]
    if interval.end > 0:
        ranges.append(LinearRange(0, interval.end))
    return ranges


def overlap_minutes(a: Interval, b: Interval) -> int:
    total = 0
    for left in split_at_midnight(a):
        for right in split_at_midnight(b):
            total += left.intersection_minutes(right)
    return total
