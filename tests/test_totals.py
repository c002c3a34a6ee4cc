from __future__ import annotations

import math
from datetime import date

import pytest

from shift_hours.core.exceptions import InvalidPauseError, MalformedTimeError
from shift_hours.core.models import Entry, UserProfile
from shift_hours.core.time_segments import Interval, duration
from shift_hours.core.totals import (
    PauseUnit,
    Totals,
    calculate_worked_time,
    compute_ad_hoc_duration,
    compute_totals,
    extra_minutes_for,
    pause_to_minutes,
    summarize_entries,
)


def iv(start: str, end: str) -> Interval:
    return Interval.from_strings(start, end)


def test_totals_with_shift():
    totals = compute_totals([iv("09:00", "17:00"), iv("18:00", "20:00")], iv("09:00", "17:00"))
    assert totals == Totals(total_minutes=600, extra_minutes=120)
    assert totals.total_label == "10:00"
    assert totals.extra_label == "02:00"


def test_totals_without_shift_have_no_extra():
    totals = compute_totals([iv("09:00", "17:00"), iv("22:00", "06:00")], None)
    assert totals == Totals(total_minutes=960, extra_minutes=0)


def test_unset_entries_are_skipped():
    totals = compute_totals([None, iv("08:00", "09:00"), None], iv("08:00", "09:00"))
    assert totals == Totals(total_minutes=60, extra_minutes=0)


def test_empty_entries():
    assert compute_totals([], iv("09:00", "17:00")) == Totals(0, 0)


def test_night_work_against_night_shift():
    totals = compute_totals([iv("21:00", "01:00")], iv("22:00", "06:00"))
    assert totals == Totals(total_minutes=240, extra_minutes=60)


def test_full_day_entry_extra_is_outside_shift():
    assert extra_minutes_for(iv("09:00", "09:00"), iv("09:00", "17:00")) == 1440 - 480


def test_extra_never_exceeds_duration():
    shifts = [iv("09:00", "17:00"), iv("22:00", "06:00"), iv("00:00", "00:00")]
    entries = [iv("09:00", "17:00"), iv("23:00", "01:00"), iv("16:00", "10:00"), iv("05:00", "05:00")]
    for shift in shifts:
        for entry in entries:
            assert 0 <= extra_minutes_for(entry, shift) <= duration(entry)


def test_totals_are_repeatable():
    entries = (iv("09:00", "17:30"), iv("23:00", "02:00"))
    shift = iv("09:00", "17:00")
    assert compute_totals(entries, shift) == compute_totals(entries, shift)


def test_totals_accept_generators():
    totals = compute_totals((iv("10:00", "11:00") for _ in range(3)), None)
    assert totals.total_minutes == 180


def test_aggregate_total_can_exceed_a_day():
    totals = compute_totals([iv("08:00", "20:00"), iv("08:00", "21:00")], None)
    assert totals.total_label == "25:00"


def test_ad_hoc_duration():
    assert compute_ad_hoc_duration(540, 1050, 60) == 450
    assert compute_ad_hoc_duration(540, 600, 120) == 0
    assert compute_ad_hoc_duration(1380, 60, 30) == 90


def test_calculate_worked_time():
    assert calculate_worked_time("09:00", "17:30", 60) == "07:30"
    assert calculate_worked_time("09:00", "17:30", "1", PauseUnit.HOURS) == "07:30"
    assert calculate_worked_time("22:00", "06:00", "") == "08:00"


def test_calculate_worked_time_unset_returns_zero():
    assert calculate_worked_time("", "17:00", 30) == "00:00"
    assert calculate_worked_time("09:00", None) == "00:00"


def test_calculate_worked_time_rejects_bad_input():
    with pytest.raises(MalformedTimeError):
        calculate_worked_time("9h", "17:00")
    with pytest.raises(InvalidPauseError):
        calculate_worked_time("09:00", "17:00", "-10")


@pytest.mark.parametrize(
    "raw,unit,expected",
    [
        (None, PauseUnit.MINUTES, 0),
        ("", PauseUnit.MINUTES, 0),
        ("45", PauseUnit.MINUTES, 45),
        (30, PauseUnit.MINUTES, 30),
        ("1.5", PauseUnit.HOURS, 90),
        ("0,5", PauseUnit.HOURS, 30),
        (2, "hours", 120),
    ],
)
def test_pause_to_minutes(raw, unit, expected):
    assert pause_to_minutes(raw, unit) == expected


@pytest.mark.parametrize("raw", ["abc", "-1", -5, math.inf, math.nan, "inf", True, [30]])
def test_invalid_pause(raw):
    with pytest.raises(InvalidPauseError) as info:
        pause_to_minutes(raw)
    assert info.value.kind == "InvalidPause"


def test_summarize_entries_uses_profile_shift():
    profile = UserProfile(name="Ana", work_start="09:00", work_end="17:00")
    entries = [
        Entry(start="09:00", end="17:00", work_date=date(2024, 5, 6)),
        Entry(start="18:00", end="20:00", work_date=date(2024, 5, 6)),
        Entry(start=None, end="12:00", work_date=date(2024, 5, 7)),
    ]
    assert summarize_entries(entries, profile) == Totals(600, 120)


def test_summarize_entries_without_shift():
    profile = UserProfile(name="Bruno")
    entries = [Entry(start="09:00", end="17:00")]
    assert summarize_entries(entries, profile) == Totals(480, 0)
    assert summarize_entries(entries) == Totals(480, 0)


def test_oversized_pause_is_invalid():
    with pytest.raises(InvalidPauseError):
        pause_to_minutes(10**400)
    with pytest.raises(InvalidPauseError):
        pause_to_minutes(1e308, PauseUnit.HOURS)
