from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from shift_hours.core.exceptions import MalformedTimeError
from shift_hours.core.models import Entry, UserProfile, interval_from_strings, normalize_time
from shift_hours.core.time_segments import Interval


def test_normalize_time():
    assert normalize_time("9:05") == "09:05"
    assert normalize_time(" 17:30 ") == "17:30"
    assert normalize_time("") is None
    assert normalize_time(None) is None
    with pytest.raises(MalformedTimeError):
        normalize_time("25:00")


def test_interval_from_strings():
    assert interval_from_strings("09:00", "17:00") == Interval(540, 1020)
    assert interval_from_strings("09:00", "") is None
    assert interval_from_strings(None, "17:00") is None


def test_entry_json_round_trip():
    entry = Entry(start="22:00", end="06:00", work_date=date(2024, 3, 1), note="inventory")
    restored = Entry.from_json_dict(entry.to_json_dict())
    assert restored == entry
    assert restored.as_interval() == Interval(1320, 360)


def test_entry_without_times():
    entry = Entry.from_json_dict({"date": "2024-03-01"})
    assert entry.start is None and entry.end is None
    assert not entry.has_times
    assert entry.as_interval() is None
    assert entry.entry_id


def test_entry_accepts_legacy_timestamp_dates():
    entry = Entry.from_json_dict({"start": "08:00", "end": "12:00", "date": "2024-03-01T10:22:00.000Z"})
    assert entry.work_date == date(2024, 3, 1)


def test_entry_rejects_malformed_times():
    with pytest.raises(MalformedTimeError):
        Entry.from_json_dict({"start": "8am", "end": "12:00"})


def test_profile_shift_window():
    profile = UserProfile(name="Ana", work_start="22:00", work_end="06:00")
    assert profile.shift_window() == Interval(1320, 360)
    assert profile.shift_label == "22:00 - 06:00"
    assert UserProfile(name="Bruno", work_start="09:00").shift_window() is None
    assert UserProfile(name="Bruno").shift_label == ""


def test_profile_round_trip_and_validation():
    profile = UserProfile(name="Ana", work_start="09:00", work_end="17:00")
    assert UserProfile.from_json_dict(profile.to_json_dict()) == profile
    with pytest.raises(ValueError):
        UserProfile.from_json_dict({"name": "  "})


def test_models_are_immutable():
    profile = UserProfile(name="Ana")
    with pytest.raises(FrozenInstanceError):
        profile.name = "Other"  # type: ignore[misc]
