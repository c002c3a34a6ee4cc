from __future__ import annotations

import pytest

from shift_hours.core.clock import (
    MINUTES_PER_DAY,
    format_clock_time,
    is_unset,
    minutes_to_duration_string,
    parse_clock_time,
)
from shift_hours.core.exceptions import MalformedTimeError, ValidationError


@pytest.mark.parametrize("text", ["00:00", "09:05", "12:30", "23:59"])
def test_round_trip(text):
    assert format_clock_time(parse_clock_time(text)) == text


def test_every_minute_round_trips():
    for minute in range(MINUTES_PER_DAY):
        text = format_clock_time(minute)
        assert len(text) == 5
        assert parse_clock_time(text) == minute


def test_single_digit_hour_is_accepted():
    assert parse_clock_time("9:15") == 555


@pytest.mark.parametrize(
    "text",
    ["", "0900", "9:5", "24:00", "12:60", "ab:cd", "12:30:00", "-1:30", "12:3x", " : "],
)
def test_malformed_times_are_rejected(text):
    with pytest.raises(MalformedTimeError) as info:
        parse_clock_time(text)
    assert info.value.kind == "MalformedTime"
    assert info.value.value == text


def test_malformed_time_is_a_validation_error():
    with pytest.raises(ValidationError):
        parse_clock_time("99:99")


def test_non_string_is_rejected():
    with pytest.raises(MalformedTimeError):
        parse_clock_time(900)  # type: ignore[arg-type]


def test_format_rejects_out_of_day_values():
    with pytest.raises(ValueError):
        format_clock_time(MINUTES_PER_DAY)
    with pytest.raises(ValueError):
        format_clock_time(-1)


def test_duration_string_hours_are_unbounded():
    assert minutes_to_duration_string(0) == "00:00"
    assert minutes_to_duration_string(450) == "07:30"
    assert minutes_to_duration_string(1500) == "25:00"
    assert minutes_to_duration_string(6001) == "100:01"


def test_duration_string_rejects_negative():
    with pytest.raises(ValueError):
        minutes_to_duration_string(-5)


def test_is_unset():
    assert is_unset(None)
    assert is_unset("")
    assert is_unset("   ")
    assert not is_unset("08:00")
