"""Tests for converting between displayed and stored stop times."""

import pytest

from schedule_wrangler.utils.time import (
    add_minutes,
    is_non_decreasing,
    normalize_time_str,
    time_str_to_seconds,
    to_display,
    to_stored,
)

to_display_cases = [
    # Test case format: (stored, expected_display)
    ("08:05:00", "08:05"),
    ("8:05:00", "08:05"),
    ("25:10:00", "25:10"),
    ("08:05", "08:05"),
    ("", ""),
    (None, ""),
    ("soon", "soon"),
]


@pytest.mark.parametrize("case", to_display_cases)
def test_to_display(case):
    stored, expected = case
    assert to_display(stored) == expected


to_stored_cases = [
    # Test case format: (display, expected_stored)
    ("9:05", "09:05:00"),
    ("09:05", "09:05:00"),
    (" 9:05 ", "09:05:00"),
    ("25:10", "25:10:00"),
    ("08:05:30", "08:05:30"),
    ("", ""),
    ("   ", ""),
    (None, ""),
    ("9h05", "9h05"),
]


@pytest.mark.parametrize("case", to_stored_cases)
def test_to_stored(case):
    display, expected = case
    assert to_stored(display) == expected


def test_display_stored_display_is_stable():
    for stored in ["08:05:00", "23:59:00", "26:00:00"]:
        assert to_display(to_stored(to_display(stored))) == to_display(stored)


time_str_to_seconds_cases = [
    ("00:00:00", 0),
    ("1:02:03", 3723),
    ("25:00:00", 90000),
    ("08:30", 30600),
    ("", None),
    ("8.30", None),
]


@pytest.mark.parametrize("case", time_str_to_seconds_cases)
def test_time_str_to_seconds(case):
    time_str, expected = case
    assert time_str_to_seconds(time_str) == expected


def test_normalize_time_str():
    assert normalize_time_str("9:00:00") == "09:00:00"
    assert normalize_time_str("") == ""
    assert normalize_time_str("noon") == "noon"


def test_add_minutes():
    assert add_minutes("08:00:00", 5) == "08:05:00"
    assert add_minutes("23:58:00", 5) == "24:03:00"
    with pytest.raises(ValueError):
        add_minutes("", 5)


def test_is_non_decreasing():
    assert is_non_decreasing(["08:00:00", "08:00:00", "08:05:00"])
    assert is_non_decreasing(["08:00:00", "", "08:05:00"])
    assert not is_non_decreasing(["08:10:00", "08:05:00"])
