"""Tests for time parsing and display helpers."""

from __future__ import annotations

import math

import pytest

from runpace.services.time_format import format_duration, format_time, pace_display, parse_time


@pytest.mark.parametrize("text,expected", [
    ("19:20", 1160),
    ("1920", 1160),
    ("30", 30),
    ("1:02:03", 3723),
    (" 5:00 ", 300),
    ("4:59.7", 299.7),
    ("1:02:03.5", 3723.5),
])
def test_parse_time(text, expected):
    assert parse_time(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", None, "abc", "1:2:3:4", "1:nan", "inf:00"])
def test_parse_time_garbage_is_zero(text):
    assert parse_time(text) == 0


def test_format_time_rounds_up_to_next_minute():
    assert format_time(59.6) == "1:00"


def test_format_time_basic():
    assert format_time(343) == "5:43"
    assert format_time(65.2) == "1:05"


@pytest.mark.parametrize("value", [0, None, math.nan, math.inf])
def test_format_time_invalid(value):
    assert format_time(value) == "--:--"


def test_format_duration():
    assert format_duration(3723) == "1:02:03"
    assert format_duration(1160) == "19:20"
    assert format_duration(0) == "--:--"


def test_pace_display():
    assert pace_display(300) == "5:00/km"
    assert pace_display(0) == "n/a"
    assert pace_display(None) == "n/a"
