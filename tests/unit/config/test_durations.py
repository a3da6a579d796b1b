"""Unit and property tests for duration parsing and formatting."""

from __future__ import annotations

from datetime import timedelta

import pytest
from hypothesis import given, strategies as st

from appshell.config.durations import DurationParseError, format_duration, parse_duration


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("30s", timedelta(seconds=30)),
        ("30", timedelta(seconds=30)),
        (" 30 ", timedelta(seconds=30)),
        ("5m", timedelta(minutes=5)),
        ("1h", timedelta(hours=1)),
        ("2h45m", timedelta(hours=2, minutes=45)),
        ("1.5s", timedelta(milliseconds=1500)),
        ("500ms", timedelta(milliseconds=500)),
        ("250us", timedelta(microseconds=250)),
        ("0", timedelta(0)),
        ("-5s", timedelta(seconds=-5)),
        ("720h", timedelta(days=30)),
    ],
)
def test_parse_duration_accepts_suffixed_and_bare_forms(text: str, expected: timedelta) -> None:
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "5x", "s", "+", "1h-5m", "1 h"])
def test_parse_duration_rejects_malformed_input(text: str) -> None:
    with pytest.raises(DurationParseError):
        parse_duration(text)


def test_duration_parse_error_is_a_value_error() -> None:
    assert issubclass(DurationParseError, ValueError)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (timedelta(0), "0s"),
        (timedelta(seconds=30), "30s"),
        (timedelta(minutes=5), "5m0s"),
        (timedelta(hours=1), "1h0m0s"),
        (timedelta(hours=1, minutes=1, seconds=1), "1h1m1s"),
        (timedelta(milliseconds=1500), "1.5s"),
        (timedelta(milliseconds=500), "500ms"),
        (timedelta(seconds=-90), "-1m30s"),
    ],
)
def test_format_duration_uses_compact_form(value: timedelta, expected: str) -> None:
    assert format_duration(value) == expected


@given(st.integers(min_value=0, max_value=10_000_000))
def test_bare_integer_equals_seconds_suffix(seconds: int) -> None:
    assert parse_duration(str(seconds)) == parse_duration(f"{seconds}s")


@given(st.integers(min_value=0, max_value=10_000_000))
def test_formatted_whole_seconds_parse_back(seconds: int) -> None:
    value = timedelta(seconds=seconds)
    assert parse_duration(format_duration(value)) == value


@pytest.mark.parametrize("text", ["١٢", "١٢s", "٣m"])
def test_parse_duration_rejects_non_ascii_digits(text: str) -> None:
    with pytest.raises(DurationParseError):
        parse_duration(text)


@pytest.mark.parametrize("text", ["99999999999999h", "99999999999999999", "-99999999999999999"])
def test_out_of_range_durations_raise_parse_error(text: str) -> None:
    with pytest.raises(DurationParseError, match="out of range"):
        parse_duration(text)
