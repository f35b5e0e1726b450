"""Tests for timezone parsing and EXIF offset formatting."""

from datetime import datetime, timedelta, timezone

import pytest

from geotagger.timezone_offsets import (
    format_timezone_offset,
    is_valid_timezone_offset,
    offset_to_tzinfo,
    parse_timezone_offset,
)

WINTER = datetime(2025, 1, 15, 12, tzinfo=timezone.utc)
SUMMER = datetime(2025, 7, 15, 12, tzinfo=timezone.utc)


@pytest.mark.parametrize("value, expected", [
    ("Z", 0),
    ("+00:00", 0),
    ("+05:00", 5 * 3600),
    ("-08:00", -8 * 3600),
    ("+05:30", 5 * 3600 + 30 * 60),
    ("+14:00", 14 * 3600),
    ("-12:00", -12 * 3600),
])
def test_parse_gmt_offsets(value, expected):
    assert parse_timezone_offset(value) == expected


@pytest.mark.parametrize("value", ["+15:00", "+05:60", "5:00", "+5:00", "", "Nowhere/Atlantis", "not a zone"])
def test_parse_rejects_invalid(value):
    assert parse_timezone_offset(value) is None


def test_parse_abbreviation_with_daylight_saving():
    assert parse_timezone_offset("EST", at=WINTER) == -5 * 3600
    assert parse_timezone_offset("PST", at=WINTER) == -8 * 3600
    assert parse_timezone_offset("CET", at=SUMMER) == 2 * 3600


def test_parse_iana_identifier():
    assert parse_timezone_offset("America/New_York", at=WINTER) == -5 * 3600
    assert parse_timezone_offset("America/New_York", at=SUMMER) == -4 * 3600
    assert parse_timezone_offset("Asia/Tokyo", at=SUMMER) == 9 * 3600


@pytest.mark.parametrize("seconds, expected", [
    (0, "Z"),
    (3600, "+01:00"),
    (-8 * 3600, "-08:00"),
    (5 * 3600 + 45 * 60, "+05:45"),
    (-(3 * 3600 + 30 * 60), "-03:30"),
])
def test_format(seconds, expected):
    assert format_timezone_offset(seconds) == expected


@pytest.mark.parametrize("value, expected", [
    ("Z", True),
    ("+00:00", True),
    ("-12:00", True),
    ("+14:00", True),
    ("+05:45", True),
    ("+09:30", True),
    ("+15:00", False),
    ("+05:10", False),
    ("+5:00", False),
    ("05:00", False),
    ("+05:00:00", False),
    ("UTC", False),
    ("", False),
    (None, False),
])
def test_valid_offsets(value, expected):
    assert is_valid_timezone_offset(value) is expected


def test_offset_to_tzinfo():
    assert offset_to_tzinfo("Z") == timezone.utc
    assert offset_to_tzinfo("-03:30") == timezone(-timedelta(hours=3, minutes=30))
    assert offset_to_tzinfo("garbage") is None
