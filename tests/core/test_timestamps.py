from datetime import UTC, datetime, timedelta

import pytest

from pebble.core.timestamps import (
    format_relative,
    format_timestamp,
    parse_duration,
    parse_timestamp,
)

NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


def test_format_timestamp_uses_millisecond_utc() -> None:
    moment = datetime(2024, 1, 15, 12, 0, 0, 123456, tzinfo=UTC)

    assert format_timestamp(moment) == "2024-01-15T12:00:00.123Z"


def test_parse_timestamp_accepts_z_and_offsets() -> None:
    assert parse_timestamp("2024-01-15T12:00:00.000Z") == NOW
    assert parse_timestamp("2024-01-15T13:00:00+01:00") == NOW


def test_parse_timestamp_treats_naive_as_utc() -> None:
    assert parse_timestamp("2024-01-15T12:00:00") == NOW


def test_format_relative() -> None:
    assert format_relative(format_timestamp(NOW - timedelta(seconds=5)), NOW) == "just now"
    assert format_relative(format_timestamp(NOW - timedelta(minutes=1)), NOW) == "1 minute ago"
    assert format_relative(format_timestamp(NOW - timedelta(hours=3)), NOW) == "3 hours ago"
    assert format_relative(format_timestamp(NOW - timedelta(days=2)), NOW) == "2 days ago"
    assert format_relative("not a time", NOW) == "not a time"


def test_parse_duration_units() -> None:
    assert parse_duration("7d") == timedelta(days=7)
    assert parse_duration("24h") == timedelta(hours=24)
    assert parse_duration("30m") == timedelta(minutes=30)
    assert parse_duration("60s") == timedelta(seconds=60)


def test_parse_duration_rejects_other_forms() -> None:
    for value in ("", "7", "d7", "1w", "1.5h"):
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(value)
