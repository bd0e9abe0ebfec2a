"""ISO-8601 timestamp helpers.

Timestamps are stored as the strings writers supplied. They are parsed only
where ordering matters (multi-source merge, activity feed) or for display.
"""

import re
from datetime import UTC, datetime, timedelta

_DURATION_PATTERN = re.compile(r"^(\d+)([dhms])$")
_DURATION_UNITS = {"d": "days", "h": "hours", "m": "minutes", "s": "seconds"}


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware datetime.

    Naive timestamps are interpreted as UTC so that every parsed value is
    comparable with every other.

    Raises:
        ValueError: If the value is not ISO-8601
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(moment: datetime) -> str:
    """Format a datetime the way writers append it: UTC with millisecond precision."""
    utc = moment.astimezone(UTC)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_relative(value: str, now: datetime) -> str:
    """Human-readable age of a timestamp (e.g., "3 hours ago").

    Falls back to the raw string when it cannot be parsed.
    """
    try:
        moment = parse_timestamp(value)
    except ValueError:
        return value
    seconds = int((now - moment).total_seconds())
    if seconds < 0:
        return value
    if seconds < 60:
        return "just now"
    for unit_seconds, unit in ((86400, "day"), (3600, "hour"), (60, "minute")):
        if seconds >= unit_seconds:
            count = seconds // unit_seconds
            plural = "" if count == 1 else "s"
            return f"{count} {unit}{plural} ago"
    return value


def parse_duration(value: str) -> timedelta:
    """Parse a short duration such as "7d", "24h", "30m" or "60s".

    Raises:
        ValueError: If the value is not a count followed by d, h, m or s
    """
    match = _DURATION_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f'Invalid duration: {value}. Use format like "7d", "24h", "30m", "60s"')
    return timedelta(**{_DURATION_UNITS[match.group(2)]: int(match.group(1))})
