"""Timestamp parsing and ordering.

Every "is the incoming record newer than the stored one" decision goes through
``Time.later_than``. A missing timestamp sorts before any real timestamp, so a
record that was never stored always loses the comparison.
"""

from datetime import UTC, datetime


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse a GitHub timestamp into an aware UTC datetime.

    Accepts ISO 8601 strings such as ``2015-09-07T12:14:59Z`` or
    ``2015-09-07 12:14:59.000Z`` and datetimes. Naive values are taken as UTC.

    Args:
        value: Timestamp string, datetime or None

    Returns:
        Aware datetime in UTC, or None when the value is missing

    Raises:
        ValueError: If the string is not a valid ISO 8601 timestamp
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.strip())

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


class Time:
    """Comparable wrapper around an optional timestamp."""

    def __init__(self, value: str | datetime | None):
        self.value = parse_timestamp(value)

    def later_than(self, other: "Time") -> bool:
        """Return True if this time is strictly later than ``other``."""
        if self.value is None:
            return False
        if other.value is None:
            return True
        return self.value > other.value

    def __repr__(self) -> str:
        return f"Time({self.value.isoformat() if self.value else None})"


def time(value: str | datetime | None) -> Time:
    """Wrap a timestamp so it supports ordering comparisons."""
    return Time(value)


def is_before(time_a: str | datetime, time_b: str | datetime) -> bool:
    """Check whether ``time_a`` is strictly earlier than ``time_b``."""
    return time(time_b).later_than(time(time_a))
