"""Parsing of wall-clock scan timestamps."""

from dataclasses import dataclass
from datetime import datetime, tzinfo


@dataclass(frozen=True)
class ParsedTimestamp:
    """Result of parsing a scan timestamp."""

    instant: datetime | None
    is_valid: bool


INVALID_TIMESTAMP = ParsedTimestamp(instant=None, is_valid=False)


def parse_timestamp(value: object, tz: tzinfo, now: datetime) -> ParsedTimestamp:
    """Parse a scan timestamp into an absolute instant.

    Scan timestamps are stored as local wall-clock strings such as
    ``"2024-01-01 08:00:00"``. The first space is read as the date/time
    separator, so any ISO-8601 form (with or without an offset) is accepted.
    Naive values are interpreted in ``tz``.

    Args:
        value: Raw timestamp as stored on the event (may be missing or not a string).
        tz: Timezone of the dormitory's wall clock.
        now: Current time, used to reject timestamps later than next year.

    Returns:
        ParsedTimestamp with ``is_valid`` False for missing, malformed or
        far-future values. Never raises.
    """
    if not isinstance(value, str) or not value.strip():
        return INVALID_TIMESTAMP

    try:
        parsed = datetime.fromisoformat(value.strip().replace(" ", "T", 1))
    except ValueError:
        return INVALID_TIMESTAMP

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)

    if parsed.year > now.year + 1:
        return INVALID_TIMESTAMP

    return ParsedTimestamp(instant=parsed, is_valid=True)


def format_timestamp(instant: datetime, tz: tzinfo) -> str:
    """Format an instant as the wall-clock string stored on scan events."""
    return instant.astimezone(tz).strftime("%Y-%m-%d %H:%M:%S")
