"""Wall-clock adapter."""

from datetime import datetime, tzinfo


class SystemClock:
    """Clock reading the system time in the dormitory's timezone."""

    def __init__(self, tz: tzinfo) -> None:
        """Initialize with the timezone returned times are expressed in."""
        self._tz = tz

    def now(self) -> datetime:
        """Return the current time."""
        return datetime.now(self._tz)
