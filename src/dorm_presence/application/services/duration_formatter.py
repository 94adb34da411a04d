"""Human-readable stay durations."""

from datetime import timedelta

NO_DURATION = "-"


def format_duration(delta: timedelta) -> str:
    """Format the time between an entry and the following exit.

    Examples: ``"2h 15m"`` (an hour or more, seconds dropped), ``"59m 59s"``,
    ``"45s"``. Sub-second stays show as ``"1s"``; non-positive differences
    show as ``"-"``.
    """
    total_seconds = delta.total_seconds()
    if total_seconds <= 0:
        return NO_DURATION

    whole_seconds = int(total_seconds)
    if whole_seconds >= 3600:
        hours, remainder = divmod(whole_seconds, 3600)
        return f"{hours}h {remainder // 60}m"
    if whole_seconds >= 60:
        minutes, seconds = divmod(whole_seconds, 60)
        return f"{minutes}m {seconds}s"
    return f"{max(1, whole_seconds)}s"
