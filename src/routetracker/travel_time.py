"""Travel time between two clock times."""

from typing import Optional

MINUTES_PER_DAY = 24 * 60


def parse_clock_minutes(clock: str) -> Optional[int]:
    """Minutes past midnight for an HH:MM or HH:MM:SS string. Seconds are ignored."""
    parts = str(clock).strip().split(":")
    if len(parts) < 2:
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    return hours * 60 + minutes


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}{'' if value == 1 else 's'}"


def format_duration(total_minutes: int) -> str:
    hours, minutes = divmod(total_minutes, 60)
    if hours == 0:
        return _plural(minutes, "minute")
    if minutes == 0:
        return _plural(hours, "hour")
    return f"{_plural(hours, 'hour')} {_plural(minutes, 'minute')}"


def calculate_travel_time(start: str, end: str) -> Optional[str]:
    """
    Human-readable time from start to end, wrapping past midnight.

    An end equal to the start counts as a full day rather than zero.

    Examples:
        calculate_travel_time("10:00", "11:30") -> "1 hour 30 minutes"
        calculate_travel_time("23:50", "00:10") -> "20 minutes"

    Returns:
        The duration string, or None if either clock string is unreadable.
    """
    start_minutes = parse_clock_minutes(start)
    end_minutes = parse_clock_minutes(end)
    if start_minutes is None or end_minutes is None:
        return None

    elapsed = (end_minutes - start_minutes) % MINUTES_PER_DAY
    if elapsed == 0:
        elapsed = MINUTES_PER_DAY
    return format_duration(elapsed)
