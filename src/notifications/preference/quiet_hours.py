"""Quiet-hours evaluation: is "now" inside a merchant's do-not-disturb window?

Times are ``HH:MM`` strings in the platform's reference timezone (UTC).
No per-tenant timezone conversion is performed.
"""

from datetime import datetime, time

MINUTES_PER_DAY = 24 * 60


def parse_time_of_day(value: str) -> int:
    """Convert an ``HH:MM`` string to minutes since midnight.

    Raises ValueError when the string is not a valid 24-hour time.
    """
    parts = (value or "").split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time format: {value}. Use HH:MM")

    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time format: {value}. Use HH:MM")

    return hour * 60 + minute


def minutes_since_midnight(moment: datetime | time) -> int:
    return moment.hour * 60 + moment.minute


def is_within_quiet_hours(start: str, end: str, now: datetime | time) -> bool:
    """Return True when ``now`` falls inside the ``start``-``end`` window.

    A window whose start is after its end spans midnight: 22:00-08:00 covers
    23:30 and 07:59 but not 08:00. An empty window (start == end) never matches.
    """
    start_minutes = parse_time_of_day(start)
    end_minutes = parse_time_of_day(end)
    current = minutes_since_midnight(now)

    if start_minutes > end_minutes:
        return current >= start_minutes or current < end_minutes
    return start_minutes <= current < end_minutes
