"""Recurrence rules: when does a scheduled report run next?

All arithmetic is done on timezone-aware datetimes in the platform's
reference timezone (UTC). Every rule returns an instant strictly after
``now``.

Weekdays use 0=Sunday … 6=Saturday.
"""

import calendar
from datetime import datetime, timedelta
from enum import Enum

DEFAULT_SCHEDULE_TIME = "09:00"
DEFAULT_WEEKLY_DAY = 0
DEFAULT_MONTHLY_DAY = 1
DEFAULT_INTERVAL_DAYS = 1


class ReportKind(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"  # every ``interval_days`` days


def parse_schedule_time(value: str | None) -> tuple[int, int]:
    """Split ``HH:MM`` into (hour, minute). Raises ValueError if malformed."""
    parts = (value or DEFAULT_SCHEDULE_TIME).split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time format: {value}. Use HH:MM")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time format: {value}. Use HH:MM")
    return hour, minute


def sunday_based_weekday(moment: datetime) -> int:
    return (moment.weekday() + 1) % 7


def _at(moment: datetime, hour: int, minute: int) -> datetime:
    return moment.replace(hour=hour, minute=minute, second=0, microsecond=0)


def _on_day_of_month(year: int, month: int, day: int, hour: int, minute: int, tzinfo) -> datetime:
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, min(day, last_day), hour, minute, tzinfo=tzinfo)


def next_daily(now: datetime, hour: int, minute: int) -> datetime:
    candidate = _at(now, hour, minute)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def next_weekly(now: datetime, hour: int, minute: int, weekday: int) -> datetime:
    days_ahead = (weekday - sunday_based_weekday(now)) % 7
    candidate = _at(now, hour, minute) + timedelta(days=days_ahead)
    if candidate <= now:
        candidate += timedelta(days=7)
    return candidate


def next_monthly(now: datetime, hour: int, minute: int, day_of_month: int) -> datetime:
    """Days past the end of a short month fall on its last day."""
    candidate = _on_day_of_month(now.year, now.month, day_of_month, hour, minute, now.tzinfo)
    if candidate <= now:
        year, month = (now.year + 1, 1) if now.month == 12 else (now.year, now.month + 1)
        candidate = _on_day_of_month(year, month, day_of_month, hour, minute, now.tzinfo)
    return candidate


def next_every_n_days(now: datetime, hour: int, minute: int, interval_days: int) -> datetime:
    candidate = _at(now, hour, minute)
    if candidate <= now:
        candidate += timedelta(days=max(interval_days, 1))
    return candidate


def next_send_time(
    kind,
    now: datetime,
    schedule_time: str | None = None,
    schedule_day: int | None = None,
    interval_days: int | None = None,
) -> datetime:
    """Next run of a report with the given recurrence, strictly after ``now``."""
    kind = ReportKind(kind)
    hour, minute = parse_schedule_time(schedule_time)

    if kind == ReportKind.DAILY:
        return next_daily(now, hour, minute)
    if kind == ReportKind.WEEKLY:
        return next_weekly(now, hour, minute, DEFAULT_WEEKLY_DAY if schedule_day is None else schedule_day)
    if kind == ReportKind.MONTHLY:
        return next_monthly(now, hour, minute, schedule_day or DEFAULT_MONTHLY_DAY)
    return next_every_n_days(now, hour, minute, interval_days or DEFAULT_INTERVAL_DAYS)


def trailing_period_start(kind, now: datetime, interval_days: int | None = None) -> datetime:
    """Start of the window a report of this kind summarises."""
    kind = ReportKind(kind)
    if kind == ReportKind.DAILY:
        return now - timedelta(days=1)
    if kind == ReportKind.WEEKLY:
        return now - timedelta(days=7)
    if kind == ReportKind.MONTHLY:
        year, month = (now.year - 1, 12) if now.month == 1 else (now.year, now.month - 1)
        last_day = calendar.monthrange(year, month)[1]
        return now.replace(year=year, month=month, day=min(now.day, last_day))
    return now - timedelta(days=interval_days or DEFAULT_INTERVAL_DAYS)
