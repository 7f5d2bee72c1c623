"""Shared wall-clock and date helpers used across the scheduling engine."""

import re
from datetime import date, datetime, time, timedelta

WALL_CLOCK_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_wall_clock(value: str) -> time:
    """Parse a zero-padded ``HH:MM`` string into a ``datetime.time``.

    Examples:
        >>> parse_wall_clock("09:30")
        datetime.time(9, 30)
    """
    value = value.strip()
    if not WALL_CLOCK_PATTERN.match(value):
        raise ValueError(f"Expected zero-padded HH:MM, got {value!r}")
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def at_wall_clock(day: date, value: str) -> datetime:
    """Combine a calendar day with an ``HH:MM`` wall-clock time."""
    return datetime.combine(day, parse_wall_clock(value))


def day_of_week(day: date) -> int:
    """Day number with Sunday as 0 and Saturday as 6.

    Examples:
        >>> day_of_week(date(2026, 10, 18))  # a Sunday
        0
        >>> day_of_week(date(2026, 10, 19))
        1
    """
    return day.isoweekday() % 7


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def start_of_next_day(day: date) -> datetime:
    return start_of_day(day) + timedelta(days=1)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``."""
    return int((end - start).total_seconds() // 60)
