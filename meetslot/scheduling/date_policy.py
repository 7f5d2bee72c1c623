"""
Date boundary and lookahead policy.

Shared by slot listing, bookable-date listing and booking revalidation so
that every caller applies the same gates:
- no dates before today
- no dates beyond the lookahead horizon
- no dates without a matching weekly window
- on today, no slots that have already started
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from meetslot.config import settings
from meetslot.schemas.availability_schema import CandidateSlot, WeeklyAvailabilityWindow
from meetslot.utils import day_of_week


def _lookahead(lookahead_days: Optional[int]) -> int:
    return settings.scheduling.lookahead_days if lookahead_days is None else lookahead_days


def last_bookable_date(now: datetime, lookahead_days: Optional[int] = None) -> date:
    return now.date() + timedelta(days=_lookahead(lookahead_days))


def is_within_horizon(
    target_date: date, now: datetime, lookahead_days: Optional[int] = None
) -> bool:
    """True when ``target_date`` is today or later and inside the horizon."""
    return now.date() <= target_date <= last_bookable_date(now, lookahead_days)


def has_availability(
    target_date: date, windows: Iterable[WeeklyAvailabilityWindow]
) -> bool:
    weekday = day_of_week(target_date)
    return any(w.day_of_week == weekday for w in windows)


def is_bookable_date(
    target_date: date,
    now: datetime,
    windows: Iterable[WeeklyAvailabilityWindow],
    lookahead_days: Optional[int] = None,
) -> bool:
    """Full date gate: inside the horizon and covered by some weekly window."""
    return is_within_horizon(target_date, now, lookahead_days) and has_availability(
        target_date, windows
    )


def drop_started_slots(
    slots: Sequence[CandidateSlot], now: datetime
) -> list[CandidateSlot]:
    """Remove slots that start before ``now``."""
    return [s for s in slots if s.start_time >= now]


def bookable_dates(
    now: datetime,
    windows: Sequence[WeeklyAvailabilityWindow],
    lookahead_days: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[date]:
    """Every date from today through the horizon that passes the date gate."""
    if limit is not None and limit <= 0:
        return []
    result = []
    day = now.date()
    last = last_bookable_date(now, lookahead_days)
    while day <= last:
        if has_availability(day, windows):
            result.append(day)
            if limit is not None and len(result) >= limit:
                break
        day += timedelta(days=1)
    return result
