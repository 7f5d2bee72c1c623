"""
Slot generation.

Turns a host's recurring weekly windows into concrete candidate slots for
one calendar date. Bookings are not considered here; see overlap.py.

Algorithm, per matching window:
    1. Anchor a cursor at date + window.start_time
    2. Emit [cursor, cursor + duration) while it ends at or before
       date + window.end_time
    3. Advance the cursor by the step (not by the duration), so slots
       overlap one another whenever duration > step
Slots from all windows are merged, de-duplicated and sorted by start.
"""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from meetslot.config import settings
from meetslot.schemas.availability_schema import CandidateSlot, WeeklyAvailabilityWindow
from meetslot.utils import at_wall_clock, day_of_week

logger = logging.getLogger(__name__)


def windows_for_date(
    windows: Iterable[WeeklyAvailabilityWindow], target_date: date
) -> list[WeeklyAvailabilityWindow]:
    """Return the windows that recur on ``target_date``'s weekday, earliest first."""
    weekday = day_of_week(target_date)
    matching = [w for w in windows if w.day_of_week == weekday]
    matching.sort(key=lambda w: (w.start_time, w.end_time))
    return matching


def slots_for_window(
    window: WeeklyAvailabilityWindow,
    target_date: date,
    duration_minutes: int,
    step_minutes: int,
) -> list[CandidateSlot]:
    """Generate the candidate slots one window contributes on ``target_date``."""
    window_end = at_wall_clock(target_date, window.end_time)
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)

    slots = []
    cursor = at_wall_clock(target_date, window.start_time)
    while cursor + duration <= window_end:
        slots.append(CandidateSlot(start_time=cursor, end_time=cursor + duration))
        cursor += step
    return slots


def generate_slots(
    target_date: date,
    duration_minutes: int,
    windows: Iterable[WeeklyAvailabilityWindow],
    step_minutes: Optional[int] = None,
) -> list[CandidateSlot]:
    """
    Enumerate every fixed-duration slot inside the date's availability.

    Args:
        target_date: the calendar day to generate for.
        duration_minutes: meeting length, must be positive.
        windows: the host's weekly windows; other weekdays are ignored.
        step_minutes: spacing between slot starts (defaults to config).

    Returns:
        Slots sorted by start time. Empty when no window matches.
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")
    step = settings.scheduling.slot_step_minutes if step_minutes is None else step_minutes
    if step <= 0:
        raise ValueError(f"step_minutes must be positive, got {step}")

    unique: set[CandidateSlot] = set()
    for window in windows_for_date(windows, target_date):
        unique.update(slots_for_window(window, target_date, duration_minutes, step))

    slots = sorted(unique, key=lambda s: (s.start_time, s.end_time))
    logger.debug(
        "Generated %d candidate slot(s) for %s (duration=%d, step=%d)",
        len(slots), target_date.isoformat(), duration_minutes, step,
    )
    return slots
