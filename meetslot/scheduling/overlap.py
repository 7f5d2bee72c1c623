"""
Overlap detection between candidate slots and existing bookings.

Intervals are half-open, [start, end): two intervals conflict when
start_a < end_b and start_b < end_a. Touching at a boundary is not a
conflict, so a slot may start exactly when a booking ends.
"""

import logging
from datetime import datetime
from typing import Iterable, Sequence

from meetslot.schemas.availability_schema import CandidateSlot
from meetslot.schemas.booking_schema import Booking, BookingStatus

logger = logging.getLogger(__name__)


def intervals_conflict(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """True when ``[start_a, end_a)`` and ``[start_b, end_b)`` share any instant."""
    return start_a < end_b and start_b < end_a


def _blocking(bookings: Iterable[Booking]) -> list[Booking]:
    return [b for b in bookings if b.status != BookingStatus.CANCELLED]


def find_conflicts(
    start: datetime, end: datetime, bookings: Iterable[Booking]
) -> list[Booking]:
    """Return the active bookings that overlap ``[start, end)``."""
    return [
        b for b in _blocking(bookings)
        if intervals_conflict(start, end, b.start_time, b.end_time)
    ]


def filter_conflicting_slots(
    slots: Sequence[CandidateSlot], bookings: Iterable[Booking]
) -> list[CandidateSlot]:
    """Drop every slot that conflicts with at least one active booking.

    Input order is preserved. Applying the filter twice with the same
    bookings returns the same list.
    """
    blocking = _blocking(bookings)
    if not blocking:
        return list(slots)

    surviving = []
    for slot in slots:
        if any(
            intervals_conflict(slot.start_time, slot.end_time, b.start_time, b.end_time)
            for b in blocking
        ):
            continue
        surviving.append(slot)

    logger.debug(
        "Overlap filter kept %d of %d slot(s) against %d booking(s)",
        len(surviving), len(slots), len(blocking),
    )
    return surviving
