"""
Error taxonomy for the scheduling engine.

Every error carries an ErrorKind so the service boundary can turn a raised
exception into a value for the booking UI without type switches.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Outcome categories reported back to the booking UI."""
    VALIDATION_ERROR = "validation_error"
    MEETING_TYPE_UNAVAILABLE = "meeting_type_unavailable"
    SLOT_NO_LONGER_AVAILABLE = "slot_no_longer_available"
    FETCH_FAILED = "fetch_failed"
    BOOKING_CONFLICT = "booking_conflict"
    NOT_FOUND = "not_found"


class SchedulingError(Exception):
    """Base class for all scheduling engine errors."""

    kind: ErrorKind = ErrorKind.VALIDATION_ERROR


class FetchError(SchedulingError):
    """The store could not be reached or timed out.

    Never equivalent to "no data": callers must abort the operation.
    """

    kind = ErrorKind.FETCH_FAILED


class ValidationError(SchedulingError):
    """Input failed shape or range checks; raised before any store write."""

    kind = ErrorKind.VALIDATION_ERROR


class SlotNoLongerAvailable(SchedulingError):
    """The chosen slot was taken after the slot list was generated."""

    kind = ErrorKind.SLOT_NO_LONGER_AVAILABLE


class MeetingTypeInactiveOrNotFound(SchedulingError):
    """The meeting type does not exist, is inactive, or belongs to another host."""

    kind = ErrorKind.MEETING_TYPE_UNAVAILABLE


class BookingConflict(SchedulingError):
    """Store-level uniqueness violation: an overlapping active booking exists."""

    kind = ErrorKind.BOOKING_CONFLICT

    def __init__(self, message: str, conflicting_ids: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.conflicting_ids = conflicting_ids or []


class BookingNotFound(SchedulingError):
    """No booking with that id exists for the host."""

    kind = ErrorKind.NOT_FOUND
