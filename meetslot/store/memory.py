"""
In-process record store.

In production this role is played by a database with a uniqueness or
exclusion constraint on active bookings. Here a single lock serializes
writes so that two commits for overlapping slots cannot both succeed.
"""

import logging
import threading
import uuid
from datetime import datetime
from typing import Iterable, Optional

from meetslot.errors import BookingConflict, BookingNotFound
from meetslot.schemas.availability_schema import WeeklyAvailabilityWindow
from meetslot.schemas.booking_schema import Booking, BookingStatus, NewBooking
from meetslot.schemas.meeting_type_schema import MeetingType
from meetslot.store.base import DEFAULT_EXCLUDED_STATUSES, AvailabilityRepository

logger = logging.getLogger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


class InMemoryStore(AvailabilityRepository):
    """Dict-backed repository. Safe to share between threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._windows: dict[str, WeeklyAvailabilityWindow] = {}
        self._meeting_types: dict[str, MeetingType] = {}
        self._bookings: dict[str, Booking] = {}

    # ------------------------------------------------------------------ #
    # Availability windows
    # ------------------------------------------------------------------ #

    def list_weekly_availability(self, host_id: str) -> list[WeeklyAvailabilityWindow]:
        with self._lock:
            return [w for w in self._windows.values() if w.host_id == host_id]

    def add_availability_window(
        self, host_id: str, day_of_week: int, start_time: str, end_time: str
    ) -> WeeklyAvailabilityWindow:
        window = WeeklyAvailabilityWindow(
            id=_new_id("AV"),
            host_id=host_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
        )
        with self._lock:
            self._windows[window.id] = window
        logger.debug("Window %s added for host %s", window.id, host_id)
        return window

    def delete_availability_window(self, host_id: str, window_id: str) -> bool:
        with self._lock:
            window = self._windows.get(window_id)
            if window is None or window.host_id != host_id:
                return False
            del self._windows[window_id]
        logger.debug("Window %s removed for host %s", window_id, host_id)
        return True

    # ------------------------------------------------------------------ #
    # Meeting types
    # ------------------------------------------------------------------ #

    def get_active_meeting_type(
        self, meeting_type_id: str, host_id: str
    ) -> Optional[MeetingType]:
        with self._lock:
            meeting_type = self._meeting_types.get(meeting_type_id)
        if meeting_type is None or meeting_type.host_id != host_id or not meeting_type.is_active:
            return None
        return meeting_type

    def get_meeting_type(self, meeting_type_id: str) -> Optional[MeetingType]:
        with self._lock:
            return self._meeting_types.get(meeting_type_id)

    def list_meeting_types(self, host_id: str) -> list[MeetingType]:
        with self._lock:
            return [m for m in self._meeting_types.values() if m.host_id == host_id]

    def save_meeting_type(self, meeting_type: MeetingType) -> MeetingType:
        if not meeting_type.id:
            meeting_type = meeting_type.model_copy(update={"id": _new_id("MT")})
        with self._lock:
            self._meeting_types[meeting_type.id] = meeting_type
        return meeting_type

    # ------------------------------------------------------------------ #
    # Bookings
    # ------------------------------------------------------------------ #

    def list_bookings(
        self,
        host_id: str,
        range_start: datetime,
        range_end: datetime,
        exclude_statuses: Iterable[BookingStatus] = DEFAULT_EXCLUDED_STATUSES,
    ) -> list[Booking]:
        excluded = set(exclude_statuses)
        with self._lock:
            return [
                b
                for b in self._bookings.values()
                if b.host_id == host_id
                and b.status not in excluded
                and range_start <= b.start_time < range_end
            ]

    def list_host_bookings(self, host_id: str) -> list[Booking]:
        with self._lock:
            return [b for b in self._bookings.values() if b.host_id == host_id]

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            return self._bookings.get(booking_id)

    def create_booking(self, record: NewBooking) -> str:
        with self._lock:
            conflicting = [
                b.id
                for b in self._bookings.values()
                if b.host_id == record.host_id
                and b.status != BookingStatus.CANCELLED
                and b.start_time < record.end_time
                and record.start_time < b.end_time
            ]
            if conflicting:
                raise BookingConflict(
                    f"Host {record.host_id} already has a booking overlapping "
                    f"{record.start_time:%Y-%m-%d %H:%M}-{record.end_time:%H:%M}",
                    conflicting_ids=conflicting,
                )
            booking = Booking(id=_new_id("BK"), **record.model_dump())
            self._bookings[booking.id] = booking

        logger.info(
            "Booking created: %s for %s on %s",
            booking.id, booking.guest_email, booking.start_time.isoformat(),
        )
        return booking.id

    def update_booking_status(self, booking_id: str, status: BookingStatus) -> Booking:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                raise BookingNotFound(f"Booking {booking_id} not found.")
            booking = booking.model_copy(update={"status": status})
            self._bookings[booking_id] = booking
        logger.info("Booking %s status set to %s", booking_id, status.value)
        return booking

    def reset(self) -> None:
        """Clear all records. Used by test fixtures for isolation."""
        with self._lock:
            self._windows.clear()
            self._meeting_types.clear()
            self._bookings.clear()
