"""
Storage collaborator interface.

The scheduling engine only talks to persistence through this contract.
Implementations raise FetchError when the backing store cannot be read,
and BookingConflict when create_booking would overlap an active booking.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional

from meetslot.schemas.availability_schema import WeeklyAvailabilityWindow
from meetslot.schemas.booking_schema import Booking, BookingStatus, NewBooking
from meetslot.schemas.meeting_type_schema import MeetingType

DEFAULT_EXCLUDED_STATUSES: frozenset[BookingStatus] = frozenset({BookingStatus.CANCELLED})


class AvailabilityRepository(ABC):
    """Data access used by slot resolution and booking commits."""

    # ------------------------------------------------------------------ #
    # Engine-facing queries
    # ------------------------------------------------------------------ #

    @abstractmethod
    def list_weekly_availability(self, host_id: str) -> list[WeeklyAvailabilityWindow]:
        """Return every weekly window the host has published."""

    @abstractmethod
    def list_bookings(
        self,
        host_id: str,
        range_start: datetime,
        range_end: datetime,
        exclude_statuses: Iterable[BookingStatus] = DEFAULT_EXCLUDED_STATUSES,
    ) -> list[Booking]:
        """Return the host's bookings whose start falls in ``[range_start, range_end)``."""

    @abstractmethod
    def get_active_meeting_type(
        self, meeting_type_id: str, host_id: str
    ) -> Optional[MeetingType]:
        """Return the meeting type if it exists, is active, and belongs to the host."""

    @abstractmethod
    def create_booking(self, record: NewBooking) -> str:
        """Persist a booking and return its id.

        Raises:
            BookingConflict: if a non-cancelled booking of the same host
                overlaps ``[record.start_time, record.end_time)``.
        """

    # ------------------------------------------------------------------ #
    # Host-side record management
    # ------------------------------------------------------------------ #

    @abstractmethod
    def add_availability_window(
        self, host_id: str, day_of_week: int, start_time: str, end_time: str
    ) -> WeeklyAvailabilityWindow: ...

    @abstractmethod
    def delete_availability_window(self, host_id: str, window_id: str) -> bool: ...

    @abstractmethod
    def save_meeting_type(self, meeting_type: MeetingType) -> MeetingType: ...

    @abstractmethod
    def get_meeting_type(self, meeting_type_id: str) -> Optional[MeetingType]: ...

    @abstractmethod
    def list_meeting_types(self, host_id: str) -> list[MeetingType]: ...

    @abstractmethod
    def get_booking(self, booking_id: str) -> Optional[Booking]: ...

    @abstractmethod
    def list_host_bookings(self, host_id: str) -> list[Booking]: ...

    @abstractmethod
    def update_booking_status(self, booking_id: str, status: BookingStatus) -> Booking: ...
