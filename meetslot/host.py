"""
Host-side record operations.

Weekly availability, meeting types, and the host's booking list. These
are thin validated wrappers over the repository; the slot engine reads
what they write.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from meetslot.config import AppConfig, settings
from meetslot.errors import BookingNotFound, MeetingTypeInactiveOrNotFound, ValidationError
from meetslot.schemas.availability_schema import WeeklyAvailabilityWindow
from meetslot.schemas.booking_schema import Booking, BookingStatus, DashboardStats
from meetslot.schemas.meeting_type_schema import MeetingType
from meetslot.scheduling.resolver import Clock
from meetslot.store.base import AvailabilityRepository

logger = logging.getLogger(__name__)


class BookingView(str, Enum):
    """Tabs of the host's booking list."""
    UPCOMING = "upcoming"
    PAST = "past"
    ALL = "all"


_EDITABLE_MEETING_FIELDS = frozenset(
    {"name", "description", "duration_minutes", "color", "is_active"}
)


def _check_name(name: Any) -> None:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Meeting type name must not be blank, got {name!r}")


class HostCalendar:
    """Manage one repository's availability, meeting types and bookings."""

    def __init__(
        self,
        repository: AvailabilityRepository,
        config: Optional[AppConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.repository = repository
        self.config = config or settings
        self._clock = clock or datetime.now

    # ------------------------------------------------------------------ #
    # Weekly availability
    # ------------------------------------------------------------------ #

    def add_window(
        self, host_id: str, day_of_week: int, start_time: str, end_time: str
    ) -> WeeklyAvailabilityWindow:
        """Publish a recurring window. End must be after start."""
        try:
            window = self.repository.add_availability_window(
                host_id, day_of_week, start_time, end_time
            )
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid availability window: {exc.errors()[0]['msg']}"
            ) from exc
        logger.info(
            "Host %s available on day %d %s-%s", host_id, day_of_week, start_time, end_time
        )
        return window

    def remove_window(self, host_id: str, window_id: str) -> bool:
        return self.repository.delete_availability_window(host_id, window_id)

    def list_windows(self, host_id: str) -> list[WeeklyAvailabilityWindow]:
        """Windows ordered by weekday, then start time."""
        windows = self.repository.list_weekly_availability(host_id)
        return sorted(windows, key=lambda w: (w.day_of_week, w.start_time))

    # ------------------------------------------------------------------ #
    # Meeting types
    # ------------------------------------------------------------------ #

    def _check_duration(self, duration_minutes: int) -> None:
        max_minutes = self.config.scheduling.max_booking_minutes
        if not isinstance(duration_minutes, int) or isinstance(duration_minutes, bool):
            raise ValidationError(
                f"Duration must be a whole number of minutes, got {duration_minutes!r}"
            )
        if not 0 < duration_minutes <= max_minutes:
            raise ValidationError(
                f"Duration must be between 1 and {max_minutes} minutes, got {duration_minutes}"
            )

    def _owned_meeting_type(self, host_id: str, meeting_type_id: str) -> MeetingType:
        meeting_type = self.repository.get_meeting_type(meeting_type_id)
        if meeting_type is None or meeting_type.host_id != host_id:
            raise MeetingTypeInactiveOrNotFound(
                f"Meeting type {meeting_type_id} not found for host {host_id}."
            )
        return meeting_type

    def create_meeting_type(
        self,
        host_id: str,
        name: str,
        duration_minutes: Optional[int] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> MeetingType:
        defaults = self.config.meeting_types
        duration = defaults.duration_minutes if duration_minutes is None else duration_minutes
        self._check_duration(duration)
        _check_name(name)

        meeting_type = MeetingType(
            id="",
            host_id=host_id,
            name=name.strip(),
            description=description or None,
            duration_minutes=duration,
            color=color or defaults.color,
        )
        saved = self.repository.save_meeting_type(meeting_type)
        logger.info("Meeting type %s '%s' created for host %s", saved.id, saved.name, host_id)
        return saved

    def update_meeting_type(
        self, host_id: str, meeting_type_id: str, /, **changes: Any
    ) -> MeetingType:
        """Edit a meeting type. Existing bookings keep their original end time."""
        unknown = set(changes) - _EDITABLE_MEETING_FIELDS
        if unknown:
            raise ValidationError(f"Unknown meeting type field(s): {sorted(unknown)}")
        if "duration_minutes" in changes:
            self._check_duration(changes["duration_minutes"])
        if "name" in changes:
            _check_name(changes["name"])
            changes["name"] = changes["name"].strip()

        current = self._owned_meeting_type(host_id, meeting_type_id)
        try:
            updated = MeetingType.model_validate({**current.model_dump(), **changes})
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid meeting type: {exc.errors()[0]['msg']}") from exc
        return self.repository.save_meeting_type(updated)

    def set_meeting_type_active(
        self, host_id: str, meeting_type_id: str, active: bool
    ) -> MeetingType:
        """Hide or re-publish a meeting type without touching its bookings."""
        return self.update_meeting_type(host_id, meeting_type_id, is_active=active)

    def list_meeting_types(self, host_id: str) -> list[MeetingType]:
        return sorted(self.repository.list_meeting_types(host_id), key=lambda m: m.name)

    # ------------------------------------------------------------------ #
    # Bookings
    # ------------------------------------------------------------------ #

    def list_bookings(
        self, host_id: str, view: BookingView = BookingView.UPCOMING
    ) -> list[Booking]:
        """Upcoming bookings soonest first; past and all views most recent first."""
        bookings = self.repository.list_host_bookings(host_id)
        now = self._clock()
        if view == BookingView.UPCOMING:
            return sorted(
                (b for b in bookings if b.start_time >= now), key=lambda b: b.start_time
            )
        if view == BookingView.PAST:
            bookings = [b for b in bookings if b.start_time < now]
        return sorted(bookings, key=lambda b: b.start_time, reverse=True)

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.repository.get_booking(booking_id)
        if booking is None:
            raise BookingNotFound(f"Booking {booking_id} not found.")
        return booking

    def cancel_booking(self, host_id: str, booking_id: str) -> Booking:
        """Cancel one of the host's upcoming bookings. Cancelling twice is a no-op."""
        booking = self.repository.get_booking(booking_id)
        if booking is None or booking.host_id != host_id:
            raise BookingNotFound(f"Booking {booking_id} not found.")
        if booking.status == BookingStatus.CANCELLED:
            return booking
        if booking.start_time < self._clock():
            raise ValidationError(
                f"Booking {booking_id} has already started and cannot be cancelled."
            )
        return self.repository.update_booking_status(booking_id, BookingStatus.CANCELLED)

    def dashboard_stats(self, host_id: str) -> DashboardStats:
        bookings = self.repository.list_host_bookings(host_id)
        now = self._clock()
        return DashboardStats(
            upcoming_bookings=sum(1 for b in bookings if b.start_time >= now),
            total_bookings=len(bookings),
            meeting_types=len(self.repository.list_meeting_types(host_id)),
        )
