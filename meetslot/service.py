"""
Booking service: the operations the booking UI calls.

Slot listing raises on failure so a fetch error is never rendered as
"no availability". Booking submission returns a SubmissionResult value,
one of success with a booking id or a failure with an ErrorKind.
"""

from datetime import date
from typing import Optional

from meetslot.config import SchedulingConfig
from meetslot.errors import (
    FetchError,
    MeetingTypeInactiveOrNotFound,
    SchedulingError,
)
from meetslot.logging_context import get_request_logger, new_request_id
from meetslot.schemas.availability_schema import CandidateSlot
from meetslot.schemas.booking_schema import SubmissionResult
from meetslot.scheduling.committer import BookingCommitter
from meetslot.scheduling.resolver import Clock, SlotResolver
from meetslot.store.base import AvailabilityRepository

logger = get_request_logger(__name__)


class BookingService:
    """Guest-facing slot listing and booking submission for any host."""

    def __init__(
        self,
        repository: AvailabilityRepository,
        config: Optional[SchedulingConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.repository = repository
        self.resolver = SlotResolver(repository, config=config, clock=clock)
        self.committer = BookingCommitter(self.resolver)

    def compute_available_slots(
        self, host_id: str, target_date: date, duration_minutes: int
    ) -> list[CandidateSlot]:
        """
        Return the bookable slots for ``target_date``, earliest first.

        Raises:
            ValidationError: the duration is not schedulable.
            FetchError: availability or bookings could not be read.
        """
        slots = self.resolver.available_slots(host_id, target_date, duration_minutes)
        logger.debug(
            "%d slot(s) available for host %s on %s",
            len(slots), host_id, target_date.isoformat(),
        )
        return slots

    def compute_slots_for_meeting_type(
        self, host_id: str, meeting_type_id: str, target_date: date
    ) -> list[CandidateSlot]:
        """Slot listing using an active meeting type's duration."""
        meeting_type = self.resolver.fetch(
            f"meeting type {meeting_type_id}",
            lambda: self.repository.get_active_meeting_type(meeting_type_id, host_id),
        )
        if meeting_type is None:
            raise MeetingTypeInactiveOrNotFound(
                f"Meeting type {meeting_type_id} is not available for host {host_id}."
            )
        return self.compute_available_slots(
            host_id, target_date, meeting_type.duration_minutes
        )

    def list_bookable_dates(self, host_id: str, limit: Optional[int] = None) -> list[date]:
        """Dates a guest may pick on the calendar, from today through the horizon."""
        return self.resolver.bookable_dates(host_id, limit)

    def submit_booking(
        self,
        host_id: str,
        meeting_type_id: str,
        slot: CandidateSlot,
        guest_name: str,
        guest_email: str,
        notes: Optional[str] = None,
    ) -> SubmissionResult:
        """Commit a guest's chosen slot. Failures are returned, not raised."""
        new_request_id()
        logger.debug("Submission for host %s", host_id)
        try:
            booking_id = self.committer.commit(
                host_id, meeting_type_id, slot, guest_name, guest_email, notes
            )
        except FetchError as exc:
            logger.warning("Submission aborted: %s", exc)
            return SubmissionResult(
                success=False,
                error=exc.kind,
                message="We couldn't reach the calendar just now. Please try again.",
            )
        except SchedulingError as exc:
            logger.info("Submission rejected (%s): %s", exc.kind.value, exc)
            return SubmissionResult(success=False, error=exc.kind, message=str(exc))

        return SubmissionResult(
            success=True,
            booking_id=booking_id,
            message=(
                f"Booking confirmed for {slot.start_time:%A, %B} {slot.start_time.day} "
                f"at {slot.start_time:%H:%M}. Reference: {booking_id}."
            ),
        )
