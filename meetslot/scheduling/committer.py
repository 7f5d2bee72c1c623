"""
Booking commit with revalidation.

The slot list a guest picks from is a snapshot; minutes may pass before
the form is submitted. The committer therefore re-checks everything the
slot list was built from before writing, and relies on the store's
atomic overlap check for the final race between two concurrent commits.

Order of checks:
    1. Guest contact fields and slot shape
    2. Meeting type is active and owned by the host
    3. Slot length equals the meeting type duration
    4. Slot is one the engine offers on that date (policy, windows, step)
    5. No active booking overlaps the slot
    6. Store write, which fails with BookingConflict if a concurrent
       commit got there first
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from meetslot.errors import (
    BookingConflict,
    MeetingTypeInactiveOrNotFound,
    SlotNoLongerAvailable,
    ValidationError,
)
from meetslot.logging_context import get_request_logger
from meetslot.schemas.availability_schema import CandidateSlot
from meetslot.schemas.booking_schema import BookingStatus, GuestInfo, NewBooking
from meetslot.schemas.meeting_type_schema import MeetingType
from meetslot.scheduling.overlap import find_conflicts
from meetslot.scheduling.resolver import SlotResolver

logger = get_request_logger(__name__)


def _describe_pydantic_error(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ())) or "input"
        parts.append(f"{location}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def build_guest_info(name: str, email: str, notes: Optional[str] = None) -> GuestInfo:
    """Validate guest contact fields, raising the engine's ValidationError."""
    try:
        return GuestInfo(name=name or "", email=email or "", notes=notes)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Invalid guest details: {_describe_pydantic_error(exc)}"
        ) from exc


class BookingCommitter:
    """Turns a chosen slot plus guest details into a confirmed booking."""

    def __init__(self, resolver: SlotResolver) -> None:
        self.resolver = resolver
        self.repository = resolver.repository

    def _resolve_meeting_type(self, host_id: str, meeting_type_id: str) -> MeetingType:
        meeting_type = self.resolver.fetch(
            f"meeting type {meeting_type_id}",
            lambda: self.repository.get_active_meeting_type(meeting_type_id, host_id),
        )
        if meeting_type is None:
            raise MeetingTypeInactiveOrNotFound(
                f"Meeting type {meeting_type_id} is not available for host {host_id}."
            )
        return meeting_type

    def _check_offered(
        self, host_id: str, slot: CandidateSlot, duration_minutes: int
    ) -> None:
        offered = self.resolver.candidate_slots(
            host_id, slot.start_time.date(), duration_minutes
        )
        if slot not in offered:
            raise ValidationError(
                f"Slot starting {slot.start_time:%Y-%m-%d %H:%M} is not offered by this host."
            )

    def _check_free(self, host_id: str, slot: CandidateSlot) -> None:
        bookings = self.resolver.existing_bookings(host_id, slot.start_time.date())
        conflicts = find_conflicts(slot.start_time, slot.end_time, bookings)
        if conflicts:
            logger.warning(
                "Slot %s taken since listing (conflicts: %s)",
                slot.start_time.isoformat(), [b.id for b in conflicts],
            )
            raise SlotNoLongerAvailable(
                "That time was just booked by someone else. Please choose another slot."
            )

    def commit(
        self,
        host_id: str,
        meeting_type_id: str,
        slot: CandidateSlot,
        guest_name: str,
        guest_email: str,
        notes: Optional[str] = None,
    ) -> str:
        """
        Validate and persist a booking.

        Returns:
            The new booking's id.

        Raises:
            ValidationError: bad guest details, malformed or unoffered slot.
            MeetingTypeInactiveOrNotFound: meeting type missing or inactive.
            SlotNoLongerAvailable: the slot overlaps a booking made meanwhile.
            FetchError: the store could not be read during revalidation.
        """
        guest = build_guest_info(guest_name, guest_email, notes)
        if slot.start_time >= slot.end_time:
            raise ValidationError("Slot end must be after its start.")

        meeting_type = self._resolve_meeting_type(host_id, meeting_type_id)
        if slot.duration_minutes != meeting_type.duration_minutes:
            raise ValidationError(
                f"Slot is {slot.duration_minutes} minutes but '{meeting_type.name}' "
                f"lasts {meeting_type.duration_minutes} minutes."
            )

        self._check_offered(host_id, slot, meeting_type.duration_minutes)
        self._check_free(host_id, slot)

        record = NewBooking(
            host_id=host_id,
            guest_name=guest.name,
            guest_email=str(guest.email),
            title=meeting_type.name,
            description=guest.notes,
            start_time=slot.start_time,
            end_time=slot.end_time,
            status=BookingStatus.CONFIRMED,
        )
        try:
            booking_id = self.repository.create_booking(record)
        except BookingConflict as exc:
            logger.warning(
                "Lost booking race for %s at %s (conflicts: %s)",
                host_id, slot.start_time.isoformat(), exc.conflicting_ids,
            )
            raise SlotNoLongerAvailable(
                "That time was just booked by someone else. Please choose another slot."
            ) from exc

        logger.info(
            "Committed booking %s (%s) for host %s at %s",
            booking_id, meeting_type.name, host_id, slot.start_time.isoformat(),
        )
        return booking_id
