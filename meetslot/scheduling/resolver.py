"""
Availability resolution for one (host, date, duration).

Composes the date policy, repository fetches, slot generation and the
overlap filter. The same resolver backs slot listing and booking
revalidation, so a stale client can never be offered (or book) a slot
the server would not generate itself.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional, TypeVar

from meetslot.config import SchedulingConfig, settings
from meetslot.errors import FetchError, ValidationError
from meetslot.schemas.availability_schema import CandidateSlot, WeeklyAvailabilityWindow
from meetslot.schemas.booking_schema import Booking
from meetslot.scheduling.date_policy import (
    bookable_dates,
    drop_started_slots,
    is_within_horizon,
)
from meetslot.scheduling.overlap import filter_conflicting_slots
from meetslot.scheduling.slot_generator import generate_slots, windows_for_date
from meetslot.store.base import AvailabilityRepository
from meetslot.utils import start_of_day, start_of_next_day

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


class SlotResolver:
    """Resolves bookable slots against a repository snapshot."""

    def __init__(
        self,
        repository: AvailabilityRepository,
        config: Optional[SchedulingConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.repository = repository
        self.config = config or settings.scheduling
        self._clock = clock or datetime.now

    def now(self) -> datetime:
        return self._clock()

    def validate_duration(self, duration_minutes: int) -> None:
        """Reject durations the engine cannot schedule."""
        max_minutes = self.config.max_booking_minutes
        if not isinstance(duration_minutes, int) or isinstance(duration_minutes, bool):
            raise ValidationError(
                f"Duration must be a whole number of minutes, got {duration_minutes!r}"
            )
        if not 0 < duration_minutes <= max_minutes:
            raise ValidationError(
                f"Duration must be between 1 and {max_minutes} minutes, got {duration_minutes}"
            )

    def fetch(self, what: str, query: Callable[[], T]) -> T:
        """Run a store query, reporting I/O failures as FetchError."""
        try:
            return query()
        except FetchError:
            logger.warning("Fetching %s failed", what)
            raise
        except OSError as exc:
            logger.warning("Fetching %s failed: %s", what, exc)
            raise FetchError(f"Could not fetch {what}: {exc}") from exc

    def weekly_windows(self, host_id: str) -> list[WeeklyAvailabilityWindow]:
        return self.fetch(
            f"availability for host {host_id}",
            lambda: self.repository.list_weekly_availability(host_id),
        )

    def existing_bookings(self, host_id: str, target_date: date) -> list[Booking]:
        """Active bookings that can overlap ``target_date``.

        The query starts ``max_booking_minutes`` before midnight so a booking
        that began the previous evening and runs into the day is included.
        """
        range_start = start_of_day(target_date) - timedelta(
            minutes=self.config.max_booking_minutes
        )
        range_end = start_of_next_day(target_date)
        return self.fetch(
            f"bookings for host {host_id} on {target_date.isoformat()}",
            lambda: self.repository.list_bookings(host_id, range_start, range_end),
        )

    def candidate_slots(
        self, host_id: str, target_date: date, duration_minutes: int
    ) -> list[CandidateSlot]:
        """Slots the host offers on ``target_date``, ignoring bookings.

        Dates outside the horizon return an empty list without touching
        the store.
        """
        self.validate_duration(duration_minutes)
        now = self.now()
        if not is_within_horizon(target_date, now, self.config.lookahead_days):
            logger.debug("Date %s outside booking horizon", target_date.isoformat())
            return []

        windows = windows_for_date(self.weekly_windows(host_id), target_date)
        if not windows:
            return []

        slots = generate_slots(
            target_date, duration_minutes, windows, self.config.slot_step_minutes
        )
        if target_date == now.date():
            slots = drop_started_slots(slots, now)
        return slots

    def available_slots(
        self, host_id: str, target_date: date, duration_minutes: int
    ) -> list[CandidateSlot]:
        """Candidate slots minus those that conflict with active bookings."""
        candidates = self.candidate_slots(host_id, target_date, duration_minutes)
        if not candidates:
            return []
        bookings = self.existing_bookings(host_id, target_date)
        return filter_conflicting_slots(candidates, bookings)

    def bookable_dates(self, host_id: str, limit: Optional[int] = None) -> list[date]:
        windows = self.weekly_windows(host_id)
        return bookable_dates(self.now(), windows, self.config.lookahead_days, limit)
