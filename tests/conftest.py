"""Shared test fixtures and helpers."""

from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from meetslot.host import HostCalendar
from meetslot.schemas.availability_schema import CandidateSlot, WeeklyAvailabilityWindow
from meetslot.schemas.booking_schema import Booking, BookingStatus
from meetslot.service import BookingService
from meetslot.store.memory import InMemoryStore

# Monday 2026-10-19, 07:30 local
NOW = datetime(2026, 10, 19, 7, 30)
TODAY = NOW.date()
NEXT_MONDAY = date(2026, 10, 26)
NEXT_TUESDAY = date(2026, 10, 27)
HOST = "host-1"
OTHER_HOST = "host-2"


def fixed_clock() -> datetime:
    return NOW


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def service(store):
    return BookingService(store, clock=fixed_clock)


@pytest.fixture
def host_calendar(store):
    return HostCalendar(store, clock=fixed_clock)


@pytest.fixture
def intro_call(host_calendar):
    """Active 30-minute meeting type for HOST."""
    return host_calendar.create_meeting_type(HOST, "Intro Call", 30)


def make_window(
    day_of_week: int,
    start_time: str,
    end_time: str,
    host_id: str = HOST,
    window_id: Optional[str] = None,
) -> WeeklyAvailabilityWindow:
    """Helper to create a WeeklyAvailabilityWindow without a store."""
    return WeeklyAvailabilityWindow(
        id=window_id or f"AV-{day_of_week}-{start_time}",
        host_id=host_id,
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
    )


def make_booking(
    start: datetime,
    minutes: int = 30,
    status: BookingStatus = BookingStatus.CONFIRMED,
    host_id: str = HOST,
    booking_id: str = "BK-TEST",
) -> Booking:
    """Helper to create a Booking record with sensible defaults."""
    return Booking(
        id=booking_id,
        host_id=host_id,
        guest_name="Test Guest",
        guest_email="guest@example.com",
        title="Intro Call",
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        status=status,
    )


def make_slot(start: datetime, minutes: int = 30) -> CandidateSlot:
    return CandidateSlot(start_time=start, end_time=start + timedelta(minutes=minutes))


def at(day: date, hhmm: str) -> datetime:
    """Combine a date with an HH:MM string."""
    hours, minutes = hhmm.split(":")
    return datetime(day.year, day.month, day.day, int(hours), int(minutes))


def starts(slots: list[CandidateSlot]) -> list[str]:
    """Render slot start times as HH:MM for compact assertions."""
    return [s.start_time.strftime("%H:%M") for s in slots]
