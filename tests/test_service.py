"""Tests for slot listing through BookingService."""

from datetime import timedelta

import pytest

from meetslot.errors import FetchError, MeetingTypeInactiveOrNotFound, ValidationError
from meetslot.schemas.booking_schema import BookingStatus, NewBooking
from meetslot.service import BookingService
from meetslot.store.memory import InMemoryStore
from meetslot.utils import day_of_week
from tests.conftest import (
    HOST,
    NEXT_MONDAY,
    NEXT_TUESDAY,
    OTHER_HOST,
    TODAY,
    at,
    fixed_clock,
    starts,
)


class RecordingStore(InMemoryStore):
    """Counts engine-facing reads."""

    def __init__(self):
        super().__init__()
        self.reads = []

    def list_weekly_availability(self, host_id):
        self.reads.append("availability")
        return super().list_weekly_availability(host_id)

    def list_bookings(self, host_id, range_start, range_end, **kwargs):
        self.reads.append(("bookings", range_start, range_end))
        return super().list_bookings(host_id, range_start, range_end, **kwargs)


class UnreachableStore(InMemoryStore):
    def list_weekly_availability(self, host_id):
        raise ConnectionError("database unreachable")


class FailingBookingsStore(InMemoryStore):
    def list_bookings(self, host_id, range_start, range_end, **kwargs):
        raise FetchError("bookings query timed out")


def _book(store, start, minutes=30, host_id=HOST, status=BookingStatus.CONFIRMED):
    return store.create_booking(
        NewBooking(
            host_id=host_id,
            guest_name="Existing Guest",
            guest_email="existing@example.com",
            title="Intro Call",
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
            status=status,
        )
    )


class TestComputeAvailableSlots:
    def test_no_bookings_returns_all_candidates(self, store, service):
        store.add_availability_window(HOST, 1, "09:00", "10:00")
        slots = service.compute_available_slots(HOST, NEXT_MONDAY, 30)
        assert starts(slots) == ["09:00", "09:15", "09:30"]

    def test_existing_booking_removes_overlapping_slots(self, store, service):
        store.add_availability_window(HOST, 1, "08:00", "10:00")
        _book(store, at(NEXT_MONDAY, "09:00"), 45)
        slots = service.compute_available_slots(HOST, NEXT_MONDAY, 30)
        assert starts(slots) == ["08:00", "08:15", "08:30"]

    def test_cancelled_booking_does_not_block(self, store, service):
        store.add_availability_window(HOST, 1, "09:00", "10:00")
        _book(store, at(NEXT_MONDAY, "09:00"), 60, status=BookingStatus.CANCELLED)
        slots = service.compute_available_slots(HOST, NEXT_MONDAY, 30)
        assert starts(slots) == ["09:00", "09:15", "09:30"]

    def test_other_hosts_bookings_are_ignored(self, store, service):
        store.add_availability_window(HOST, 1, "09:00", "10:00")
        _book(store, at(NEXT_MONDAY, "09:00"), 60, host_id=OTHER_HOST)
        assert len(service.compute_available_slots(HOST, NEXT_MONDAY, 30)) == 3

    def test_other_hosts_windows_are_ignored(self, store, service):
        store.add_availability_window(OTHER_HOST, 1, "09:00", "10:00")
        assert service.compute_available_slots(HOST, NEXT_MONDAY, 30) == []

    def test_booking_from_previous_evening_blocks_early_slots(self, store, service):
        store.add_availability_window(HOST, 2, "00:00", "02:00")
        _book(store, at(NEXT_MONDAY, "23:30"), 60)
        slots = service.compute_available_slots(HOST, NEXT_TUESDAY, 30)
        assert starts(slots)[:2] == ["00:30", "00:45"]

    def test_slots_are_sorted_and_distinct(self, store, service):
        store.add_availability_window(HOST, 1, "13:00", "15:00")
        store.add_availability_window(HOST, 1, "09:00", "11:00")
        store.add_availability_window(HOST, 1, "10:00", "12:00")
        slots = service.compute_available_slots(HOST, NEXT_MONDAY, 60)
        assert [s.start_time for s in slots] == sorted({s.start_time for s in slots})


class TestDateBoundaries:
    def test_today_drops_started_slots(self, store, service):
        store.add_availability_window(HOST, 1, "07:00", "09:00")
        slots = service.compute_available_slots(HOST, TODAY, 30)
        assert starts(slots) == ["07:30", "07:45", "08:00", "08:15", "08:30"]

    def test_past_date_returns_empty_without_reads(self):
        store = RecordingStore()
        store.add_availability_window(HOST, 0, "09:00", "17:00")
        service = BookingService(store, clock=fixed_clock)
        assert service.compute_available_slots(HOST, TODAY - timedelta(days=1), 30) == []
        assert store.reads == []

    def test_date_past_horizon_returns_empty_without_reads(self):
        store = RecordingStore()
        for day in range(7):
            store.add_availability_window(HOST, day, "09:00", "17:00")
        service = BookingService(store, clock=fixed_clock)
        assert service.compute_available_slots(HOST, TODAY + timedelta(days=61), 30) == []
        assert store.reads == []

    def test_last_day_of_horizon_is_bookable(self, store, service):
        last = TODAY + timedelta(days=60)
        store.add_availability_window(HOST, day_of_week(last), "09:00", "10:00")
        assert len(service.compute_available_slots(HOST, last, 30)) == 3

    def test_bookings_fetch_range_covers_previous_evening(self):
        store = RecordingStore()
        store.add_availability_window(HOST, 1, "09:00", "10:00")
        service = BookingService(store, clock=fixed_clock)
        service.compute_available_slots(HOST, NEXT_MONDAY, 30)
        _, range_start, range_end = store.reads[-1]
        assert range_start == at(NEXT_MONDAY, "00:00") - timedelta(minutes=480)
        assert range_end == at(NEXT_TUESDAY, "00:00")

    def test_no_window_skips_bookings_read(self):
        store = RecordingStore()
        store.add_availability_window(HOST, 3, "09:00", "10:00")
        service = BookingService(store, clock=fixed_clock)
        assert service.compute_available_slots(HOST, NEXT_MONDAY, 30) == []
        assert store.reads == ["availability"]


class TestInvalidDuration:
    @pytest.mark.parametrize("duration", [0, -30, 481])
    def test_out_of_range_duration_rejected(self, service, duration):
        with pytest.raises(ValidationError):
            service.compute_available_slots(HOST, NEXT_MONDAY, duration)

    def test_non_integer_duration_rejected(self, service):
        with pytest.raises(ValidationError, match="whole number"):
            service.compute_available_slots(HOST, NEXT_MONDAY, 30.5)


class TestFetchFailures:
    def test_connection_error_surfaces_as_fetch_error(self):
        service = BookingService(UnreachableStore(), clock=fixed_clock)
        with pytest.raises(FetchError, match="database unreachable"):
            service.compute_available_slots(HOST, NEXT_MONDAY, 30)

    def test_bookings_failure_is_not_reported_as_no_slots(self):
        store = FailingBookingsStore()
        store.add_availability_window(HOST, 1, "09:00", "10:00")
        service = BookingService(store, clock=fixed_clock)
        with pytest.raises(FetchError):
            service.compute_available_slots(HOST, NEXT_MONDAY, 30)


class TestMeetingTypeSlots:
    def test_uses_meeting_type_duration(self, store, service, host_calendar):
        store.add_availability_window(HOST, 1, "09:00", "10:00")
        deep_dive = host_calendar.create_meeting_type(HOST, "Deep Dive", 45)
        slots = service.compute_slots_for_meeting_type(HOST, deep_dive.id, NEXT_MONDAY)
        assert starts(slots) == ["09:00", "09:15"]

    def test_inactive_meeting_type_rejected(self, service, host_calendar, intro_call):
        host_calendar.set_meeting_type_active(HOST, intro_call.id, False)
        with pytest.raises(MeetingTypeInactiveOrNotFound):
            service.compute_slots_for_meeting_type(HOST, intro_call.id, NEXT_MONDAY)

    def test_other_hosts_meeting_type_rejected(self, service, intro_call):
        with pytest.raises(MeetingTypeInactiveOrNotFound):
            service.compute_slots_for_meeting_type(OTHER_HOST, intro_call.id, NEXT_MONDAY)


class TestBookableDates:
    def test_lists_weekdays_with_windows(self, store, service):
        store.add_availability_window(HOST, 2, "09:00", "17:00")
        dates = service.list_bookable_dates(HOST, limit=3)
        assert dates == [
            NEXT_TUESDAY - timedelta(days=7),
            NEXT_TUESDAY,
            NEXT_TUESDAY + timedelta(days=7),
        ]

    def test_empty_without_windows(self, service):
        assert service.list_bookable_dates(HOST) == []
