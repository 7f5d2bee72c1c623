"""Tests for the date boundary and lookahead policy."""

from datetime import date, timedelta

from meetslot.scheduling.date_policy import (
    bookable_dates,
    drop_started_slots,
    has_availability,
    is_bookable_date,
    is_within_horizon,
    last_bookable_date,
)
from tests.conftest import NOW, TODAY, at, make_slot, make_window, starts


class TestHorizon:
    def test_yesterday_is_out_of_range(self):
        assert not is_within_horizon(TODAY - timedelta(days=1), NOW, 60)

    def test_today_is_in_range(self):
        assert is_within_horizon(TODAY, NOW, 60)

    def test_sixtieth_day_is_in_range(self):
        assert is_within_horizon(TODAY + timedelta(days=60), NOW, 60)

    def test_sixty_first_day_is_out_of_range(self):
        assert not is_within_horizon(TODAY + timedelta(days=61), NOW, 60)

    def test_zero_lookahead_allows_only_today(self):
        assert is_within_horizon(TODAY, NOW, 0)
        assert not is_within_horizon(TODAY + timedelta(days=1), NOW, 0)

    def test_default_lookahead_from_config(self):
        assert last_bookable_date(NOW) == TODAY + timedelta(days=60)


class TestBookableDate:
    def test_requires_matching_window(self):
        windows = [make_window(2, "09:00", "17:00")]  # Tuesdays only
        assert not is_bookable_date(date(2026, 10, 26), NOW, windows, 60)
        assert is_bookable_date(date(2026, 10, 27), NOW, windows, 60)

    def test_has_availability_uses_sunday_zero(self):
        sunday = date(2026, 10, 25)
        assert has_availability(sunday, [make_window(0, "10:00", "12:00")])
        assert not has_availability(sunday, [make_window(6, "10:00", "12:00")])

    def test_past_date_with_window_is_not_bookable(self):
        windows = [make_window(d, "09:00", "17:00") for d in range(7)]
        assert not is_bookable_date(TODAY - timedelta(days=1), NOW, windows, 60)


class TestBookableDates:
    def test_lists_matching_weekdays_through_horizon(self):
        windows = [make_window(1, "09:00", "17:00")]  # Mondays
        dates = bookable_dates(NOW, windows, lookahead_days=21)
        assert dates == [
            TODAY,
            TODAY + timedelta(days=7),
            TODAY + timedelta(days=14),
            TODAY + timedelta(days=21),
        ]

    def test_limit(self):
        windows = [make_window(d, "09:00", "17:00") for d in range(7)]
        assert len(bookable_dates(NOW, windows, lookahead_days=60, limit=5)) == 5

    def test_zero_limit(self):
        windows = [make_window(1, "09:00", "17:00")]
        assert bookable_dates(NOW, windows, lookahead_days=60, limit=0) == []

    def test_no_windows(self):
        assert bookable_dates(NOW, [], lookahead_days=60) == []


class TestDropStartedSlots:
    def test_slots_before_now_are_removed(self):
        slots = [make_slot(at(TODAY, hhmm)) for hhmm in ("07:00", "07:15", "07:30", "07:45")]
        assert starts(drop_started_slots(slots, NOW)) == ["07:30", "07:45"]
