"""
Offline console demo. Resolves slots and books meetings against an
in-memory store. No database, no network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario race
    python console_demo.py --date 2026-11-02 --duration 45
"""

import argparse
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Optional

from meetslot.config import settings
from meetslot.host import BookingView, HostCalendar
from meetslot.schemas.availability_schema import CandidateSlot
from meetslot.service import BookingService
from meetslot.store.memory import InMemoryStore

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_HOST = "host-demo"


class ConsoleSession:
    """Seeds a demo host and walks through the guest booking flow."""

    WEEKLY_HOURS: list[tuple[int, str, str]] = [
        (1, "09:00", "12:00"), (1, "13:00", "17:00"),
        (2, "09:00", "17:00"),
        (3, "09:00", "12:00"), (3, "13:00", "17:00"),
        (4, "09:00", "17:00"),
        (5, "09:00", "13:00"),
    ]

    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now or datetime.now().replace(second=0, microsecond=0)
        self.store = InMemoryStore()
        self.host = HostCalendar(self.store, clock=lambda: self.now)
        self.service = BookingService(self.store, clock=lambda: self.now)

        for day, start, end in self.WEEKLY_HOURS:
            self.host.add_window(DEMO_HOST, day, start, end)
        self.intro_call = self.host.create_meeting_type(
            DEMO_HOST, "Intro Call", 30, description="A quick first conversation"
        )
        self.deep_dive = self.host.create_meeting_type(DEMO_HOST, "Deep Dive", 90)

    def say(self, text: str) -> None:
        print(f"{GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.service_name.upper()} - {title}{RESET}")
        print(f"{BOLD}  Now: {self.now:%A %Y-%m-%d %H:%M}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def first_bookable_date(self) -> date:
        dates = self.service.list_bookable_dates(DEMO_HOST, limit=2)
        if not dates:
            raise SystemExit("Demo host has no bookable dates.")
        # skip today so the demo always shows a full day
        return dates[1] if dates[0] == self.now.date() and len(dates) > 1 else dates[0]

    def show_slots(self, target: date, duration: int) -> list[CandidateSlot]:
        slots = self.service.compute_available_slots(DEMO_HOST, target, duration)
        self.say(f"Available {duration}-minute slots on {target:%A, %B} {target.day}:")
        if not slots:
            print(f"  {YELLOW}No available time slots for this day.{RESET}")
        for slot in slots:
            print(f"  {BLUE}{slot.start_time:%H:%M}{RESET} - {slot.end_time:%H:%M}")
        return slots

    def run(self, target: Optional[date] = None, duration: int = 30) -> None:
        self._banner("Booking Demo")
        dates = self.service.list_bookable_dates(DEMO_HOST, limit=5)
        self.system_log(f"Next bookable dates: {[d.isoformat() for d in dates]}")

        target = target or self.first_bookable_date()
        slots = self.show_slots(target, duration)
        if not slots:
            return

        meeting_type = self.intro_call if duration == 30 else self.host.create_meeting_type(
            DEMO_HOST, f"{duration} Minute Meeting", duration
        )
        chosen = slots[len(slots) // 2]
        self.system_log(f"Guest picks {chosen.start_time:%H:%M}")
        result = self.service.submit_booking(
            DEMO_HOST, meeting_type.id, chosen, "Ada Lovelace", "ada@example.com",
            notes="Looking forward to it",
        )
        colour = GREEN if result.success else RED
        print(f"{colour}{result.message}{RESET}")

        print()
        self.show_slots(target, duration)
        stats = self.host.dashboard_stats(DEMO_HOST)
        self.system_log(f"Dashboard: {stats.model_dump()}")

    def run_race(self) -> None:
        self._banner("Concurrent Booking Race")
        target = self.first_bookable_date()
        slot = self.service.compute_available_slots(DEMO_HOST, target, 30)[0]
        self.system_log(f"Two guests submit {slot.start_time:%Y-%m-%d %H:%M} at once")

        guests = [("Grace Hopper", "grace@example.com"), ("Alan Turing", "alan@example.com")]
        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(
                lambda guest: self.service.submit_booking(
                    DEMO_HOST, self.intro_call.id, slot, guest[0], guest[1]
                ),
                guests,
            ))

        for (name, _), result in zip(guests, results):
            colour = GREEN if result.success else YELLOW
            outcome = result.booking_id if result.success else result.error.value
            print(f"  {colour}{name}: {outcome}{RESET}")

        upcoming = self.host.list_bookings(DEMO_HOST, BookingView.UPCOMING)
        self.system_log(f"Upcoming bookings: {len(upcoming)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline booking demo")
    parser.add_argument(
        "--scenario",
        choices=["booking", "race"],
        default="booking",
        help="Which walkthrough to run",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Date to list slots for (YYYY-MM-DD); defaults to the next bookable day",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=30,
        help="Meeting length in minutes",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario == "race":
        session.run_race()
    else:
        session.run(args.date, args.duration)


if __name__ == "__main__":
    main()
