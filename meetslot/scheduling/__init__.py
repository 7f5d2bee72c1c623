from meetslot.scheduling.committer import BookingCommitter
from meetslot.scheduling.overlap import (
    filter_conflicting_slots,
    find_conflicts,
    intervals_conflict,
)
from meetslot.scheduling.resolver import SlotResolver
from meetslot.scheduling.slot_generator import generate_slots, windows_for_date

__all__ = [
    "BookingCommitter",
    "SlotResolver",
    "generate_slots",
    "windows_for_date",
    "filter_conflicting_slots",
    "find_conflicts",
    "intervals_conflict",
]
