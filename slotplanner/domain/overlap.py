"""
Interval conflict detection between candidate windows and stored slots.
"""

from __future__ import annotations

from .models import TimeSlot, as_date
from .store import SlotStore


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open [start, end) overlap: touching intervals do not conflict."""
    return start1 < end2 and end1 > start2


class ConflictDetector:
    """
    Read-only overlap predicate over a slot store.

    Only slots on the same date are compared.
    """

    def __init__(self, store: SlotStore):
        self.store = store

    def has_overlap(
        self,
        date,
        start_minutes: int,
        end_minutes: int,
        exclude_id: str | None = None,
    ) -> bool:
        """
        Check whether [start_minutes, end_minutes) intersects any slot on ``date``.

        Args:
            date: Calendar date to check
            start_minutes: Candidate start, minutes since midnight
            end_minutes: Candidate end, minutes since midnight
            exclude_id: Slot to ignore, so a slot can be tested against all
                others while it is being resized

        Returns:
            True if at least one other slot on that date overlaps
        """
        return self.find_conflict(date, start_minutes, end_minutes, exclude_id) is not None

    def find_conflict(
        self,
        date,
        start_minutes: int,
        end_minutes: int,
        exclude_id: str | None = None,
    ) -> TimeSlot | None:
        """Return the first conflicting slot, or None."""
        target = as_date(date)
        for slot in self.store:
            if slot.date != target:
                continue
            if exclude_id is not None and slot.id == exclude_id:
                continue
            if intervals_overlap(start_minutes, end_minutes, slot.start_minutes, slot.end_minutes):
                return slot
        return None

    def has_identical(self, date, start_minutes: int, end_minutes: int) -> bool:
        """True if a slot on ``date`` covers exactly [start_minutes, end_minutes)."""
        target = as_date(date)
        return any(
            slot.date == target
            and slot.start_minutes == start_minutes
            and slot.end_minutes == end_minutes
            for slot in self.store
        )
