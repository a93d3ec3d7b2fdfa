"""
Weekly recurrence: copying a window onto a weekday across the horizon and
removing a whole weekly series at once.
"""

from __future__ import annotations

import logging
from typing import List

from .horizon import HorizonBounds
from .models import SeriesCopied, SeriesDeleted, TimeSlot
from .overlap import ConflictDetector
from .store import SlotStore

logger = logging.getLogger(__name__)


class RecurrencePropagator:
    """
    Propagates a slot's window to the same weekday on every schedulable week.

    Algorithm for ``copy_to_weekday``:
    1. Collect every date in the horizon that falls on the target weekday
    2. Skip the source slot's own date
    3. Classify each remaining date, first match wins:
       identical window already there, overlapping window, or free
    4. Insert clones for all free dates in one store transition
    """

    def __init__(self, store: SlotStore, horizon: HorizonBounds):
        self.store = store
        self.horizon = horizon
        self.detector = ConflictDetector(store)

    def copy_to_weekday(self, source: TimeSlot, weekday: int) -> SeriesCopied:
        """
        Clone ``source`` onto every remaining ``weekday`` in the horizon.

        Args:
            source: Slot whose window and enabled services are copied
            weekday: Target weekday, 0=Monday .. 6=Sunday

        Returns:
            SeriesCopied with the created slots and skip counts
        """
        target_dates = [
            date for date in self.horizon.weekday_dates(weekday)
            if date != source.date
        ]

        new_slots: List[TimeSlot] = []
        skipped_existing = 0
        skipped_overlap = 0

        for date in target_dates:
            if self.detector.has_identical(date, source.start_minutes, source.end_minutes):
                skipped_existing += 1
                continue

            if self.detector.has_overlap(date, source.start_minutes, source.end_minutes):
                skipped_overlap += 1
                continue

            new_slots.append(
                TimeSlot(
                    id=self.store.new_id(),
                    date=date,
                    start_minutes=source.start_minutes,
                    end_minutes=source.end_minutes,
                    enabled_service_ids=frozenset(source.enabled_service_ids),
                )
            )

        # Target dates are distinct, so the clones cannot collide with each other.
        self.store.add_many(new_slots)

        result = SeriesCopied(
            weekday=weekday,
            created_slots=tuple(new_slots),
            skipped_existing=skipped_existing,
            skipped_overlap=skipped_overlap,
        )
        logger.debug(
            "Copy of %s to weekday %d: created=%d existing=%d overlap=%d",
            source.id,
            weekday,
            result.created,
            skipped_existing,
            skipped_overlap,
        )
        return result

    def series_of(self, source: TimeSlot) -> List[TimeSlot]:
        """
        The weekly series ``source`` belongs to: every slot on the same weekday
        with the identical [start, end) window, ordered by date.
        """
        members = [
            slot for slot in self.store
            if slot.weekday == source.weekday and slot.same_window(source)
        ]
        return sorted(members, key=lambda s: s.date)

    def delete_series(self, source: TimeSlot) -> SeriesDeleted:
        """Remove the whole series of ``source`` in one store transition."""
        removed = self.store.remove_many(slot.id for slot in self.series_of(source))

        return SeriesDeleted(
            weekday=source.weekday,
            dates=tuple(slot.date for slot in removed),
            slot_ids=tuple(slot.id for slot in removed),
        )
