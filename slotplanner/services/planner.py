"""
Application service for editing a practitioner's availability.

The service wires the domain components to their collaborators (a clock and a
service catalog), keeps the navigation state of the visible week, and
notifies subscribers after each applied mutation. Persistence and user
messaging stay with those subscribers.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Protocol

from pendulum import Date

from ..domain.capacity import CapacityEstimator
from ..domain.editor import SlotEditor
from ..domain.horizon import HorizonBounds
from ..domain.models import (
    DEFAULT_RULES,
    CapacityLine,
    Outcome,
    Rejected,
    RejectionReason,
    SchedulingRules,
    ServiceCatalog,
    TimeSlot,
)
from ..domain.store import IdGenerator, SlotStore

logger = logging.getLogger(__name__)

OutcomeListener = Callable[[Outcome], None]


class ClockProtocol(Protocol):
    """Protocol describing the clock behaviour needed by the service."""

    def today(self) -> Date:
        """Return the current local date."""


class AvailabilityPlannerService:
    """
    Orchestrates slot editing for one operator.

    Dependency inversion toward a clock protocol keeps the horizon testable
    with a fixed date. The store is created here unless one is injected.
    """

    def __init__(
        self,
        clock: ClockProtocol,
        catalog: ServiceCatalog,
        rules: SchedulingRules = DEFAULT_RULES,
        store: SlotStore | None = None,
        id_generator: IdGenerator | None = None,
    ) -> None:
        self._clock = clock
        self.rules = rules
        self.catalog = catalog
        self.store = store if store is not None else SlotStore(id_generator=id_generator)
        self.horizon = HorizonBounds(clock.today(), rules)
        self.editor = SlotEditor(self.store, catalog, self.horizon, rules)
        self.capacity = CapacityEstimator(catalog)
        self._listeners: List[OutcomeListener] = []

    # ── Subscriptions ────────────────────────────────────────────

    def subscribe(self, listener: OutcomeListener) -> None:
        """Register a callback invoked with every successful outcome."""
        self._listeners.append(listener)

    def _publish(self, operation: str, outcome: Outcome | None) -> Outcome | None:
        if outcome is None:
            return None

        if isinstance(outcome, Rejected):
            logger.info("%s rejected (%s): %s", operation, outcome.reason.value, outcome.message)
            return outcome

        logger.info("%s applied: %s", operation, outcome)
        for listener in self._listeners:
            listener(outcome)
        return outcome

    # ── Week navigation ──────────────────────────────────────────

    @property
    def week_start(self) -> Date:
        return self.editor.week_start

    def week_dates(self) -> List[Date]:
        return self.horizon.week_dates(self.editor.week_start)

    def next_week(self) -> Date:
        return self.editor.show_week(self.horizon.next_week(self.editor.week_start))

    def prev_week(self) -> Date:
        return self.editor.show_week(self.horizon.prev_week(self.editor.week_start))

    def go_today(self) -> Date:
        return self.editor.show_week(self.horizon.go_today())

    # ── Creation ─────────────────────────────────────────────────

    def begin_drag(self, day_index: int, minutes: float) -> bool:
        return self.editor.begin_drag(day_index, minutes)

    def update_drag(self, day_index: int, minutes: float) -> bool:
        return self.editor.update_drag(day_index, minutes)

    def end_drag(self) -> Outcome:
        return self._publish("create", self.editor.end_drag())

    def leave_region(self) -> Outcome | None:
        return self._publish("create", self.editor.leave_region())

    def create_window(self, day_index: int, start_minutes: int, end_minutes: int) -> Outcome:
        """
        Drag from ``start_minutes`` to ``end_minutes`` in one call.

        Any drag already in progress is discarded first. Starting inside an
        existing window is rejected as an overlap.
        """
        self.editor.cancel_drag()
        if not self.editor.begin_drag(day_index, start_minutes):
            return self._publish(
                "create",
                Rejected(RejectionReason.OVERLAP, "Overlaps with an existing availability window"),
            )
        self.editor.update_drag(day_index, end_minutes)
        return self.end_drag()

    # ── Editing the active slot ──────────────────────────────────

    def select(self, slot_id: str) -> TimeSlot | None:
        return self.editor.select(slot_id)

    def nudge_start(self, direction: int) -> Outcome:
        return self._publish("nudge_start", self.editor.nudge_start(direction))

    def nudge_end(self, direction: int) -> Outcome:
        return self._publish("nudge_end", self.editor.nudge_end(direction))

    def toggle_service(self, service_id: str, slot_id: str | None = None) -> Outcome:
        return self._publish("toggle_service", self.editor.toggle_service(service_id, slot_id))

    def delete_slot(self, slot_id: str | None = None) -> Outcome:
        return self._publish("delete", self.editor.delete_slot(slot_id))

    def delete_series(self, slot_id: str | None = None) -> Outcome:
        return self._publish("delete_series", self.editor.delete_series(slot_id))

    def copy_to_weekday(self, weekday: int, slot_id: str | None = None) -> Outcome:
        return self._publish("copy_to_weekday", self.editor.copy_to_weekday(weekday, slot_id))

    # ── Read side ────────────────────────────────────────────────

    def capacity_lines(self, slot: TimeSlot) -> List[CapacityLine]:
        return self.capacity.capacity_lines(slot)

    def slots_for_week(self) -> List[TimeSlot]:
        """Slots of the visible week, ordered by date then start."""
        slots: List[TimeSlot] = []
        for date in self.week_dates():
            slots.extend(self.store.slots_for_date(date))
        return slots

    def load_slots(self, slots: Iterable[TimeSlot]) -> int:
        """
        Add pre-built slots (e.g. sample data) that respect the store invariants.

        Slots with an id already in use, beyond the horizon, outside the day
        window, shorter than the minimum duration or overlapping another
        window are skipped.

        Returns:
            Number of slots added
        """
        rules = self.rules
        accepted: List[TimeSlot] = []
        for slot in slots:
            if slot.id in self.store or any(other.id == slot.id for other in accepted):
                logger.warning("Skipping %s: id already in use", slot.id)
                continue
            if self.horizon.is_beyond(slot.date):
                logger.debug("Skipping %s: beyond horizon", slot.id)
                continue
            if slot.start_minutes < rules.day_start or slot.end_minutes > rules.day_end:
                logger.warning("Skipping %s: outside the day window", slot.id)
                continue
            if slot.duration_minutes < rules.min_slot_duration:
                logger.warning("Skipping %s: shorter than %d minutes", slot.id, rules.min_slot_duration)
                continue
            conflict = self.editor.detector.has_overlap(
                slot.date, slot.start_minutes, slot.end_minutes
            ) or any(
                other.date == slot.date and other.overlaps(slot.start_minutes, slot.end_minutes)
                for other in accepted
            )
            if conflict:
                logger.warning("Skipping %s: overlaps an existing window", slot.id)
                continue
            accepted.append(slot)

        self.store.add_many(accepted)
        return len(accepted)
