"""
Interactive slot editing: drag-to-create, boundary nudges, service toggles
and deletion, with an active-slot selection.

Pointer events from any UI toolkit map onto ``begin_drag``, ``update_drag``,
``end_drag`` and ``leave_region``. Every mutating call returns an outcome and
leaves the store untouched when it rejects.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Tuple

from pendulum import Date

from .horizon import HorizonBounds
from .models import (
    DEFAULT_RULES,
    Created,
    Deleted,
    Outcome,
    Rejected,
    RejectionReason,
    SchedulingRules,
    SeriesDeleted,
    ServiceCatalog,
    TimeSlot,
    Updated,
)
from .overlap import ConflictDetector
from .recurrence import RecurrencePropagator
from .store import SlotStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DragState:
    """An in-progress drag, locked to the day column and date it started on."""
    day_index: int
    date: Date
    anchor_minutes: int
    cursor_minutes: int

    def span(self) -> Tuple[int, int]:
        return (
            min(self.anchor_minutes, self.cursor_minutes),
            max(self.anchor_minutes, self.cursor_minutes),
        )


class SlotEditor:
    """
    Single-editor state machine over a slot store.

    States are Idle (``drag is None``) and Dragging (``drag`` holds a
    ``DragState``). Day indexes are 0..6 within the week set by ``show_week``.
    """

    def __init__(
        self,
        store: SlotStore,
        catalog: ServiceCatalog,
        horizon: HorizonBounds,
        rules: SchedulingRules = DEFAULT_RULES,
    ):
        self.store = store
        self.catalog = catalog
        self.horizon = horizon
        self.rules = rules
        self.detector = ConflictDetector(store)
        self.propagator = RecurrencePropagator(store, horizon)

        self.week_start: Date = horizon.min_week_start
        self.drag: DragState | None = None
        self.active_slot_id: str | None = None

    # ── Selection and navigation ─────────────────────────────────

    @property
    def active_slot(self) -> TimeSlot | None:
        return self.store.get(self.active_slot_id)

    @property
    def is_dragging(self) -> bool:
        return self.drag is not None

    def select(self, slot_id: str) -> TimeSlot | None:
        slot = self.store.get(slot_id)
        self.active_slot_id = slot.id if slot else None
        return slot

    def clear_selection(self) -> None:
        self.active_slot_id = None

    def show_week(self, week_start) -> Date:
        """Set the visible week, clamped to the navigable range."""
        self.week_start = self.horizon.clamp_week_start(week_start)
        return self.week_start

    def date_for_day(self, day_index: int) -> Date:
        if not 0 <= day_index <= 6:
            raise ValueError(f"day_index must be between 0 and 6, got {day_index}")
        return self.week_start.add(days=day_index)

    def slot_at(self, day_index: int, minutes: int) -> TimeSlot | None:
        """The slot covering ``minutes`` in a day column, if any."""
        for slot in self.store.slots_for_date(self.date_for_day(day_index)):
            if slot.start_minutes <= minutes < slot.end_minutes:
                return slot
        return None

    # ── Drag to create ───────────────────────────────────────────

    def begin_drag(self, day_index: int, minutes: float) -> bool:
        """
        Pointer down on a day column.

        Pressing on an existing slot selects it instead of starting a drag.

        Returns:
            True if the editor is now dragging
        """
        if self.drag is not None:
            return False

        existing = self.slot_at(day_index, int(minutes))
        if existing is not None:
            self.active_slot_id = existing.id
            return False

        snapped = self.rules.snap(minutes)
        self.drag = DragState(
            day_index=day_index,
            date=self.date_for_day(day_index),
            anchor_minutes=snapped,
            cursor_minutes=snapped,
        )
        return True

    def update_drag(self, day_index: int, minutes: float) -> bool:
        """Pointer moved; ignored unless dragging within the origin column of the origin week."""
        if self.drag is None or self.drag.day_index != day_index:
            return False
        if self.date_for_day(day_index) != self.drag.date:
            return False
        self.drag = dataclasses.replace(self.drag, cursor_minutes=self.rules.snap(minutes))
        return True

    def drag_preview(self) -> Tuple[int, int, int] | None:
        """(day_index, start, end) of the pending window while dragging."""
        if self.drag is None:
            return None
        start, end = self.drag.span()
        return self.drag.day_index, start, end

    def end_drag(self) -> Outcome:
        """
        Pointer released: commit the dragged window.

        Spans shorter than the minimum duration become a default-length window
        from the drag start. The editor returns to Idle whether or not the
        commit succeeds.
        """
        if self.drag is None:
            return Rejected(RejectionReason.NOT_DRAGGING, "No drag in progress")

        drag, self.drag = self.drag, None
        date = drag.date
        start, end = drag.span()

        if end - start < self.rules.min_slot_duration:
            end = min(start + self.rules.default_slot_duration, self.rules.day_end)

        if self.horizon.is_beyond(date):
            logger.info("Rejected new window on %s: beyond %s", date, self.horizon.max_date)
            return Rejected(
                RejectionReason.BEYOND_HORIZON,
                f"Cannot add availability more than {self.rules.availability_days} days ahead",
            )

        if end - start < self.rules.min_slot_duration:
            # Only reachable when the drag starts at the very end of the day.
            return Rejected(
                RejectionReason.BELOW_MIN_DURATION,
                f"Windows must be at least {self.rules.min_slot_duration} minutes long",
            )

        if self.detector.has_overlap(date, start, end):
            logger.info("Rejected new window on %s %d-%d: overlap", date, start, end)
            return Rejected(
                RejectionReason.OVERLAP, "Overlaps with an existing availability window"
            )

        slot = self.store.add(
            TimeSlot(
                id=self.store.new_id(),
                date=date,
                start_minutes=start,
                end_minutes=end,
                enabled_service_ids=self.catalog.ids(),
            )
        )
        self.active_slot_id = slot.id
        return Created(slot)

    def leave_region(self) -> Outcome | None:
        """
        Pointer left the tracked area.

        With ``commit_on_leave`` (the default) a running drag is committed as if
        released; otherwise it is cancelled. Returns None when not dragging.
        """
        if self.drag is None:
            return None
        if self.rules.commit_on_leave:
            return self.end_drag()
        self.cancel_drag()
        return Rejected(RejectionReason.DRAG_CANCELLED, "Drag cancelled")

    def cancel_drag(self) -> bool:
        """Drop a running drag without committing. Returns True if one was running."""
        was_dragging = self.drag is not None
        self.drag = None
        return was_dragging

    # ── Boundary nudges ──────────────────────────────────────────

    def nudge_start(self, direction: int) -> Outcome:
        """Move the active slot's start by one quantum (direction +1 or -1)."""
        slot = self.active_slot
        if slot is None:
            return Rejected(RejectionReason.NO_ACTIVE_SLOT, "No slot selected")

        if direction not in _DIRECTIONS:
            return _invalid_step(direction)

        new_start = slot.start_minutes + direction * self.rules.quantum_minutes

        if new_start < self.rules.day_start:
            return Rejected(RejectionReason.OUTSIDE_DAY_WINDOW, "Start would precede the day window")
        if new_start > slot.end_minutes - self.rules.min_slot_duration:
            return Rejected(RejectionReason.BELOW_MIN_DURATION, "Window would become too short")
        if self.detector.has_overlap(slot.date, new_start, slot.end_minutes, exclude_id=slot.id):
            return Rejected(RejectionReason.OVERLAP, "Would overlap another window")

        return Updated(self.store.replace(dataclasses.replace(slot, start_minutes=new_start)))

    def nudge_end(self, direction: int) -> Outcome:
        """Move the active slot's end by one quantum (direction +1 or -1)."""
        slot = self.active_slot
        if slot is None:
            return Rejected(RejectionReason.NO_ACTIVE_SLOT, "No slot selected")

        if direction not in _DIRECTIONS:
            return _invalid_step(direction)

        new_end = slot.end_minutes + direction * self.rules.quantum_minutes

        if new_end > self.rules.day_end:
            return Rejected(RejectionReason.OUTSIDE_DAY_WINDOW, "End would pass the day window")
        if new_end < slot.start_minutes + self.rules.min_slot_duration:
            return Rejected(RejectionReason.BELOW_MIN_DURATION, "Window would become too short")
        if self.detector.has_overlap(slot.date, slot.start_minutes, new_end, exclude_id=slot.id):
            return Rejected(RejectionReason.OVERLAP, "Would overlap another window")

        return Updated(self.store.replace(dataclasses.replace(slot, end_minutes=new_end)))

    # ── Services and deletion ────────────────────────────────────

    def toggle_service(self, service_id: str, slot_id: str | None = None) -> Outcome:
        """Add or remove ``service_id`` on a slot (the active one by default)."""
        slot = self._resolve(slot_id)
        if isinstance(slot, Rejected):
            return slot

        enabled = set(slot.enabled_service_ids)
        if service_id in enabled:
            enabled.discard(service_id)
        else:
            enabled.add(service_id)

        return Updated(
            self.store.replace(dataclasses.replace(slot, enabled_service_ids=frozenset(enabled)))
        )

    def delete_slot(self, slot_id: str | None = None) -> Outcome:
        """Remove one slot (the active one by default)."""
        slot = self._resolve(slot_id)
        if isinstance(slot, Rejected):
            return slot

        self.store.remove(slot.id)
        if self.active_slot_id == slot.id:
            self.active_slot_id = None
        return Deleted(slot.id)

    def delete_series(self, slot_id: str | None = None) -> Outcome:
        """Remove every slot sharing the weekday and window of the given slot."""
        slot = self._resolve(slot_id)
        if isinstance(slot, Rejected):
            return slot

        result: SeriesDeleted = self.propagator.delete_series(slot)
        if self.active_slot_id in result.slot_ids:
            self.active_slot_id = None
        return result

    def copy_to_weekday(self, weekday: int, slot_id: str | None = None) -> Outcome:
        """Copy a slot (the active one by default) to every remaining ``weekday``."""
        slot = self._resolve(slot_id)
        if isinstance(slot, Rejected):
            return slot
        return self.propagator.copy_to_weekday(slot, weekday)

    def _resolve(self, slot_id: str | None) -> TimeSlot | Rejected:
        if slot_id is None:
            slot = self.active_slot
            if slot is None:
                return Rejected(RejectionReason.NO_ACTIVE_SLOT, "No slot selected")
            return slot

        slot = self.store.get(slot_id)
        if slot is None:
            return Rejected(RejectionReason.UNKNOWN_SLOT, f"Unknown slot: {slot_id}")
        return slot


_DIRECTIONS = (-1, 1)


def _invalid_step(direction) -> Rejected:
    return Rejected(RejectionReason.INVALID_STEP, f"Direction must be +1 or -1, got {direction}")
