"""
In-memory slot store with injectable id generation.

The store is the only owner of slot records. It is explicitly constructed and
passed to the components that read or mutate it, so tests can build isolated
stores with deterministic ids.
"""

from __future__ import annotations

import itertools
import uuid
from typing import Dict, Iterable, Iterator, List, Protocol

from pendulum import Date

from .exceptions import DuplicateSlotError
from .models import TimeSlot, as_date


class IdGenerator(Protocol):
    """Callable producing a fresh, unique slot id."""

    def __call__(self) -> str:
        ...


class SequentialIdGenerator:
    """Deterministic ids (``ts-1``, ``ts-2``, ...), handy for tests."""

    def __init__(self, prefix: str = "ts", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


class UuidIdGenerator:
    """Random ids for interactive use."""

    def __init__(self, prefix: str = "ts"):
        self.prefix = prefix

    def __call__(self) -> str:
        return f"{self.prefix}-{uuid.uuid4().hex[:12]}"


class SlotStore:
    """
    Ordered collection of slots keyed by id.

    Insertion order is preserved. Every multi-slot change (``add_many``,
    ``remove_many``) is applied as a single transition: it is validated in
    full before anything is written.
    """

    def __init__(
        self,
        slots: Iterable[TimeSlot] = (),
        id_generator: IdGenerator | None = None,
    ):
        self._slots: Dict[str, TimeSlot] = {}
        self.id_generator: IdGenerator = id_generator or UuidIdGenerator()
        self.add_many(slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[TimeSlot]:
        return iter(list(self._slots.values()))

    def __contains__(self, slot_id: object) -> bool:
        return slot_id in self._slots

    def new_id(self) -> str:
        """Draw an id from the injected generator, skipping any already in use."""
        slot_id = self.id_generator()
        while slot_id in self._slots:
            slot_id = self.id_generator()
        return slot_id

    def get(self, slot_id: str | None) -> TimeSlot | None:
        if slot_id is None:
            return None
        return self._slots.get(slot_id)

    def all(self) -> List[TimeSlot]:
        return list(self._slots.values())

    def slots_for_date(self, date) -> List[TimeSlot]:
        """All slots on a date, ordered by start time."""
        target: Date = as_date(date)
        return sorted(
            (slot for slot in self._slots.values() if slot.date == target),
            key=lambda s: s.start_minutes,
        )

    def add(self, slot: TimeSlot) -> TimeSlot:
        self.add_many([slot])
        return slot

    def add_many(self, slots: Iterable[TimeSlot]) -> List[TimeSlot]:
        """
        Insert several slots at once.

        Raises:
            DuplicateSlotError: If any id is already stored or repeated in
                the batch; nothing is inserted in that case
        """
        batch = list(slots)
        seen: set[str] = set()
        for slot in batch:
            if slot.id in self._slots or slot.id in seen:
                raise DuplicateSlotError(f"Slot id already in store: {slot.id}")
            seen.add(slot.id)

        for slot in batch:
            self._slots[slot.id] = slot
        return batch

    def replace(self, slot: TimeSlot) -> TimeSlot:
        """
        Swap in a new version of an existing slot, keeping its position.

        Raises:
            KeyError: If no slot with that id is stored
        """
        if slot.id not in self._slots:
            raise KeyError(slot.id)
        self._slots[slot.id] = slot
        return slot

    def remove(self, slot_id: str) -> TimeSlot | None:
        return self._slots.pop(slot_id, None)

    def remove_many(self, slot_ids: Iterable[str]) -> List[TimeSlot]:
        """Remove every listed slot that exists; unknown ids are ignored."""
        removed: List[TimeSlot] = []
        for slot_id in dict.fromkeys(slot_ids):
            slot = self._slots.pop(slot_id, None)
            if slot is not None:
                removed.append(slot)
        return removed

    def total_hours(self) -> float:
        """Sum of all window lengths, in hours."""
        return sum(slot.duration_minutes for slot in self._slots.values()) / 60
