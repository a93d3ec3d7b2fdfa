"""
Domain models for availability slots, service types and operation outcomes.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Tuple

import pendulum
from pendulum import Date

from .exceptions import CatalogError, InvalidSlotError

MINUTES_PER_DAY = 24 * 60

DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def as_date(value: _dt.date | str) -> Date:
    """
    Normalise a calendar date to a pendulum ``Date``.

    Accepts pendulum/stdlib dates, datetimes (the time part is dropped) and
    ``YYYY-MM-DD`` strings.
    """
    if isinstance(value, str):
        value = pendulum.from_format(value, "YYYY-MM-DD")
    if isinstance(value, _dt.datetime):
        value = value.date()
    return pendulum.date(value.year, value.month, value.day)


def weekday_of(value: _dt.date) -> int:
    """Return the weekday index of a date (0=Monday, 6=Sunday)."""
    return int(as_date(value).day_of_week)


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_minutes(text: str) -> int:
    """
    Parse an ``HH:MM`` wall-clock string into minutes since midnight.

    Raises:
        ValueError: If the text is not a valid ``HH:MM`` value
    """
    try:
        hours_str, minutes_str = text.strip().split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except ValueError as exc:
        raise ValueError(f"Expected HH:MM, got '{text}'") from exc

    total = hours * 60 + minutes
    if not 0 <= minutes < 60 or not 0 <= total <= MINUTES_PER_DAY:
        raise ValueError(f"Time out of range: '{text}'")
    return total


@dataclass(frozen=True)
class SchedulingRules:
    """
    Grid and horizon constants shared by every scheduling component.

    All values are minutes except ``availability_days`` and
    ``recurrence_weeks``.
    """
    day_start: int = 7 * 60
    day_end: int = 21 * 60
    quantum_minutes: int = 30
    min_slot_duration: int = 30
    default_slot_duration: int = 120
    availability_days: int = 28
    recurrence_weeks: int = 5
    commit_on_leave: bool = True

    def snap(self, minutes: float) -> int:
        """Round to the nearest quantum (halves round up) and clamp to the day window."""
        quantum = self.quantum_minutes
        snapped = int((minutes + quantum / 2) // quantum) * quantum
        return max(self.day_start, min(snapped, self.day_end))

    def time_labels(self) -> List[str]:
        """Labels for every quantum row of the day grid."""
        return [
            format_minutes(minutes)
            for minutes in range(self.day_start, self.day_end, self.quantum_minutes)
        ]


DEFAULT_RULES = SchedulingRules()


class Modality(str, Enum):
    """How a session is delivered."""
    VIDEO = "video"
    IN_PERSON = "inPerson"
    TEXT = "text"
    PHONE_CALL = "phoneCall"

    @property
    def label(self) -> str:
        return {
            Modality.VIDEO: "Video",
            Modality.IN_PERSON: "In-Person",
            Modality.TEXT: "Messaging",
            Modality.PHONE_CALL: "Phone",
        }[self]


@dataclass(frozen=True)
class ServiceType:
    """
    A bookable session type from the external catalog.

    The scheduling core only reads these; it never mutates them.
    """
    id: str
    title: str
    duration: int  # minutes
    modality: Modality = Modality.VIDEO
    price: float = 0.0
    cooldown: int = 0


class ServiceCatalog:
    """
    Read-only, ordered view over the available service types.

    Order matters: capacity lines and new-slot defaults follow catalog order.
    """

    def __init__(self, services: Iterable[ServiceType] = ()):
        self._services: Tuple[ServiceType, ...] = tuple(services)
        self._by_id: Dict[str, ServiceType] = {}

        for service in self._services:
            if service.id in self._by_id:
                raise CatalogError(f"Duplicate service id in catalog: {service.id}")
            self._by_id[service.id] = service

    def __iter__(self) -> Iterator[ServiceType]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)

    def __contains__(self, service_id: object) -> bool:
        return service_id in self._by_id

    def get(self, service_id: str) -> ServiceType | None:
        return self._by_id.get(service_id)

    def ids(self) -> FrozenSet[str]:
        """All known service ids, used as the default enabled set of a new slot."""
        return frozenset(self._by_id)


@dataclass(frozen=True)
class TimeSlot:
    """
    A date-scoped availability window.

    Invariant: 0 <= start_minutes < end_minutes <= 1440. Day-window clamping
    and the minimum duration are scheduling policy and are enforced by the
    editor, not here.
    """
    id: str
    date: Date
    start_minutes: int
    end_minutes: int
    enabled_service_ids: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "date", as_date(self.date))
        object.__setattr__(
            self, "enabled_service_ids", frozenset(self.enabled_service_ids)
        )
        if not 0 <= self.start_minutes < self.end_minutes <= MINUTES_PER_DAY:
            raise InvalidSlotError(
                f"Invalid slot interval {self.start_minutes}-{self.end_minutes} "
                f"on {self.date}"
            )

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def weekday(self) -> int:
        return weekday_of(self.date)

    def overlaps(self, start_minutes: int, end_minutes: int) -> bool:
        """Half-open overlap test: back-to-back windows do not overlap."""
        return start_minutes < self.end_minutes and end_minutes > self.start_minutes

    def same_window(self, other: "TimeSlot") -> bool:
        """True if both slots cover the identical [start, end) interval."""
        return (
            self.start_minutes == other.start_minutes
            and self.end_minutes == other.end_minutes
        )

    def to_window(self) -> Dict[str, object]:
        """Export as an availability-window record for a caller's persistence."""
        return {
            "date": self.date.to_date_string(),
            "start_time": format_minutes(self.start_minutes),
            "end_time": format_minutes(self.end_minutes),
            "enabled_service_ids": sorted(self.enabled_service_ids),
        }

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Mon, 19 Oct 2026 | 09:00 - 12:00 (180 min)
        """
        day = DAY_LABELS[self.weekday]
        date_str = self.date.format("D MMM YYYY")
        time_str = f"{format_minutes(self.start_minutes)} - {format_minutes(self.end_minutes)}"
        return f"{day}, {date_str} | {time_str} ({self.duration_minutes} min)"


@dataclass(frozen=True)
class CapacityLine:
    """How many sessions of one service type independently fit in a slot."""
    service: ServiceType
    count: int


# ─── Operation outcomes ─────────────────────────────────────────


class RejectionReason(str, Enum):
    """Why a mutating operation left the store unchanged."""
    OVERLAP = "overlap"
    BEYOND_HORIZON = "beyond_horizon"
    OUTSIDE_DAY_WINDOW = "outside_day_window"
    BELOW_MIN_DURATION = "below_min_duration"
    NO_ACTIVE_SLOT = "no_active_slot"
    UNKNOWN_SLOT = "unknown_slot"
    NOT_DRAGGING = "not_dragging"
    DRAG_CANCELLED = "drag_cancelled"
    INVALID_STEP = "invalid_step"


class Outcome:
    """Base class for the result of a mutating operation."""

    ok: bool = True


@dataclass(frozen=True)
class Rejected(Outcome):
    reason: RejectionReason
    message: str = ""
    ok: bool = field(default=False, init=False)


@dataclass(frozen=True)
class Created(Outcome):
    slot: TimeSlot


@dataclass(frozen=True)
class Updated(Outcome):
    slot: TimeSlot


@dataclass(frozen=True)
class Deleted(Outcome):
    slot_id: str


@dataclass(frozen=True)
class SeriesDeleted(Outcome):
    """All slots sharing a weekday and identical window, removed together."""
    weekday: int
    dates: Tuple[Date, ...]
    slot_ids: Tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.slot_ids)

    def summary(self) -> str:
        label = DAY_LABELS[self.weekday]
        plural = "s" if self.count != 1 else ""
        dates = ", ".join(f"{label} {d.format('D MMM')}" for d in self.dates)
        return f"Removed {self.count} {label} window{plural} ({dates})"


class CopyStatus(str, Enum):
    CREATED = "created"
    ALL_EXISTING = "all_existing"
    ALL_OVERLAP = "all_overlap"
    NO_TARGETS = "no_targets"


@dataclass(frozen=True)
class SeriesCopied(Outcome):
    """
    Per-date classification of a copy-to-weekday run.

    Never a hard failure: a run that creates nothing still reports why.
    """
    weekday: int
    created_slots: Tuple[TimeSlot, ...] = ()
    skipped_existing: int = 0
    skipped_overlap: int = 0

    @property
    def created(self) -> int:
        return len(self.created_slots)

    @property
    def candidates(self) -> int:
        return self.created + self.skipped_existing + self.skipped_overlap

    @property
    def status(self) -> CopyStatus:
        if self.created:
            return CopyStatus.CREATED
        if self.candidates == 0:
            return CopyStatus.NO_TARGETS
        if self.skipped_existing == self.candidates:
            return CopyStatus.ALL_EXISTING
        return CopyStatus.ALL_OVERLAP

    def summary(self) -> str:
        label = DAY_LABELS[self.weekday]
        status = self.status

        if status is CopyStatus.NO_TARGETS:
            return f"No remaining {label}s within the availability window"
        if status is CopyStatus.ALL_EXISTING:
            return f"Already exists on all {label}s"
        if status is CopyStatus.ALL_OVERLAP:
            return f"All remaining {label}s have overlapping windows"

        plural = "s" if self.created != 1 else ""
        message = f"Copied to {self.created} {label}{plural}"
        if self.skipped_overlap:
            message += f" ({self.skipped_overlap} skipped: overlaps)"
        return message
