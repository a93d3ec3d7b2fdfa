"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .capacity import CapacityEstimator
from .editor import DragState, SlotEditor
from .horizon import HorizonBounds
from .models import (
    CapacityLine,
    Created,
    Deleted,
    Modality,
    Rejected,
    RejectionReason,
    SchedulingRules,
    SeriesCopied,
    SeriesDeleted,
    ServiceCatalog,
    ServiceType,
    TimeSlot,
    Updated,
)
from .overlap import ConflictDetector
from .recurrence import RecurrencePropagator
from .store import SequentialIdGenerator, SlotStore, UuidIdGenerator

__all__ = [
    "CapacityEstimator",
    "CapacityLine",
    "ConflictDetector",
    "Created",
    "Deleted",
    "DragState",
    "HorizonBounds",
    "Modality",
    "RecurrencePropagator",
    "Rejected",
    "RejectionReason",
    "SchedulingRules",
    "SequentialIdGenerator",
    "SeriesCopied",
    "SeriesDeleted",
    "ServiceCatalog",
    "ServiceType",
    "SlotEditor",
    "SlotStore",
    "TimeSlot",
    "Updated",
    "UuidIdGenerator",
]
