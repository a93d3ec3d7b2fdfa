"""
Domain-specific exception hierarchy for the slot planner.

Scheduling policy violations (overlaps, out-of-window edits, horizon limits)
are reported as ``Rejected`` outcomes, not exceptions. The classes below are
reserved for malformed input and programming errors.
"""


class SlotPlannerError(Exception):
    """Base class for all application-level errors."""


class InvalidSlotError(SlotPlannerError, ValueError):
    """Raised when a slot is constructed with a malformed interval."""


class DuplicateSlotError(SlotPlannerError):
    """Raised when a slot id is inserted into a store twice."""


class CatalogError(SlotPlannerError):
    """Raised when the service type catalog is inconsistent."""
