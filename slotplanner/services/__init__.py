"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .planner import AvailabilityPlannerService, ClockProtocol

__all__ = ["AvailabilityPlannerService", "ClockProtocol"]
