"""
Adapters layer - Collaborators around the scheduling core (clock, sample data).
"""

from .clock import FixedClock, SystemClock
from .seed import build_sample_slots

__all__ = ["FixedClock", "SystemClock", "build_sample_slots"]
