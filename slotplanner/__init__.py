"""
slotplanner - availability slot scheduling engine.
"""

__version__ = "0.1.0"
