"""
Per-service capacity estimation for availability slots.
"""

from __future__ import annotations

import logging
from typing import List

from .models import CapacityLine, ServiceCatalog, TimeSlot

logger = logging.getLogger(__name__)


def fit_count(window_minutes: int, session_duration: int) -> int:
    """How many back-to-back sessions of ``session_duration`` fit in a window."""
    if session_duration <= 0:
        return 0
    return window_minutes // session_duration


class CapacityEstimator:
    """
    Estimates how many sessions of each enabled service fit in a slot.

    Each service is counted independently, as if it had the whole window to
    itself. This is not a joint packing of mixed durations: a 180-minute slot
    with both 50- and 90-minute services enabled reports 3 and 2, although
    booking one 90-minute session leaves room for only one 50-minute one.
    Callers must present the numbers as upper bounds per service.
    """

    def __init__(self, catalog: ServiceCatalog):
        self.catalog = catalog

    def capacity_lines(self, slot: TimeSlot) -> List[CapacityLine]:
        """
        One line per enabled service, in catalog order.

        Service ids that no longer exist in the catalog are skipped. Lines with
        a count of zero are kept so the caller can flag them (e.g. "too long").
        """
        window = slot.duration_minutes
        lines: List[CapacityLine] = []

        for service in self.catalog:
            if service.id not in slot.enabled_service_ids:
                continue
            lines.append(CapacityLine(service=service, count=fit_count(window, service.duration)))

        stale = slot.enabled_service_ids - self.catalog.ids()
        if stale:
            logger.debug("Ignoring unknown service ids on slot %s: %s", slot.id, sorted(stale))

        return lines

    def fitting_lines(self, slot: TimeSlot) -> List[CapacityLine]:
        """Capacity lines with at least one session fitting."""
        return [line for line in self.capacity_lines(slot) if line.count > 0]
