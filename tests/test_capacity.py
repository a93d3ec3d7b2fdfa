"""
Tests for capacity estimation.
"""

import pendulum
import pytest

from slotplanner.domain.capacity import CapacityEstimator, fit_count
from slotplanner.domain.models import ServiceCatalog, ServiceType, TimeSlot

CATALOG = ServiceCatalog([
    ServiceType(id="s50", title="50-min Session", duration=50),
    ServiceType(id="s90", title="90-min Session", duration=90),
    ServiceType(id="s200", title="Intensive", duration=200),
])


def _slot(start=540, end=720, services=("s50", "s90", "s200")):
    return TimeSlot(
        id="ts-1",
        date=pendulum.date(2024, 11, 25),
        start_minutes=start,
        end_minutes=end,
        enabled_service_ids=frozenset(services),
    )


class TestCapacityEstimator:
    """Tests for CapacityEstimator."""

    def test_three_hour_window(self):
        """180 minutes hold 3x50, 2x90 and no 200-minute session."""
        lines = CapacityEstimator(CATALOG).capacity_lines(_slot())

        assert [(line.service.id, line.count) for line in lines] == [
            ("s50", 3),
            ("s90", 2),
            ("s200", 0),
        ]

    def test_catalog_order_and_disabled_services(self):
        """Lines follow catalog order and skip disabled services."""
        lines = CapacityEstimator(CATALOG).capacity_lines(_slot(services=("s200", "s50")))

        assert [line.service.id for line in lines] == ["s50", "s200"]

    def test_stale_service_ids_ignored(self):
        """Ids missing from the catalog are filtered, not an error."""
        lines = CapacityEstimator(CATALOG).capacity_lines(_slot(services=("deleted", "s90")))

        assert [(line.service.id, line.count) for line in lines] == [("s90", 2)]

    def test_no_services_enabled(self):
        """A slot with nothing enabled has no capacity lines."""
        assert CapacityEstimator(CATALOG).capacity_lines(_slot(services=())) == []

    def test_fitting_lines_drop_zero_counts(self):
        """The display variant hides services that do not fit."""
        lines = CapacityEstimator(CATALOG).fitting_lines(_slot())

        assert [line.service.id for line in lines] == ["s50", "s90"]

    def test_counts_are_independent_per_service(self):
        """Each service is counted as if it had the window to itself."""
        lines = CapacityEstimator(CATALOG).capacity_lines(_slot(start=540, end=780))

        # 240 minutes: 4x50 and 2x90 are reported although they cannot coexist.
        assert sum(line.service.duration * line.count for line in lines) > 240


@pytest.mark.parametrize(
    "window, duration, expected",
    [(180, 50, 3), (180, 90, 2), (180, 200, 0), (180, 180, 1), (100, 0, 0), (100, -5, 0)],
)
def test_fit_count(window, duration, expected):
    """Floor division with a guard for non-positive durations."""
    assert fit_count(window, duration) == expected
