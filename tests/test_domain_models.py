"""
Tests for domain models.
"""

from datetime import date, datetime

import pendulum
import pytest

from slotplanner.domain.exceptions import CatalogError, InvalidSlotError
from slotplanner.domain.models import (
    CopyStatus,
    Modality,
    SchedulingRules,
    SeriesCopied,
    SeriesDeleted,
    ServiceCatalog,
    ServiceType,
    TimeSlot,
    as_date,
    format_minutes,
    parse_minutes,
    weekday_of,
)


def _slot(slot_id="ts-1", day="2024-11-25", start=540, end=720, services=("s50",)):
    return TimeSlot(
        id=slot_id,
        date=pendulum.parse(day).date(),
        start_minutes=start,
        end_minutes=end,
        enabled_service_ids=frozenset(services),
    )


class TestDateHelpers:
    """Tests for date and minute helpers."""

    def test_as_date_accepts_several_inputs(self):
        """Strings, stdlib dates and datetimes all normalise to the same Date."""
        expected = pendulum.date(2024, 11, 25)

        assert as_date("2024-11-25") == expected
        assert as_date(date(2024, 11, 25)) == expected
        assert as_date(datetime(2024, 11, 25, 15, 30)) == expected
        assert isinstance(as_date(date(2024, 11, 25)), pendulum.Date)

    def test_weekday_of(self):
        """Weekdays are numbered from Monday."""
        assert weekday_of("2024-11-25") == 0  # Monday
        assert weekday_of("2024-11-27") == 2  # Wednesday
        assert weekday_of("2024-12-01") == 6  # Sunday

    def test_format_and_parse_minutes(self):
        """HH:MM formatting uses zero padding."""
        assert format_minutes(420) == "07:00"
        assert format_minutes(1290) == "21:30"
        assert parse_minutes("09:30") == 570
        assert parse_minutes("24:00") == 1440

    @pytest.mark.parametrize("text", ["9", "ab:cd", "10:75", "25:00"])
    def test_parse_minutes_rejects_garbage(self, text):
        """Malformed or out-of-range times raise ValueError."""
        with pytest.raises(ValueError):
            parse_minutes(text)


class TestSchedulingRules:
    """Tests for grid snapping and labels."""

    def test_snap_rounds_to_nearest_quantum(self):
        """Values snap to the closest 30 minutes, halves rounding up."""
        rules = SchedulingRules()

        assert rules.snap(600) == 600
        assert rules.snap(610) == 600
        assert rules.snap(615) == 630
        assert rules.snap(644) == 630

    def test_snap_clamps_to_day_window(self):
        """Snapped values never leave [day_start, day_end]."""
        rules = SchedulingRules()

        assert rules.snap(0) == 420
        assert rules.snap(1400) == 1260

    def test_time_labels(self):
        """One label per quantum row, excluding the closing boundary."""
        labels = SchedulingRules().time_labels()

        assert labels[0] == "07:00"
        assert labels[-1] == "20:30"
        assert len(labels) == 28


class TestTimeSlot:
    """Tests for TimeSlot model."""

    def test_create_valid_slot(self):
        """Test creating a valid slot."""
        slot = _slot()

        assert slot.duration_minutes == 180
        assert slot.weekday == 0
        assert slot.enabled_service_ids == frozenset({"s50"})

    def test_date_is_normalised(self):
        """A string date is converted to a pendulum Date."""
        slot = TimeSlot(id="x", date="2024-11-26", start_minutes=600, end_minutes=660)

        assert slot.date == pendulum.date(2024, 11, 26)
        assert slot.enabled_service_ids == frozenset()

    @pytest.mark.parametrize("start, end", [(720, 540), (600, 600), (-30, 60), (1400, 1500)])
    def test_invalid_interval_raises_error(self, start, end):
        """Test that a malformed interval raises InvalidSlotError."""
        with pytest.raises(InvalidSlotError, match="Invalid slot interval"):
            _slot(start=start, end=end)

    def test_invalid_slot_error_is_value_error(self):
        """Callers catching ValueError also catch bad slots."""
        with pytest.raises(ValueError):
            _slot(start=700, end=600)

    def test_overlaps_is_half_open(self):
        """Back-to-back windows do not overlap."""
        slot = _slot(start=540, end=720)

        assert slot.overlaps(600, 660)
        assert slot.overlaps(480, 541)
        assert not slot.overlaps(720, 780)
        assert not slot.overlaps(480, 540)

    def test_to_window(self):
        """Export matches the availability-window record layout."""
        slot = _slot(services=("s90", "s50"))

        assert slot.to_window() == {
            "date": "2024-11-25",
            "start_time": "09:00",
            "end_time": "12:00",
            "enabled_service_ids": ["s50", "s90"],
        }

    def test_format_display(self):
        """Display string contains weekday, date, window and duration."""
        assert _slot().format_display() == "Mon, 25 Nov 2024 | 09:00 - 12:00 (180 min)"


class TestServiceCatalog:
    """Tests for ServiceCatalog."""

    def test_catalog_keeps_order(self):
        """Iteration follows the order services were supplied in."""
        catalog = ServiceCatalog([
            ServiceType(id="b", title="B", duration=90),
            ServiceType(id="a", title="A", duration=50, modality=Modality.PHONE_CALL),
        ])

        assert [s.id for s in catalog] == ["b", "a"]
        assert catalog.ids() == frozenset({"a", "b"})
        assert "a" in catalog
        assert catalog.get("missing") is None
        assert len(catalog) == 2

    def test_duplicate_ids_rejected(self):
        """Two services with one id make an inconsistent catalog."""
        with pytest.raises(CatalogError, match="Duplicate service id"):
            ServiceCatalog([
                ServiceType(id="a", title="A", duration=50),
                ServiceType(id="a", title="A again", duration=60),
            ])

    def test_modality_labels(self):
        """Modalities carry a human-readable label."""
        assert Modality("inPerson") is Modality.IN_PERSON
        assert Modality.TEXT.label == "Messaging"


class TestOutcomes:
    """Tests for outcome summaries."""

    def test_series_copied_counts_and_summary(self):
        """Created slots and skips are summarised like a confirmation toast."""
        result = SeriesCopied(
            weekday=2,
            created_slots=(_slot("a"), _slot("b"), _slot("c")),
            skipped_overlap=1,
        )

        assert result.ok
        assert result.created == 3
        assert result.candidates == 4
        assert result.status is CopyStatus.CREATED
        assert result.summary() == "Copied to 3 Weds (1 skipped: overlaps)"

    def test_series_copied_single_created(self):
        """No plural for a single copy."""
        result = SeriesCopied(weekday=4, created_slots=(_slot(),))

        assert result.summary() == "Copied to 1 Fri"

    def test_series_copied_nothing_created(self):
        """Empty runs are classified by why nothing was created."""
        assert SeriesCopied(weekday=0, skipped_existing=3).status is CopyStatus.ALL_EXISTING
        assert SeriesCopied(weekday=0, skipped_existing=3).summary() == "Already exists on all Mons"
        assert SeriesCopied(weekday=0, skipped_existing=1, skipped_overlap=2).status is CopyStatus.ALL_OVERLAP
        assert SeriesCopied(weekday=0).status is CopyStatus.NO_TARGETS

    def test_series_deleted_summary(self):
        """Deleted series lists every removed date."""
        result = SeriesDeleted(
            weekday=0,
            dates=(pendulum.date(2024, 11, 25), pendulum.date(2024, 12, 2)),
            slot_ids=("a", "b"),
        )

        assert result.count == 2
        assert result.summary() == "Removed 2 Mon windows (Mon 25 Nov, Mon 2 Dec)"
