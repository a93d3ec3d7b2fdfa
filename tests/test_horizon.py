"""
Tests for horizon bounds and week navigation.
"""

import pendulum
import pytest

from slotplanner.domain.horizon import HorizonBounds, start_of_week
from slotplanner.domain.models import SchedulingRules


class TestHorizonBounds:
    """Tests for HorizonBounds."""

    def test_bounds_from_a_monday(self):
        """A Monday today gives four whole weeks."""
        bounds = HorizonBounds(pendulum.date(2024, 11, 25))

        assert bounds.max_date == pendulum.date(2024, 12, 22)
        assert bounds.min_week_start == pendulum.date(2024, 11, 25)
        assert bounds.max_week_start == pendulum.date(2024, 12, 16)

    def test_bounds_from_midweek(self):
        """Mid-week, navigation spans five weeks."""
        bounds = HorizonBounds("2024-11-27")  # Wednesday

        assert bounds.min_week_start == pendulum.date(2024, 11, 25)
        assert bounds.max_date == pendulum.date(2024, 12, 24)
        assert bounds.max_week_start == pendulum.date(2024, 12, 23)
        assert len(bounds.navigable_weeks()) == 5

    def test_start_of_week_is_monday(self):
        """Weeks start on Monday, Sundays belong to the previous week."""
        assert start_of_week("2024-12-01") == pendulum.date(2024, 11, 25)
        assert start_of_week("2024-11-25") == pendulum.date(2024, 11, 25)

    def test_contains_and_beyond(self):
        """Dates are schedulable from today to max_date inclusive."""
        bounds = HorizonBounds("2024-11-25")

        assert bounds.contains("2024-11-25")
        assert bounds.contains("2024-12-22")
        assert not bounds.contains("2024-11-24")
        assert not bounds.contains("2024-12-23")
        assert bounds.is_beyond("2024-12-23")
        assert not bounds.is_beyond("2024-11-24")

    def test_week_navigation_is_clamped(self):
        """Prev/next never leave [min_week_start, max_week_start]."""
        bounds = HorizonBounds("2024-11-25")
        first = bounds.min_week_start

        assert not bounds.can_go_prev(first)
        assert bounds.can_go_next(first)
        assert bounds.prev_week(first) == first

        week = first
        for _ in range(10):
            week = bounds.next_week(week)
        assert week == bounds.max_week_start
        assert not bounds.can_go_next(week)
        assert bounds.go_today() == first

    def test_clamp_week_start_snaps_to_monday(self):
        """Any date inside the range maps to its Monday."""
        bounds = HorizonBounds("2024-11-25")

        assert bounds.clamp_week_start("2024-12-05") == pendulum.date(2024, 12, 2)
        assert bounds.clamp_week_start("2025-03-01") == bounds.max_week_start
        assert bounds.clamp_week_start("2024-01-01") == bounds.min_week_start

    def test_week_dates(self):
        """Seven consecutive dates from Monday."""
        dates = HorizonBounds("2024-11-25").week_dates("2024-11-28")

        assert dates[0] == pendulum.date(2024, 11, 25)
        assert dates[-1] == pendulum.date(2024, 12, 1)
        assert len(dates) == 7


class TestWeekdayDates:
    """Tests for recurrence candidate dates."""

    def test_four_weeks_of_each_weekday(self):
        """A 28-day horizon holds every weekday exactly four times."""
        for today in ("2024-11-25", "2024-11-27", "2024-12-01"):
            bounds = HorizonBounds(today)
            for weekday in range(7):
                dates = bounds.weekday_dates(weekday)
                assert len(dates) == 4
                assert all(bounds.contains(d) for d in dates)
                assert all(d.day_of_week == weekday for d in dates)

    def test_past_days_of_current_week_excluded(self):
        """Days earlier this week are not candidates."""
        bounds = HorizonBounds("2024-11-27")  # Wednesday

        assert bounds.weekday_dates(0)[0] == pendulum.date(2024, 12, 2)
        assert bounds.weekday_dates(0)[-1] == pendulum.date(2024, 12, 23)

    def test_candidates_never_pass_max_date(self):
        """A short horizon cuts the generation loop."""
        bounds = HorizonBounds("2024-11-25", SchedulingRules(availability_days=10))

        assert bounds.weekday_dates(4) == [pendulum.date(2024, 11, 29)]
        assert bounds.weekday_dates(2) == [pendulum.date(2024, 11, 27), pendulum.date(2024, 12, 4)]

    def test_invalid_weekday(self):
        """Weekday must be 0..6."""
        with pytest.raises(ValueError):
            HorizonBounds("2024-11-25").weekday_dates(7)
