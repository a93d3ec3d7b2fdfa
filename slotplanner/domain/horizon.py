"""
Horizon and week-navigation bounds.

Scheduling is allowed from today through ``today + availability_days - 1``.
Weeks start on Monday; navigation is clamped to the weeks touching that range.
"""

from __future__ import annotations

from typing import List

from pendulum import Date

from .models import DEFAULT_RULES, SchedulingRules, as_date


def start_of_week(date) -> Date:
    """Monday of the week containing ``date``."""
    return as_date(date).start_of("week")


class HorizonBounds:
    """
    Date limits derived from "today".

    Attributes:
        today: The current local date
        max_date: Last date that may hold availability
        min_week_start: Monday of the current week
        max_week_start: Monday of the week containing ``max_date``
    """

    def __init__(self, today, rules: SchedulingRules = DEFAULT_RULES):
        self.rules = rules
        self.today: Date = as_date(today)
        self.max_date: Date = self.today.add(days=rules.availability_days - 1)
        self.min_week_start: Date = start_of_week(self.today)
        self.max_week_start: Date = start_of_week(self.max_date)

    def __repr__(self) -> str:
        return f"HorizonBounds(today={self.today}, max_date={self.max_date})"

    def contains(self, date) -> bool:
        """True if ``date`` lies within [today, max_date]."""
        return self.today <= as_date(date) <= self.max_date

    def is_beyond(self, date) -> bool:
        """True if ``date`` is later than the last schedulable date."""
        return as_date(date) > self.max_date

    def clamp_week_start(self, week_start) -> Date:
        """Snap any date to its Monday, then clamp into the navigable weeks."""
        monday = start_of_week(week_start)
        if monday < self.min_week_start:
            return self.min_week_start
        if monday > self.max_week_start:
            return self.max_week_start
        return monday

    def can_go_prev(self, week_start) -> bool:
        return start_of_week(week_start) > self.min_week_start

    def can_go_next(self, week_start) -> bool:
        return start_of_week(week_start) < self.max_week_start

    def prev_week(self, week_start) -> Date:
        return self.clamp_week_start(as_date(week_start).subtract(days=7))

    def next_week(self, week_start) -> Date:
        return self.clamp_week_start(as_date(week_start).add(days=7))

    def go_today(self) -> Date:
        return self.min_week_start

    def week_dates(self, week_start) -> List[Date]:
        """The seven dates (Mon..Sun) of the week starting at ``week_start``."""
        monday = start_of_week(week_start)
        return [monday.add(days=offset) for offset in range(7)]

    def navigable_weeks(self) -> List[Date]:
        """Every Monday from ``min_week_start`` to ``max_week_start``."""
        weeks: List[Date] = []
        current = self.min_week_start
        while current <= self.max_week_start:
            weeks.append(current)
            current = current.add(days=7)
        return weeks

    def weekday_dates(self, weekday: int) -> List[Date]:
        """
        All schedulable dates falling on ``weekday`` (0=Monday).

        Generation walks at most ``recurrence_weeks`` weeks from
        ``min_week_start``, but every candidate is checked against
        [today, max_date] individually.
        """
        if not 0 <= weekday <= 6:
            raise ValueError(f"weekday must be between 0 and 6, got {weekday}")

        dates: List[Date] = []
        for week in range(self.rules.recurrence_weeks):
            candidate = self.min_week_start.add(days=week * 7 + weekday)
            if candidate > self.max_date:
                break
            if candidate < self.today:
                continue
            dates.append(candidate)
        return dates
