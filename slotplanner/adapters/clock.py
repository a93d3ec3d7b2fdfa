"""
Clock adapters supplying "today" to the scheduling core.
"""

import pendulum
from pendulum import Date

from ..domain.models import as_date


class SystemClock:
    """Reads the current local date in a configured timezone."""

    def __init__(self, timezone: str = "Europe/London"):
        self.timezone = timezone

    def today(self) -> Date:
        return pendulum.today(self.timezone).date()


class FixedClock:
    """
    Clock frozen on a given date.

    Used in tests and for previewing a schedule as of another day.
    """

    def __init__(self, today):
        self._today = as_date(today)

    def today(self) -> Date:
        return self._today
