"""
Sample availability for demos and manual testing.
"""

from typing import List

from pendulum import Date

from ..domain.horizon import HorizonBounds, start_of_week
from ..domain.models import ServiceCatalog, TimeSlot
from ..domain.store import IdGenerator, SequentialIdGenerator


def build_sample_slots(
    catalog: ServiceCatalog,
    week_start,
    id_generator: IdGenerator | None = None,
    weeks: int = 4,
    horizon: HorizonBounds | None = None,
) -> List[TimeSlot]:
    """
    Generate a realistic practice week pattern over several weeks.

    Pattern per week (all services unless noted):
    - Monday 09:00-12:00, and 13:00-16:00 with the first three services
    - Wednesday 10:00-13:00, and 14:00-17:00 with the first two services
    - Friday 09:00-12:00
    - Tuesday 14:00-17:00 with the first two services (weeks 1 and 3)
    - Thursday 09:00-12:00 (weeks 2 and 4)

    Dates outside ``horizon`` are skipped when one is given.

    Returns:
        List of TimeSlot objects, not yet stored
    """
    if len(catalog) == 0:
        return []

    make_id = id_generator or SequentialIdGenerator(prefix="sample")
    service_ids = [service.id for service in catalog]
    everything = service_ids
    first_three = service_ids[:3]
    first_two = service_ids[:2]
    monday: Date = start_of_week(week_start)

    slots: List[TimeSlot] = []

    def add(day_offset: int, start_hour: int, end_hour: int, enabled: List[str]) -> None:
        date = monday.add(days=day_offset)
        if horizon is not None and not horizon.contains(date):
            return
        slots.append(
            TimeSlot(
                id=make_id(),
                date=date,
                start_minutes=start_hour * 60,
                end_minutes=end_hour * 60,
                enabled_service_ids=frozenset(enabled),
            )
        )

    for week in range(weeks):
        offset = week * 7

        add(offset, 9, 12, everything)
        add(offset, 13, 16, first_three)
        add(offset + 2, 10, 13, everything)
        add(offset + 2, 14, 17, first_two)
        add(offset + 4, 9, 12, everything)

        if week in (0, 2):
            add(offset + 1, 14, 17, first_two)
        if week in (1, 3):
            add(offset + 3, 9, 12, everything)

    return slots
