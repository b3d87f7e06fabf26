"""
Shared fixtures: in-memory timetables and a service with a fixed clock.
"""

from typing import Dict, List

import pendulum
import pytest

from nextbus.domain.exceptions import DataFormatError
from nextbus.domain.models import DayType, Timetable
from nextbus.services.next_bus import NextBusService

TZ = "Asia/Tokyo"

WEEKDAY_ROWS = {
    6: [30, 45],
    7: [0, 30],
    8: [0, 15, 30, 45],
    9: [0, 20],
    **{hour: [0, 30] for hour in range(10, 21)},
    21: [0, 30],
}

SATURDAY_ROWS = {
    7: [0],
    8: [0, 30],
    20: [0],
}

SUNDAY_ROWS = {
    9: [0],
    12: [0],
}


class StubTimetableStore:
    """Minimal stub matching TimetableStoreProtocol."""

    def __init__(self, timetables: Dict[DayType, Timetable]):
        self._timetables = timetables
        self.calls: List[DayType] = []

    def load_timetable(self, day_type: DayType) -> Timetable:
        self.calls.append(day_type)
        if day_type not in self._timetables:
            raise DataFormatError(f"No timetable for {day_type.value}")
        return self._timetables[day_type]


@pytest.fixture
def weekday_timetable() -> Timetable:
    return Timetable.from_rows(DayType.WEEKDAY, WEEKDAY_ROWS)


@pytest.fixture
def timetables(weekday_timetable) -> Dict[DayType, Timetable]:
    return {
        DayType.WEEKDAY: weekday_timetable,
        DayType.SATURDAY: Timetable.from_rows(DayType.SATURDAY, SATURDAY_ROWS),
        DayType.SUNDAY: Timetable.from_rows(DayType.SUNDAY, SUNDAY_ROWS),
    }


@pytest.fixture
def store(timetables) -> StubTimetableStore:
    return StubTimetableStore(timetables)


@pytest.fixture
def now():
    # Wednesday
    return pendulum.parse("2024-11-27 15:00", tz=TZ)


@pytest.fixture
def service(store, now) -> NextBusService:
    return NextBusService(timetable_store=store, clock=lambda: now)


@pytest.fixture
def missing_store() -> StubTimetableStore:
    """Store whose every load fails like a missing CSV file."""
    return StubTimetableStore({})
