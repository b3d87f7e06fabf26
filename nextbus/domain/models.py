"""
Domain models for timetables and departure lookups.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Sequence, Tuple

from pendulum import DateTime


# Weekday numbering used throughout the package: 0=Sunday ... 6=Saturday
SUNDAY = 0
SATURDAY = 6


def weekday_number(dt: datetime) -> int:
    """Return the weekday of ``dt`` with Sunday as 0 and Saturday as 6."""
    return dt.isoweekday() % 7


class DayType(str, Enum):
    """Which of the three weekly timetables applies to a date."""

    WEEKDAY = "weekday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_weekday_number(cls, number: int) -> "DayType":
        if number == SUNDAY:
            return cls.SUNDAY
        if number == SATURDAY:
            return cls.SATURDAY
        return cls.WEEKDAY

    @classmethod
    def for_date(cls, dt: datetime) -> "DayType":
        """Select the day type from the calendar weekday of ``dt``."""
        return cls.from_weekday_number(weekday_number(dt))


@dataclass(frozen=True)
class Timetable:
    """
    All scheduled departures for one day type.

    Maps hour-of-day to the ascending minutes at which a bus leaves.
    Hours without any minutes are dropped, so every key has at least one
    departure.

    Invariant: hours are within 0-23 and minutes within 0-59.
    """
    day_type: DayType
    departures: Mapping[int, Tuple[int, ...]] = field(default_factory=dict)

    def __post_init__(self):
        normalized: Dict[int, Tuple[int, ...]] = {}
        for hour, minutes in self.departures.items():
            if not 0 <= hour <= 23:
                raise ValueError(f"Hour must be between 0 and 23, got {hour}")
            invalid = [m for m in minutes if not 0 <= m <= 59]
            if invalid:
                raise ValueError(f"Minutes must be between 0 and 59, got {invalid} at hour {hour}")
            if minutes:
                normalized[hour] = tuple(sorted(minutes))
        # Frozen dataclass: replace the mapping with a read-only, key-ordered view
        object.__setattr__(self, "departures", MappingProxyType(dict(sorted(normalized.items()))))

    def __hash__(self) -> int:
        return hash((self.day_type, tuple(self.departures.items())))

    @classmethod
    def from_rows(cls, day_type: DayType, rows: Mapping[int, Sequence[int]]) -> "Timetable":
        return cls(day_type=day_type, departures={h: tuple(m) for h, m in rows.items()})

    def is_empty(self) -> bool:
        return not self.departures

    @property
    def hours(self) -> Tuple[int, ...]:
        return tuple(self.departures.keys())

    @property
    def first_hour(self) -> int | None:
        """Earliest hour with a departure (None for an empty timetable)."""
        return self.hours[0] if self.departures else None

    @property
    def last_hour(self) -> int | None:
        """Latest hour with a departure (None for an empty timetable)."""
        return self.hours[-1] if self.departures else None

    def minutes_at(self, hour: int) -> Tuple[int, ...]:
        return self.departures.get(hour, ())

    def next_hour_after(self, hour: int) -> int | None:
        """Return the first hour later than ``hour`` that has departures."""
        for candidate in self.hours:
            if candidate > hour:
                return candidate
        return None

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        for hour, minutes in self.departures.items():
            for minute in minutes:
                yield hour, minute

    def __len__(self) -> int:
        return sum(len(minutes) for minutes in self.departures.values())


@dataclass(frozen=True)
class DepartureCandidates:
    """
    The next two departures after a reference instant.

    ``second`` is only ever set when ``first`` is.
    """
    first: DateTime | None = None
    second: DateTime | None = None

    def __post_init__(self):
        if self.first is None and self.second is not None:
            raise ValueError("Second departure cannot exist without a first one")
        if self.first is not None and self.second is not None and self.second <= self.first:
            raise ValueError(f"Second departure {self.second} must be after first {self.first}")

    @property
    def has_departure(self) -> bool:
        return self.first is not None

    def as_tuple(self) -> Tuple[DateTime | None, DateTime | None]:
        return self.first, self.second
