"""
Application service answering "when is the next bus?".

The service selects the day type for a reference instant, loads the
matching timetable through a store adapter and delegates the actual lookup
to the domain-level ``DepartureResolver``. Keeping the store behind a
protocol lets tests hand in timetables built in memory.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Protocol

import pendulum
from pendulum import DateTime

from ..adapters.timetable_store import CsvTimetableStore
from ..config import AppConfig
from ..domain.departure_resolver import DepartureResolver
from ..domain.models import DayType, DepartureCandidates, Timetable
from ..domain.phrases import (
    CollectiveDayPolicy,
    OnTheHourStyle,
    date_for_day_of_week,
    day_of_week_to_number,
    parse_date_slot,
    parse_time_slot,
    time_to_phrase,
)

logger = logging.getLogger(__name__)


SERVICE_TIMEZONE = "Asia/Tokyo"

NO_MORE_BUSES = "今日の便はもうありません。"


class TimetableStoreProtocol(Protocol):
    """Protocol describing the timetable store behaviour needed by the service."""

    def load_timetable(self, day_type: DayType) -> Timetable:
        """Return the timetable for ``day_type`` or raise DataFormatError."""


class NextBusService:
    """
    Orchestrates timetable loading, departure lookup and answer wording.

    All instants are handled in Japan Standard Time regardless of the host
    clock's zone.
    """

    def __init__(
        self,
        timetable_store: TimetableStoreProtocol,
        resolver: DepartureResolver | None = None,
        *,
        collective_days: CollectiveDayPolicy = CollectiveDayPolicy.AMBIGUOUS,
        on_the_hour: OnTheHourStyle = OnTheHourStyle.OMIT_MINUTES,
        clock: Callable[[], DateTime] | None = None,
    ) -> None:
        self._store = timetable_store
        self._resolver = resolver or DepartureResolver()
        self.timezone = SERVICE_TIMEZONE
        self.collective_days = collective_days
        self.on_the_hour = on_the_hour
        self._clock = clock or (lambda: pendulum.now(self.timezone))

    def now(self) -> DateTime:
        """Current instant in the service timezone."""
        return self.normalize(self._clock())

    def normalize(self, reference: datetime) -> DateTime:
        """
        Bring ``reference`` into the service timezone.

        Naive datetimes are taken to already be service-local time.
        """
        return pendulum.instance(reference, tz=self.timezone).in_timezone(self.timezone)

    def load_timetable(self, day_type: DayType) -> Timetable:
        return self._store.load_timetable(day_type)

    def next_departures(self, reference: datetime) -> DepartureCandidates:
        """
        Find the next two departures strictly after ``reference``.

        Raises:
            DataFormatError: If the matching timetable cannot be loaded
        """
        local = self.normalize(reference)
        day_type = DayType.for_date(local)
        timetable = self.load_timetable(day_type)

        candidates = self._resolver.find_next_departures(timetable, local)
        logger.debug(
            "Departures after %s (%s): %s",
            local.to_datetime_string(), day_type.value, candidates.as_tuple(),
        )
        return candidates

    def resolve_reference(
        self,
        time_slot: str | None,
        date_slot: str | None = None,
        day_of_week_slot: str | None = None,
    ) -> DateTime | None:
        """
        Combine spoken slot values into a reference instant.

        The day-of-week slot wins over the date slot, which wins over today.
        Returns None when the time does not parse, the date does not parse or
        the day-of-week phrase names no single day; the caller re-prompts.
        """
        parsed_time = parse_time_slot(time_slot)
        if parsed_time is None:
            return None

        day = self.resolve_day(date_slot=date_slot, day_of_week_slot=day_of_week_slot)
        if day is None:
            return None

        hour, minute = parsed_time
        return day.set(hour=hour, minute=minute, second=0, microsecond=0)

    def resolve_day(
        self,
        date_slot: str | None = None,
        day_of_week_slot: str | None = None,
    ) -> DateTime | None:
        """Start of the day the user asked about, or None if it is unclear."""
        if day_of_week_slot:
            number = day_of_week_to_number(day_of_week_slot, self.collective_days)
            if number is None:
                logger.info("Day-of-week phrase %r does not name a single day", day_of_week_slot)
                return None
            return date_for_day_of_week(number, self.now())

        if date_slot:
            return parse_date_slot(date_slot, self.timezone)

        return self.now().start_of("day")

    def answer_now(self) -> str:
        return self.answer_at(self.now())

    def answer_at(self, reference: datetime) -> str:
        return self.format_answer(self.next_departures(reference))

    def format_answer(self, candidates: DepartureCandidates) -> str:
        """Word the departures as the spoken answer sentence."""
        first, second = candidates.as_tuple()

        if first is None:
            return NO_MORE_BUSES
        if second is None:
            return f"次の便は{time_to_phrase(first, self.on_the_hour)}で、その次はもうありません。"
        return (
            f"次の便は{time_to_phrase(first, self.on_the_hour)}で、"
            f"その次は{time_to_phrase(second, self.on_the_hour)}です。"
        )


def create_service(config: AppConfig) -> NextBusService:
    """Wire a NextBusService backed by CSV timetables from configuration."""
    store = CsvTimetableStore(
        data_dir=config.timetables.directory,
        filenames=config.timetables.filenames(),
        cache=config.timetables.cache,
    )
    return NextBusService(
        timetable_store=store,
        collective_days=config.phrases.collective_days,
        on_the_hour=config.phrases.on_the_hour,
    )
