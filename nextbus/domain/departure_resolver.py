"""
Core lookup for the nearest scheduled departures.

Pure domain logic: the timetable is handed in already loaded, so nothing
here touches files, clocks or the network.
"""

from pendulum import DateTime

from .models import DepartureCandidates, Timetable


class DepartureResolver:
    """
    Finds the next departures after a reference instant in one timetable.

    Algorithm (nearest departure for a target instant):
    1. Before the first service hour, snap to the day's first departure
    2. After the last service hour, there is nothing left today
    3. Within the target hour, take the first minute strictly after the target
    4. Otherwise roll forward to the next hour that has departures

    The second departure is the nearest departure after the first one.
    """

    def find_next_departures(self, timetable: Timetable, reference: DateTime) -> DepartureCandidates:
        """
        Compute the first and second departures after ``reference``.

        Args:
            timetable: Timetable matching the reference instant's day type
            reference: Instant already normalized to the service timezone

        Returns:
            DepartureCandidates, with absent entries when service has ended
        """
        first = self.nearest_departure(timetable, reference)
        if first is None:
            return DepartureCandidates()

        second = self.nearest_departure(timetable, first)
        return DepartureCandidates(first=first, second=second)

    def nearest_departure(self, timetable: Timetable, target: DateTime) -> DateTime | None:
        """
        Return the first departure strictly after ``target`` on the same day.

        Returns None when the timetable has no later departure that day.
        """
        if timetable.is_empty():
            return None

        hour, minute = target.hour, target.minute

        if hour < timetable.first_hour:
            first_hour = timetable.first_hour
            return self._at(target, first_hour, timetable.minutes_at(first_hour)[0])

        if hour > timetable.last_hour:
            return None

        for candidate in timetable.minutes_at(hour):
            if candidate > minute:
                return self._at(target, hour, candidate)

        # Nothing left this hour; skip any hours without departures
        next_hour = timetable.next_hour_after(hour)
        if next_hour is None:
            return None

        return self._at(target, next_hour, timetable.minutes_at(next_hour)[0])

    @staticmethod
    def _at(day: DateTime, hour: int, minute: int) -> DateTime:
        return day.set(hour=hour, minute=minute, second=0, microsecond=0)
