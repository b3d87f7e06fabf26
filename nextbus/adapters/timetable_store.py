"""
CSV-backed timetable store.

Each day type has one CSV file whose rows read ``hour,minute[,minute...]``.
Rows vary in width; the first column is the hour and the rest are the
minutes of that hour at which a bus leaves.
"""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Dict, List, Mapping

from ..domain.exceptions import DataFormatError
from ..domain.models import DayType, Timetable

logger = logging.getLogger(__name__)


_DIGITS = re.compile(r"[0-9]+")

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"

DEFAULT_FILENAMES: Dict[DayType, str] = {
    DayType.WEEKDAY: "weekday.csv",
    DayType.SATURDAY: "saturday.csv",
    DayType.SUNDAY: "sunday.csv",
}


class CsvTimetableStore:
    """
    Loads timetables from one CSV file per day type.

    Parsed timetables are immutable, so with ``cache=True`` they are kept
    for the lifetime of the store and shared between lookups.
    """

    def __init__(
        self,
        data_dir: Path | None = None,
        filenames: Mapping[DayType, str] | None = None,
        cache: bool = False,
    ):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the CSV files (defaults to the bundled data)
            filenames: Optional per-day-type file name overrides
            cache: Keep parsed timetables in memory after the first load
        """
        self.data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
        self.filenames: Dict[DayType, str] = {**DEFAULT_FILENAMES, **(filenames or {})}
        self._cache_enabled = cache
        self._cache: Dict[DayType, Timetable] = {}

    def path_for(self, day_type: DayType) -> Path:
        return self.data_dir / self.filenames[day_type]

    def load_timetable(self, day_type: DayType) -> Timetable:
        """
        Load and parse the timetable for ``day_type``.

        Raises:
            DataFormatError: If the file is missing, unreadable or malformed
        """
        if day_type in self._cache:
            return self._cache[day_type]

        path = self.path_for(day_type)
        try:
            with open(path, "r", encoding="utf-8-sig", newline="") as f:
                rows = list(csv.reader(f))
        except OSError as exc:
            raise DataFormatError(f"Cannot read timetable for {day_type.value}: {path} ({exc})") from exc

        timetable = self._parse_rows(day_type, rows, source=path)
        logger.debug(
            "Loaded %s timetable from %s: %d departures across %d hours",
            day_type.value, path, len(timetable), len(timetable.hours),
        )

        if self._cache_enabled:
            self._cache[day_type] = timetable
        return timetable

    def clear_cache(self) -> None:
        self._cache.clear()

    @staticmethod
    def _parse_rows(day_type: DayType, rows: List[List[str]], source: Path) -> Timetable:
        """Turn raw CSV rows into a Timetable, rejecting anything malformed."""
        departures: Dict[int, List[int]] = {}

        for line_no, row in enumerate(rows, 1):
            cells = [cell.strip() for cell in row]
            if not any(cells):
                continue

            hour = _parse_int(cells[0], 0, 23)
            if hour is None:
                raise DataFormatError(
                    f"{source}:{line_no}: invalid hour {cells[0]!r} (expected an integer 0-23)"
                )
            if hour in departures:
                raise DataFormatError(f"{source}:{line_no}: duplicate row for hour {hour}")

            minutes: List[int] = []
            for cell in cells[1:]:
                if not cell:
                    continue
                minute = _parse_int(cell, 0, 59)
                if minute is None:
                    raise DataFormatError(
                        f"{source}:{line_no}: invalid minute {cell!r} (expected an integer 0-59)"
                    )
                minutes.append(minute)

            departures[hour] = minutes

        return Timetable.from_rows(day_type, departures)


def _parse_int(value: str, low: int, high: int) -> int | None:
    # ASCII digits only; int() alone also accepts signs and underscores
    if not _DIGITS.fullmatch(value):
        return None
    number = int(value)
    return number if low <= number <= high else None
