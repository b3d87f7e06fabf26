"""
Translation between spoken Japanese phrases and calendar values.

Covers day-of-week phrases ("月曜", "週末", ...), time and date slot values
as delivered by the voice platform, and the spoken rendering of departure
times.
"""

import re
from enum import Enum
from typing import Dict

import pendulum
from pendulum import DateTime

from .models import weekday_number


class CollectiveDayPolicy(str, Enum):
    """How phrases naming several days at once ("週末", "平日") resolve."""

    # Collective terms name no single day: resolve to None so the caller re-prompts
    AMBIGUOUS = "ambiguous"
    # Collective terms stand for a representative day: 週末/土日 -> Sunday, 平日 -> Monday
    REPRESENTATIVE = "representative"


class OnTheHourStyle(str, Enum):
    """How a departure at minute zero is spoken."""

    OMIT_MINUTES = "omit_minutes"      # 08時
    ALWAYS_MINUTES = "always_minutes"  # 08時00分


SPECIFIC_DAYS: Dict[str, int] = {
    "月曜": 1,
    "火曜": 2,
    "水曜": 3,
    "木曜": 4,
    "金曜": 5,
    "土曜": 6,
    "日曜": 0,
}

COLLECTIVE_DAYS: Dict[str, int] = {
    "土日": 0,
    "週末": 0,
    "平日": 1,
}

WEEKDAY_NAMES: Dict[int, str] = {
    1: "月",
    2: "火",
    3: "水",
    4: "木",
    5: "金",
    6: "土",
    0: "日",
}

_DAY_PATTERN = re.compile("|".join([*SPECIFIC_DAYS, *COLLECTIVE_DAYS]))
_TIME_SLOT_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def day_of_week_to_number(
    phrase: str | None,
    policy: CollectiveDayPolicy = CollectiveDayPolicy.AMBIGUOUS,
) -> int | None:
    """
    Resolve a spoken day-of-week phrase to a weekday number (0=Sunday).

    Returns None when the phrase names no known day, or names a collective
    term while ``policy`` is AMBIGUOUS.
    """
    if not phrase:
        return None

    match = _DAY_PATTERN.search(phrase)
    if match is None:
        return None

    key = match.group(0)
    if key in SPECIFIC_DAYS:
        return SPECIFIC_DAYS[key]

    if policy is CollectiveDayPolicy.REPRESENTATIVE:
        return COLLECTIVE_DAYS[key]
    return None


def day_of_week_to_name(number: int) -> str:
    """Single-character Japanese weekday name for a weekday number."""
    return WEEKDAY_NAMES[number]


def date_for_day_of_week(day_of_week: int, today: DateTime) -> DateTime:
    """
    Date of ``day_of_week`` within the Sunday-start week containing ``today``.

    The result may lie in the past: asking for Monday on a Wednesday yields
    the Monday two days earlier.
    """
    if not 0 <= day_of_week <= 6:
        raise ValueError(f"Day of week must be between 0 and 6, got {day_of_week}")

    week_start = today.start_of("day").subtract(days=weekday_number(today))
    return week_start.add(days=day_of_week)


def parse_time_slot(value: str | None) -> tuple[int, int] | None:
    """Parse an ``HH:MM`` slot value; anything else yields None."""
    if not value:
        return None

    match = _TIME_SLOT_PATTERN.match(value.strip())
    if match is None:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour, minute


def parse_date_slot(value: str | None, tz: str) -> DateTime | None:
    """Parse a ``YYYY-MM-DD`` slot value into the start of that day in ``tz``."""
    if not value:
        return None

    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD", tz=tz).start_of("day")
    except ValueError:
        return None


def time_to_phrase(dt: DateTime, style: OnTheHourStyle = OnTheHourStyle.OMIT_MINUTES) -> str:
    """Render a departure time the way it is spoken, e.g. ``08時15分``."""
    hour = f"{dt.hour:02d}"
    minute = f"{dt.minute:02d}"

    if dt.minute == 0 and style is OnTheHourStyle.OMIT_MINUTES:
        return f"{hour}時"
    return f"{hour}時{minute}分"


def date_to_phrase(dt: DateTime) -> str:
    """Render a date as ``MM月DD日X曜日``."""
    return f"{dt.month:02d}月{dt.day:02d}日{day_of_week_to_name(weekday_number(dt))}曜日"
