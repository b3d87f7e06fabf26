"""
Domain layer - Pure business logic without external dependencies.
"""

from .departure_resolver import DepartureResolver
from .exceptions import DataFormatError, NextBusError
from .models import DayType, DepartureCandidates, Timetable

__all__ = [
    "DataFormatError",
    "DayType",
    "DepartureCandidates",
    "DepartureResolver",
    "NextBusError",
    "Timetable",
]
