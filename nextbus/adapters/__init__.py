"""
Adapters layer - Timetable files and S3 asset URLs.
"""

from .signed_url import SignedUrlClient
from .timetable_store import CsvTimetableStore

__all__ = ["CsvTimetableStore", "SignedUrlClient"]
