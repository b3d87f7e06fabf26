"""
Domain-specific exception hierarchy for the nextbus application.
"""


class NextBusError(Exception):
    """Base class for all application-level errors."""


class DataFormatError(NextBusError):
    """Raised when timetable data is missing, unreadable or malformed."""


class ConfigurationError(NextBusError):
    """Raised when required configuration values are absent."""


class SignedUrlError(NextBusError):
    """Raised when a pre-signed asset URL cannot be generated."""
