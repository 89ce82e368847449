"""
Domain-specific exception hierarchy for the conflict finder application.
"""


class ConflictFinderError(Exception):
    """Base class for all application-level errors."""


class InvalidTimeRangeError(ConflictFinderError, ValueError):
    """Raised when a time range does not start before it ends."""


class EventNotFoundError(ConflictFinderError, KeyError):
    """Raised when an event id is not present in the store."""


class EventFileError(ConflictFinderError):
    """Raised when an event file cannot be read or parsed."""
