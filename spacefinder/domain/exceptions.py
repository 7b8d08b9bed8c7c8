"""
Domain-specific exception hierarchy for the spacefinder application.
"""


class SpacefinderError(Exception):
    """Base class for all application-level errors."""


class InvalidTimeRangeError(SpacefinderError, ValueError):
    """Raised when a time range is zero-length, inverted or outside business hours."""


class InvalidQueryError(SpacefinderError):
    """Raised when an availability query fails validation."""


class WorkspaceNotFoundError(SpacefinderError):
    """Raised when a requested workspace does not exist."""


class BookingRejectedError(SpacefinderError):
    """Raised when a candidate booking cannot be accepted."""


class ReservationSourceError(SpacefinderError):
    """Raised when workspaces or reservations cannot be fetched or parsed."""
