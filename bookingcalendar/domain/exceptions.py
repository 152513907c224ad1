"""
Domain-specific exception hierarchy for the booking calendar application.
"""


class BookingCalendarError(Exception):
    """Base class for all application-level errors."""


class RepositoryError(BookingCalendarError):
    """Raised when booking data cannot be read, parsed or written."""
