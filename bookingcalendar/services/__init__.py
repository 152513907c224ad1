"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_calendar import (
    BookingCalendarService,
    BookingCreationResult,
    BookingRepositoryProtocol,
    BookingRequest,
)

__all__ = [
    "BookingCalendarService",
    "BookingCreationResult",
    "BookingRepositoryProtocol",
    "BookingRequest",
]
