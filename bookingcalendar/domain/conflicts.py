"""
Conflict detection between a candidate booking and stored bookings.
"""

from typing import Iterable, List

from .models import Booking


class ConflictChecker:
    """
    Decides whether a candidate booking collides with existing bookings.

    Two bookings collide when they share the resource and the stored booking
    date and their time-of-day intervals overlap. Intervals are half-open, so
    a booking ending at 12:00 does not collide with one starting at 12:00.

    Only the stored booking date is compared. Later occurrences of a recurring
    booking are not expanded here.
    """

    def has_conflict(self, candidate: Booking, existing: Iterable[Booking]) -> bool:
        """Check if the candidate collides with any existing booking."""
        return any(self._collides(candidate, booking) for booking in existing)

    def find_conflicts(self, candidate: Booking, existing: Iterable[Booking]) -> List[Booking]:
        """Return the existing bookings the candidate collides with."""
        return [booking for booking in existing if self._collides(candidate, booking)]

    @staticmethod
    def _collides(candidate: Booking, booking: Booking) -> bool:
        return (
            booking.resource_id == candidate.resource_id
            and booking.booking_date == candidate.booking_date
            and booking.start_time < candidate.end_time
            and booking.end_time > candidate.start_time
        )
