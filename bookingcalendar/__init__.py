"""
bookingcalendar - Expand recurring resource bookings and detect conflicts.
"""

__version__ = "0.1.0"
