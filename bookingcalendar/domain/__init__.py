"""
Domain layer - Pure business logic without external dependencies.
"""

from .calendar import CalendarAggregator
from .conflicts import ConflictChecker
from .models import Booking, DaysOfWeek, Occurrence, RepeatOption, Resource
from .recurrence import RecurrenceExpander

__all__ = [
    "Booking",
    "CalendarAggregator",
    "ConflictChecker",
    "DaysOfWeek",
    "Occurrence",
    "RecurrenceExpander",
    "RepeatOption",
    "Resource",
]
