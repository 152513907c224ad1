"""
Flattening of expanded bookings into display-ready calendar occurrences.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Mapping

from .models import Booking, Occurrence, Resource
from .recurrence import RecurrenceExpander

logger = logging.getLogger(__name__)

UNKNOWN_RESOURCE_LABEL = "Unknown"


class CalendarAggregator:
    """
    Expands a collection of bookings over a shared window.

    Occurrences come out grouped by source booking in input order, ascending
    by date within each booking. Nothing is sorted or deduplicated across
    bookings.
    """

    def __init__(
        self,
        expander: RecurrenceExpander | None = None,
        unknown_label: str = UNKNOWN_RESOURCE_LABEL,
    ):
        self.expander = expander or RecurrenceExpander()
        self.unknown_label = unknown_label

    def aggregate(
        self,
        bookings: Iterable[Booking],
        window_start: date,
        window_end: date,
        resources: Mapping[str, Resource] | None = None,
    ) -> List[Occurrence]:
        """
        Expand every booking and collect its occurrences.

        Args:
            bookings: Bookings to expand, in display order
            window_start: First date of the window (inclusive)
            window_end: Last date of the window (inclusive)
            resources: Known resources keyed by resource id

        Returns:
            List of Occurrence objects
        """
        resources = resources or {}
        occurrences: List[Occurrence] = []

        for booking in bookings:
            dates = self.expander.expand(booking, window_start, window_end)
            if not dates:
                continue

            label = self._resolve_label(booking, resources)
            occurrences.extend(
                Occurrence(
                    date=occurrence_date,
                    resource_label=label,
                    start_time=booking.start_time,
                    end_time=booking.end_time,
                )
                for occurrence_date in dates
            )

        return occurrences

    def _resolve_label(self, booking: Booking, resources: Mapping[str, Resource]) -> str:
        resource = resources.get(booking.resource_id) if booking.resource_id else None
        if resource is None:
            logger.warning(
                "Booking %s references unknown resource %r, using label %r",
                booking.booking_id, booking.resource_id, self.unknown_label,
            )
            return self.unknown_label
        return resource.label

    @staticmethod
    def group_by_date(occurrences: Iterable[Occurrence]) -> Dict[date, List[Occurrence]]:
        """
        Bucket occurrences per calendar date.

        Buckets are ordered by date; each keeps the order occurrences were
        supplied in.
        """
        buckets: Dict[date, List[Occurrence]] = {}
        for occurrence in occurrences:
            buckets.setdefault(occurrence.date, []).append(occurrence)
        return {day: buckets[day] for day in sorted(buckets)}
