"""
Expansion of booking recurrence rules into concrete dates.

Pure domain logic: no I/O and no state kept between calls.
"""

import logging
from datetime import date
from typing import Dict, List

import pendulum
from pendulum import Date

from .models import Booking, RepeatOption

logger = logging.getLogger(__name__)


# Days between two occurrences of a repeating booking.
CADENCE_STEP_DAYS: Dict[RepeatOption, int] = {
    RepeatOption.DAILY: 1,
    RepeatOption.WEEKLY: 7,
}


def as_date(value: date) -> Date:
    """Convert any ``datetime.date`` into a pendulum ``Date``."""
    if isinstance(value, Date) and not isinstance(value, pendulum.DateTime):
        return value
    return pendulum.date(value.year, value.month, value.day)


class RecurrenceExpander:
    """
    Turns one booking and a query window into its occurrence dates.

    Algorithm:
    1. Compute the loop limit once: the earlier of the booking's repeat bound
       and the window end
    2. Walk a cursor from the booking date up to that limit
    3. Emit every cursor date that is not before the window start
    4. Step the cursor by the booking's cadence

    The cursor only ever moves forward, so the result is strictly ascending
    and free of duplicates.
    """

    def expand(self, booking: Booking, window_start: date, window_end: date) -> List[Date]:
        """
        Return the dates on which ``booking`` occurs inside the window.

        Args:
            booking: Booking to expand
            window_start: First date of the window (inclusive)
            window_end: Last date of the window (inclusive)

        Returns:
            Ascending list of distinct dates, empty for an inverted window
        """
        if window_start > window_end:
            logger.debug(
                "Inverted window %s > %s for booking %s",
                window_start, window_end, booking.booking_id,
            )
            return []

        start = as_date(window_start)
        repeat_bound = as_date(booking.repeat_bound)
        limit = min(repeat_bound, as_date(window_end))

        dates: List[Date] = []
        cursor = as_date(booking.booking_date)

        while cursor <= limit:
            if cursor >= start:
                dates.append(cursor)

            if booking.repeat_option == RepeatOption.DOES_NOT_REPEAT:
                break

            cursor = self._next_cursor(cursor, booking.repeat_option, repeat_bound)

        return dates

    @staticmethod
    def _next_cursor(cursor: Date, repeat_option: RepeatOption, repeat_bound: Date) -> Date:
        """
        Step the cursor according to the cadence.

        An option without a cadence entry jumps past the repeat bound, which
        ends the expansion after the occurrence already emitted.
        """
        step = CADENCE_STEP_DAYS.get(repeat_option)

        if step is None:
            logger.warning(
                "No cadence for repeat option %r, ending expansion at repeat bound",
                repeat_option,
            )
            return repeat_bound.add(days=1)

        return cursor.add(days=step)
