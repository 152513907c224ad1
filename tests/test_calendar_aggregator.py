"""
Tests for calendar aggregation.
"""

from datetime import time

import pendulum

from bookingcalendar.domain.calendar import CalendarAggregator
from bookingcalendar.domain.models import Booking, RepeatOption, Resource

RESOURCES = {
    "corolla": Resource(resource_id="corolla", make="Toyota", model="Corolla"),
    "civic": Resource(resource_id="civic", make="Honda", model="Civic"),
}


class TestCalendarAggregator:
    """Tests for CalendarAggregator."""

    def test_grouped_by_booking_not_sorted_by_date(self):
        """Occurrences keep the booking order instead of a global date order."""
        booking_a = Booking(
            booking_id="A",
            resource_id="corolla",
            booking_date=pendulum.date(2025, 3, 1),
            start_time=time(9, 0),
            end_time=time(10, 0),
            repeat_option=RepeatOption.DAILY,
            end_repeat_date=pendulum.date(2025, 3, 3),
        )
        booking_b = Booking(
            booking_id="B",
            resource_id="civic",
            booking_date=pendulum.date(2025, 3, 2),
            start_time=time(11, 0),
            end_time=time(12, 0),
        )

        occurrences = CalendarAggregator().aggregate(
            [booking_a, booking_b],
            pendulum.date(2025, 3, 1),
            pendulum.date(2025, 3, 31),
            resources=RESOURCES,
        )

        assert [(o.resource_label, o.date.day) for o in occurrences] == [
            ("Corolla", 1),
            ("Corolla", 2),
            ("Corolla", 3),
            ("Civic", 2),
        ]
        assert occurrences[-1].start_time == time(11, 0)
        assert occurrences[-1].end_time == time(12, 0)

    def test_same_date_from_two_bookings_both_appear(self):
        first = Booking(
            booking_id="1",
            resource_id="civic",
            booking_date=pendulum.date(2025, 3, 2),
            start_time=time(8, 0),
            end_time=time(9, 0),
        )
        second = Booking(
            booking_id="2",
            resource_id="civic",
            booking_date=pendulum.date(2025, 3, 2),
            start_time=time(10, 0),
            end_time=time(11, 0),
        )

        occurrences = CalendarAggregator().aggregate(
            [first, second],
            pendulum.date(2025, 3, 1),
            pendulum.date(2025, 3, 31),
            resources=RESOURCES,
        )

        assert len(occurrences) == 2

    def test_unresolved_resource_uses_sentinel_label(self):
        """A missing resource does not stop aggregation of other bookings."""
        orphan = Booking(
            booking_id="orphan",
            resource_id="gone",
            booking_date=pendulum.date(2025, 3, 2),
            start_time=time(8, 0),
            end_time=time(9, 0),
        )
        unset = Booking(
            booking_id="unset",
            resource_id=None,
            booking_date=pendulum.date(2025, 3, 3),
            start_time=time(8, 0),
            end_time=time(9, 0),
        )
        known = Booking(
            booking_id="known",
            resource_id="civic",
            booking_date=pendulum.date(2025, 3, 4),
            start_time=time(8, 0),
            end_time=time(9, 0),
        )

        occurrences = CalendarAggregator(unknown_label="n/a").aggregate(
            [orphan, unset, known],
            pendulum.date(2025, 3, 1),
            pendulum.date(2025, 3, 31),
            resources=RESOURCES,
        )

        assert [o.resource_label for o in occurrences] == ["n/a", "n/a", "Civic"]

    def test_default_sentinel_label(self):
        booking = Booking(
            booking_id="1",
            resource_id="civic",
            booking_date=pendulum.date(2025, 3, 2),
            start_time=time(8, 0),
            end_time=time(9, 0),
        )

        occurrences = CalendarAggregator().aggregate(
            [booking], pendulum.date(2025, 3, 1), pendulum.date(2025, 3, 31)
        )

        assert occurrences[0].resource_label == "Unknown"

    def test_inverted_window_is_empty(self):
        booking = Booking(
            booking_id="1",
            resource_id="civic",
            booking_date=pendulum.date(2025, 3, 2),
            start_time=time(8, 0),
            end_time=time(9, 0),
        )

        occurrences = CalendarAggregator().aggregate(
            [booking], pendulum.date(2025, 3, 31), pendulum.date(2025, 3, 1), resources=RESOURCES
        )

        assert occurrences == []

    def test_empty_collection(self):
        assert CalendarAggregator().aggregate([], pendulum.date(2025, 3, 1), pendulum.date(2025, 3, 31)) == []

    def test_group_by_date(self):
        weekly = Booking(
            booking_id="weekly",
            resource_id="civic",
            booking_date=pendulum.date(2025, 3, 7),
            start_time=time(8, 0),
            end_time=time(10, 0),
            repeat_option=RepeatOption.WEEKLY,
            end_repeat_date=pendulum.date(2025, 3, 14),
        )
        single = Booking(
            booking_id="single",
            resource_id="corolla",
            booking_date=pendulum.date(2025, 3, 7),
            start_time=time(11, 0),
            end_time=time(13, 0),
        )
        aggregator = CalendarAggregator()
        occurrences = aggregator.aggregate(
            [weekly, single],
            pendulum.date(2025, 3, 1),
            pendulum.date(2025, 3, 31),
            resources=RESOURCES,
        )

        grouped = aggregator.group_by_date(occurrences)

        assert list(grouped) == [pendulum.date(2025, 3, 7), pendulum.date(2025, 3, 14)]
        assert [o.resource_label for o in grouped[pendulum.date(2025, 3, 7)]] == ["Civic", "Corolla"]
        assert len(grouped[pendulum.date(2025, 3, 14)]) == 1
