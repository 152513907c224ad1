"""
Tests for domain models.
"""

import pendulum
import pytest
from datetime import time

from bookingcalendar.domain.models import Booking, DaysOfWeek, Occurrence, RepeatOption, Resource


class TestBooking:
    """Tests for Booking model."""

    def test_create_valid_booking(self):
        """Test creating a valid recurring booking."""
        booking = Booking(
            booking_id="b1",
            resource_id="civic",
            booking_date=pendulum.date(2025, 2, 10),
            start_time=time(14, 0),
            end_time=time(16, 0),
            repeat_option=RepeatOption.DAILY,
            end_repeat_date=pendulum.date(2025, 2, 20),
        )

        assert booking.is_recurring
        assert booking.repeat_bound == pendulum.date(2025, 2, 20)
        assert booking.days_to_repeat_on == DaysOfWeek.NONE

    def test_repeat_bound_defaults_to_booking_date(self):
        """Without an end repeat date a booking is bounded by its own date."""
        booking = Booking(
            booking_id="b1",
            resource_id="civic",
            booking_date=pendulum.date(2025, 2, 5),
            start_time=time(10, 0),
            end_time=time(12, 0),
        )

        assert not booking.is_recurring
        assert booking.repeat_bound == pendulum.date(2025, 2, 5)

    def test_start_after_end_raises_error(self):
        """Test that an inverted time window raises ValueError."""
        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            Booking(
                booking_id="b1",
                resource_id="civic",
                booking_date=pendulum.date(2025, 2, 5),
                start_time=time(12, 0),
                end_time=time(10, 0),
            )

    def test_equal_start_and_end_raises_error(self):
        with pytest.raises(ValueError):
            Booking(
                booking_id="b1",
                resource_id="civic",
                booking_date=pendulum.date(2025, 2, 5),
                start_time=time(10, 0),
                end_time=time(10, 0),
            )

    def test_end_repeat_date_before_booking_date_raises_error(self):
        with pytest.raises(ValueError, match="End repeat date"):
            Booking(
                booking_id="b1",
                resource_id="civic",
                booking_date=pendulum.date(2025, 2, 10),
                start_time=time(10, 0),
                end_time=time(12, 0),
                repeat_option=RepeatOption.WEEKLY,
                end_repeat_date=pendulum.date(2025, 2, 1),
            )

    def test_end_repeat_date_on_single_booking_raises_error(self):
        with pytest.raises(ValueError, match="only allowed on repeating bookings"):
            Booking(
                booking_id="b1",
                resource_id="civic",
                booking_date=pendulum.date(2025, 2, 10),
                start_time=time(10, 0),
                end_time=time(12, 0),
                end_repeat_date=pendulum.date(2025, 2, 12),
            )


class TestRepeatOption:
    """Tests for RepeatOption parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("none", RepeatOption.DOES_NOT_REPEAT),
            ("does-not-repeat", RepeatOption.DOES_NOT_REPEAT),
            ("Daily", RepeatOption.DAILY),
            ("WEEKLY", RepeatOption.WEEKLY),
            (2, RepeatOption.WEEKLY),
            (RepeatOption.DAILY, RepeatOption.DAILY),
        ],
    )
    def test_parse(self, value, expected):
        assert RepeatOption.parse(value) is expected

    def test_parse_unknown_raises_error(self):
        with pytest.raises(ValueError, match="Unknown repeat option"):
            RepeatOption.parse("monthly")

    @pytest.mark.parametrize("value", [None, 1.5, ["daily"]])
    def test_parse_non_string_raises_value_error(self, value):
        with pytest.raises(ValueError, match="Unknown repeat option"):
            RepeatOption.parse(value)


class TestDaysOfWeek:
    """Tests for the weekday selector."""

    def test_from_names(self):
        days = DaysOfWeek.from_names(["monday", "Fri"])

        assert days == DaysOfWeek.MONDAY | DaysOfWeek.FRIDAY
        assert days.names() == ["monday", "friday"]

    def test_from_names_empty(self):
        assert DaysOfWeek.from_names([]) == DaysOfWeek.NONE
        assert DaysOfWeek.NONE.names() == []

    def test_from_names_unknown_raises_error(self):
        with pytest.raises(ValueError, match="Unknown weekday"):
            DaysOfWeek.from_names(["someday"])

    def test_from_names_non_string_raises_error(self):
        with pytest.raises(ValueError, match="Unknown weekday"):
            DaysOfWeek.from_names([1])


class TestResourceAndOccurrence:
    """Tests for Resource labels and Occurrence payloads."""

    def test_resource_label_is_model(self):
        resource = Resource(resource_id="civic", make="Honda", model="Civic")

        assert resource.label == "Civic"
        assert str(resource) == "Honda Civic"

    def test_occurrence_payload(self):
        occurrence = Occurrence(
            date=pendulum.date(2025, 2, 15),
            resource_label="Focus",
            start_time=time(9, 0),
            end_time=time(10, 30),
        )

        assert occurrence.to_payload() == {
            "date": "2025-02-15",
            "resourceLabel": "Focus",
            "startTime": "09:00:00",
            "endTime": "10:30:00",
        }

    def test_occurrence_payload_keeps_seconds(self):
        occurrence = Occurrence(
            date=pendulum.date(2025, 2, 15),
            resource_label="Focus",
            start_time=time(9, 0, 30),
            end_time=time(10, 30, 15),
        )

        payload = occurrence.to_payload()

        assert payload["startTime"] == "09:00:30"
        assert payload["endTime"] == "10:30:15"
