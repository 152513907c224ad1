"""
Domain models for bookings, resources and calendar occurrences.
"""

from dataclasses import dataclass
from datetime import date, time
from enum import IntEnum, IntFlag
from typing import Any, Dict, Iterable

from pendulum import DateTime


class RepeatOption(IntEnum):
    """How a booking repeats after its first date."""
    DOES_NOT_REPEAT = 0
    DAILY = 1
    WEEKLY = 2

    @classmethod
    def parse(cls, value: "str | int | RepeatOption") -> "RepeatOption":
        """
        Parse a repeat option from its name or numeric value.

        Accepts ``none`` as an alias for ``DOES_NOT_REPEAT``.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        if not isinstance(value, str):
            raise ValueError(
                f"Unknown repeat option: {value!r}. Use none, daily or weekly."
            )

        key = value.strip().upper().replace("-", "_").replace(" ", "_")
        if key in ("NONE", "NO", "ONCE"):
            return cls.DOES_NOT_REPEAT
        try:
            return cls[key]
        except KeyError:
            raise ValueError(
                f"Unknown repeat option: '{value}'. Use none, daily or weekly."
            ) from None


class DaysOfWeek(IntFlag):
    """
    Weekday selector stored with a booking.

    Expansion does not read it: weekly bookings repeat every 7 days from the
    booking date whatever is selected here.
    """
    NONE = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 4
    THURSDAY = 8
    FRIDAY = 16
    SATURDAY = 32
    SUNDAY = 64

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "DaysOfWeek":
        """Combine weekday names (``monday``, ``Fri`` ...) into one flag."""
        result = cls.NONE
        for name in names:
            if not isinstance(name, str):
                raise ValueError(f"Unknown weekday: {name!r}")
            key = name.strip().upper()
            matches = [
                day for day in cls
                if day is not cls.NONE and day.name.startswith(key[:3])
            ] if len(key) >= 3 else []
            if not matches:
                raise ValueError(f"Unknown weekday: '{name}'")
            result |= matches[0]
        return result

    def names(self) -> list[str]:
        """Return the selected weekday names in calendar order."""
        return [
            day.name.lower() for day in type(self)
            if day is not type(self).NONE and day in self
        ]


@dataclass(frozen=True)
class Resource:
    """A bookable resource such as a car."""
    resource_id: str
    make: str
    model: str

    @property
    def label(self) -> str:
        """Display label used on calendar occurrences."""
        return self.model

    def __str__(self) -> str:
        return f"{self.make} {self.model}"


@dataclass(frozen=True)
class Booking:
    """
    A stored booking, possibly recurring.

    Invariants: start_time is before end_time, end_repeat_date is only set for
    repeating bookings and never precedes booking_date.
    """
    booking_id: str
    resource_id: str | None
    booking_date: date
    start_time: time
    end_time: time
    repeat_option: RepeatOption = RepeatOption.DOES_NOT_REPEAT
    end_repeat_date: date | None = None
    days_to_repeat_on: DaysOfWeek = DaysOfWeek.NONE
    requested_on: DateTime | None = None

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Start time {self.start_time} must be before end time {self.end_time}"
            )
        if self.end_repeat_date is not None:
            if self.repeat_option == RepeatOption.DOES_NOT_REPEAT:
                raise ValueError("end_repeat_date is only allowed on repeating bookings")
            if self.end_repeat_date < self.booking_date:
                raise ValueError(
                    f"End repeat date {self.end_repeat_date} is before "
                    f"booking date {self.booking_date}"
                )

    @property
    def repeat_bound(self) -> date:
        """Latest date this booking may occur on."""
        return self.end_repeat_date or self.booking_date

    @property
    def is_recurring(self) -> bool:
        return self.repeat_option != RepeatOption.DOES_NOT_REPEAT


@dataclass(frozen=True)
class Occurrence:
    """
    One concrete calendar date of a booking.

    Occurrences are derived per query and never stored.
    """
    date: date
    resource_label: str
    start_time: time
    end_time: time

    def to_payload(self) -> Dict[str, Any]:
        """Render the response shape used by API consumers."""
        return {
            "date": self.date.isoformat(),
            "resourceLabel": self.resource_label,
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
        }
