"""
Application services for booking calendars.

The service coordinates loading bookings via a repository adapter and
delegates recurrence expansion and conflict detection to the domain layer.
This keeps the CLI thin and improves testability by allowing the storage
dependency to be replaced via a simple protocol.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, time
from typing import Dict, List, Optional, Protocol

import pendulum
from pydantic import BaseModel, field_validator, model_validator

from ..domain.calendar import CalendarAggregator
from ..domain.conflicts import ConflictChecker
from ..domain.models import Booking, DaysOfWeek, Occurrence, RepeatOption, Resource

logger = logging.getLogger(__name__)


class BookingRepositoryProtocol(Protocol):
    """Protocol describing the storage behaviour needed by the service."""

    async def list_resources(self) -> List[Resource]:
        """Return all known resources."""

    async def get_resource(self, resource_id: str) -> Optional[Resource]:
        """Return a resource by id, or None."""

    async def find_candidate_bookings(
        self,
        resource_id: str,
        window_start: date,
        window_end: date,
    ) -> List[Booking]:
        """Return bookings of the resource whose dates could reach the window."""

    async def find_bookings_for_resource(self, resource_id: str) -> List[Booking]:
        """Return every stored booking of the resource."""

    async def add_booking(self, booking: Booking) -> None:
        """Persist a new booking."""


class BookingRequest(BaseModel):
    """Data supplied by a client to create a booking."""

    resource_id: str
    booking_date: date
    start_time: time
    end_time: time
    repeat_option: RepeatOption = RepeatOption.DOES_NOT_REPEAT
    end_repeat_date: Optional[date] = None
    days_to_repeat_on: Optional[DaysOfWeek] = None

    @field_validator("repeat_option", mode="before")
    @classmethod
    def parse_repeat_option(cls, value):
        """Accept repeat options by name as well as by value."""
        return RepeatOption.parse(value)

    @model_validator(mode="after")
    def validate_times(self) -> "BookingRequest":
        """Ensure the booking window and repeat range are consistent."""
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be later than start_time")
        if self.end_repeat_date is not None:
            if self.repeat_option == RepeatOption.DOES_NOT_REPEAT:
                raise ValueError("end_repeat_date requires a repeating booking")
            if self.end_repeat_date < self.booking_date:
                raise ValueError("end_repeat_date must not be before booking_date")
        return self

    def to_booking(self, booking_id: str, requested_on: pendulum.DateTime) -> Booking:
        """Build the stored booking record for this request."""
        return Booking(
            booking_id=booking_id,
            resource_id=self.resource_id,
            booking_date=self.booking_date,
            start_time=self.start_time,
            end_time=self.end_time,
            repeat_option=self.repeat_option,
            end_repeat_date=self.end_repeat_date,
            days_to_repeat_on=self.days_to_repeat_on or DaysOfWeek.NONE,
            requested_on=requested_on,
        )


@dataclass
class BookingCreationResult:
    """Outcome of a booking attempt."""
    created: bool
    booking: Booking | None = None
    reason: str = ""
    conflicts: List[Booking] = field(default_factory=list)


class BookingCalendarService:
    """
    Orchestrates booking retrieval, calendar expansion and conflict checks.

    Dependency inversion toward a protocol makes it easy to plug in the JSON
    file repository or an in-memory stub in tests.
    """

    CONFLICT_MESSAGE = "Booking time conflicts with an existing booking."

    def __init__(
        self,
        repository: BookingRepositoryProtocol,
        aggregator: CalendarAggregator | None = None,
        conflict_checker: ConflictChecker | None = None,
        timezone: str = "UTC",
    ) -> None:
        self._repository = repository
        self._aggregator = aggregator or CalendarAggregator()
        self._conflict_checker = conflict_checker or ConflictChecker()
        self._timezone = timezone

    async def get_calendar_occurrences(
        self,
        *,
        resource_id: str,
        window_start: date,
        window_end: date,
    ) -> List[Occurrence]:
        """
        Load candidate bookings for a resource and expand them over the window.
        """
        if window_start > window_end:
            logger.debug("Empty calendar for inverted window %s > %s", window_start, window_end)
            return []

        bookings = await self._repository.find_candidate_bookings(
            resource_id=resource_id,
            window_start=window_start,
            window_end=window_end,
        )
        resources = await self._resource_index()

        occurrences = self._aggregator.aggregate(
            bookings,
            window_start,
            window_end,
            resources=resources,
        )
        logger.debug(
            "Expanded %d booking(s) of %s into %d occurrence(s)",
            len(bookings), resource_id, len(occurrences),
        )
        return occurrences

    async def create_booking(self, request: BookingRequest) -> BookingCreationResult:
        """
        Check a booking request for conflicts and persist it if there are none.

        A conflict is reported through the result, nothing is stored then.
        """
        candidate = request.to_booking(
            booking_id=str(uuid.uuid4()),
            requested_on=pendulum.now(self._timezone),
        )

        existing = await self._repository.find_bookings_for_resource(request.resource_id)
        conflicts = self._conflict_checker.find_conflicts(candidate, existing)

        if conflicts:
            logger.info(
                "Rejected booking for %s on %s %s-%s: %d conflict(s)",
                candidate.resource_id,
                candidate.booking_date,
                candidate.start_time,
                candidate.end_time,
                len(conflicts),
            )
            return BookingCreationResult(
                created=False,
                reason=self.CONFLICT_MESSAGE,
                conflicts=conflicts,
            )

        await self._repository.add_booking(candidate)
        logger.info("Created booking %s for %s", candidate.booking_id, candidate.resource_id)
        return BookingCreationResult(created=True, booking=candidate)

    async def resolve_resource(self, identifier: str) -> Resource:
        """
        Resolve a resource identifier (id or label) to a Resource.

        Raises:
            ValueError: If identifier cannot be resolved
        """
        resource = await self._repository.get_resource(identifier)
        if resource:
            return resource

        for candidate in await self._repository.list_resources():
            if candidate.label.lower() == identifier.lower():
                return candidate

        raise ValueError(
            f"Unknown resource identifier: '{identifier}'. "
            f"Use a resource id or a model name."
        )

    async def list_resources(self) -> List[Resource]:
        return await self._repository.list_resources()

    async def _resource_index(self) -> Dict[str, Resource]:
        resources = await self._repository.list_resources()
        return {resource.resource_id: resource for resource in resources}
