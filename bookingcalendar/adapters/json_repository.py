"""
Booking repository backed by a JSON file.
"""

import json
import logging
from datetime import date, time
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum

from ..domain.exceptions import RepositoryError
from ..domain.models import Booking, DaysOfWeek, RepeatOption, Resource

logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent / "sample_bookings.json"


class JsonBookingRepository:
    """
    Stores resources and bookings in a single JSON document.

    Expected layout::

        {
          "resources": [{"id": "...", "make": "Toyota", "model": "Corolla"}],
          "bookings": [{"id": "...", "resourceId": "...", "bookingDate": "2025-02-05",
                        "startTime": "10:00", "endTime": "12:00",
                        "repeatOption": "weekly", "endRepeatDate": "2025-03-31",
                        "daysToRepeatOn": ["monday"]}]
        }

    A missing file is treated as an empty store. With ``persist=False`` new
    bookings are kept in memory only.
    """

    def __init__(self, data_file: Path, persist: bool = True):
        """
        Initialize the repository.

        Args:
            data_file: Path to the JSON data file
            persist: Write new bookings back to the file
        """
        self.data_file = data_file
        self.persist = persist
        self._resources: Dict[str, Resource] = {}
        self._bookings: List[Booking] = []
        self._load()

    @classmethod
    def sample(cls) -> "JsonBookingRepository":
        """Open the packaged sample data without writing back to it."""
        return cls(SAMPLE_DATA_FILE, persist=False)

    def _load(self) -> None:
        """Load resources and bookings from the data file."""
        if not self.data_file.exists():
            logger.info("Data file %s not found, starting with an empty store", self.data_file)
            return

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise RepositoryError(f"Could not read {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise RepositoryError("Data file must contain an object at the root level.")

        resources = data.get("resources") or []
        bookings = data.get("bookings") or []
        if not isinstance(resources, list) or not isinstance(bookings, list):
            raise RepositoryError('"resources" and "bookings" must be lists.')

        for raw in resources:
            resource = self._parse_resource(raw)
            self._resources[resource.resource_id] = resource

        self._bookings = [self._parse_booking(raw) for raw in bookings]
        logger.debug(
            "Loaded %d resource(s) and %d booking(s) from %s",
            len(self._resources), len(self._bookings), self.data_file,
        )

    def _save(self) -> None:
        """Write the current state back to the data file."""
        data = {
            "resources": [self._dump_resource(r) for r in self._resources.values()],
            "bookings": [self._dump_booking(b) for b in self._bookings],
        }
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.data_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as exc:
            raise RepositoryError(f"Could not write {self.data_file}: {exc}") from exc

    async def list_resources(self) -> List[Resource]:
        return list(self._resources.values())

    async def get_resource(self, resource_id: str) -> Optional[Resource]:
        return self._resources.get(resource_id)

    async def find_candidate_bookings(
        self,
        resource_id: str,
        window_start: date,
        window_end: date,
    ) -> List[Booking]:
        """
        Return bookings of the resource that may occur inside the window.

        A booking qualifies when its own date lies in the window, or when it
        repeats up to a date on or after the window start.
        """
        return [
            booking for booking in self._bookings
            if booking.resource_id == resource_id
            and (
                window_start <= booking.booking_date <= window_end
                or (
                    booking.is_recurring
                    and booking.end_repeat_date is not None
                    and booking.end_repeat_date >= window_start
                )
            )
        ]

    async def find_bookings_for_resource(self, resource_id: str) -> List[Booking]:
        return [b for b in self._bookings if b.resource_id == resource_id]

    async def add_booking(self, booking: Booking) -> None:
        self._bookings.append(booking)
        if self.persist:
            self._save()

    @staticmethod
    def _parse_resource(raw: Dict[str, Any]) -> Resource:
        if not isinstance(raw, dict):
            raise RepositoryError(f"Invalid resource record {raw!r}: expected an object")
        try:
            return Resource(
                resource_id=str(raw["id"]),
                make=raw.get("make", ""),
                model=raw["model"],
            )
        except (KeyError, TypeError) as exc:
            raise RepositoryError(f"Invalid resource record {raw!r}: {exc}") from exc

    @staticmethod
    def _parse_booking(raw: Dict[str, Any]) -> Booking:
        if not isinstance(raw, dict):
            raise RepositoryError(f"Invalid booking record {raw!r}: expected an object")
        try:
            end_repeat = raw.get("endRepeatDate")
            requested_on = raw.get("requestedOn")
            resource_id = raw.get("resourceId")
            return Booking(
                booking_id=str(raw["id"]),
                resource_id=str(resource_id) if resource_id is not None else None,
                booking_date=_parse_date(raw["bookingDate"]),
                start_time=time.fromisoformat(raw["startTime"]),
                end_time=time.fromisoformat(raw["endTime"]),
                repeat_option=RepeatOption.parse(raw.get("repeatOption", "none")),
                end_repeat_date=_parse_date(end_repeat) if end_repeat else None,
                days_to_repeat_on=DaysOfWeek.from_names(raw.get("daysToRepeatOn") or []),
                requested_on=pendulum.parse(requested_on) if requested_on else None,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RepositoryError(f"Invalid booking record {raw.get('id', raw)!r}: {exc}") from exc

    @staticmethod
    def _dump_resource(resource: Resource) -> Dict[str, Any]:
        return {"id": resource.resource_id, "make": resource.make, "model": resource.model}

    @staticmethod
    def _dump_booking(booking: Booking) -> Dict[str, Any]:
        return {
            "id": booking.booking_id,
            "resourceId": booking.resource_id,
            "bookingDate": booking.booking_date.isoformat(),
            "startTime": booking.start_time.isoformat(),
            "endTime": booking.end_time.isoformat(),
            "repeatOption": booking.repeat_option.name.lower(),
            "endRepeatDate": booking.end_repeat_date.isoformat() if booking.end_repeat_date else None,
            "daysToRepeatOn": booking.days_to_repeat_on.names(),
            "requestedOn": booking.requested_on.to_iso8601_string() if booking.requested_on else None,
        }


def _parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a pendulum Date."""
    if not isinstance(value, str):
        raise ValueError(f"Expected a YYYY-MM-DD string, got {value!r}")
    return pendulum.from_format(value, "YYYY-MM-DD").date()
