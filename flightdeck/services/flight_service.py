"""
Flight operations - the contract the API layer talks to.

Validates requests, maps store outcomes onto the error taxonomy and
announces every successful mutation to the notification sink:

- add_flight     -> Added
- delete_flight  -> Deleted

Time-driven status changes are announced by the status monitor instead.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional, List, Union

from flightdeck.errors import ConflictError, InvalidArgumentError, NotFoundError
from flightdeck.models import (
    Clock,
    Flight,
    FlightStatus,
    DESTINATION_MAX_LENGTH,
    FLIGHT_NUMBER_MAX_LENGTH,
    GATE_MAX_LENGTH,
    ensure_utc,
    utc_now,
)
from flightdeck.notifications import FlightEvent, NotificationSink
from flightdeck.store import FlightStore

logger = logging.getLogger(__name__)


def parse_flight_id(value: Union[str, uuid.UUID]) -> uuid.UUID:
    """Parse a flight id, raising InvalidArgumentError if malformed."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        raise InvalidArgumentError(f'Invalid flight id: {value}')


def parse_departure_time(value) -> datetime:
    """
    Parse an ISO 8601 departure time.

    Accepts a trailing 'Z'. Naive values are taken as UTC. Offsets that
    push the instant outside the datetime range are rejected.
    """
    if isinstance(value, datetime):
        parsed = value
    elif not value or not isinstance(value, str):
        raise InvalidArgumentError('Departure time is required.')
    else:
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            raise InvalidArgumentError(f'Invalid departure time: {value}')
    try:
        return ensure_utc(parsed)
    except OverflowError:
        raise InvalidArgumentError(f'Invalid departure time: {value}')


def _require_text(value: Optional[str], label: str, max_length: int) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f'{label} is required.')
    value = value.strip()
    if len(value) > max_length:
        raise InvalidArgumentError(f'{label} cannot exceed {max_length} characters.')
    return value


class FlightService:
    """
    Core flight operations over a FlightStore.

    Args:
        store: Backing flight store
        sink: Receives Added / Deleted events
        clock: Source of the current time (UTC)
    """

    def __init__(
        self,
        store: FlightStore,
        sink: NotificationSink,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.sink = sink
        self.clock = clock or utc_now

    def add_flight(
        self,
        flight_number: str,
        destination: str,
        departure_time: datetime,
        gate: str,
    ) -> Flight:
        """
        Create a flight.

        Raises:
            InvalidArgumentError: missing or oversized field, or a departure
                time that is not strictly in the future
            ConflictError: the flight number is already in use
        """
        flight_number = _require_text(flight_number, 'Flight number', FLIGHT_NUMBER_MAX_LENGTH)
        destination = _require_text(destination, 'Destination', DESTINATION_MAX_LENGTH)
        gate = _require_text(gate, 'Gate', GATE_MAX_LENGTH)
        departure_time = parse_departure_time(departure_time)

        logger.info(f'Attempting to add flight: {flight_number}')

        now = self.clock()
        if departure_time <= now:
            raise InvalidArgumentError('Departure time must be in the future.')

        # Fast path; the store re-checks atomically on insert
        if self.store.get_by_number(flight_number) is not None:
            raise ConflictError(f'Flight number {flight_number} already exists.')

        flight = Flight(
            flight_number=flight_number,
            destination=destination,
            departure_time=departure_time,
            gate=gate,
        )
        added = self.store.add(flight)

        logger.info(f'Flight added successfully with ID: {added.id}')
        self._publish(FlightEvent.added(added, now))
        return added

    def delete_flight(self, flight_id: Union[str, uuid.UUID]) -> None:
        """
        Remove a flight.

        Raises:
            NotFoundError: no flight with this id (including when a
                concurrent delete removed it first)
        """
        flight_id = parse_flight_id(flight_id)
        logger.info(f'Attempting to delete flight with ID: {flight_id}')

        flight = self.store.get_by_id(flight_id)
        if flight is None or not self.store.delete(flight_id):
            logger.warning(f'Delete flight failed: flight with ID {flight_id} not found')
            raise NotFoundError(f'Flight {flight_id} not found.')

        logger.info(f'Flight with ID: {flight_id} ({flight.flight_number}) deleted successfully')
        self._publish(FlightEvent.deleted(flight, self.clock()))

    def get_flight(self, flight_id: Union[str, uuid.UUID]) -> Flight:
        flight_id = parse_flight_id(flight_id)
        flight = self.store.get_by_id(flight_id)
        if flight is None:
            raise NotFoundError(f'Flight {flight_id} not found.')
        return flight

    def list_flights(
        self,
        destination: Optional[str] = None,
        status: Union[str, FlightStatus, None] = None,
    ) -> List[Flight]:
        logger.info(f'Getting flights with filter destination={destination}, status={status}')
        return self.store.list_all(destination, status)

    def _publish(self, event: FlightEvent) -> None:
        try:
            self.sink.publish(event)
        except Exception as e:
            logger.error(f'Error publishing {event.type.value} event for {event.flight_id}: {e}')
