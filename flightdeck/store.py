"""
Thread-safe in-memory store for tracked flights.

The store is the only shared mutable state in the process: request threads
add, delete and list flights while the status monitor thread takes periodic
snapshots. All access goes through a single re-entrant lock, with two
indexes kept in step under it:

- primary:   flight id -> Flight
- secondary: casefolded flight number -> flight id

The secondary index makes the duplicate-number check and the insert one
atomic step, so two racing adds of 'BA100' and 'ba100' can never both land.

The store is volatile and rebuilt on every restart.
"""

import logging
import threading
import uuid
from datetime import datetime
from typing import Optional, Dict, List, Union

from flightdeck.errors import DuplicateFlightNumberError, DuplicateKeyError
from flightdeck.models import (
    Clock,
    Flight,
    FlightStatus,
    classify_status,
    normalize_flight_number,
    parse_status,
    utc_now,
)

logger = logging.getLogger(__name__)


class FlightStore:
    """
    Concurrent keyed collection of flights.

    Lookups return None when a flight is absent; mapping that onto
    NotFound is the service layer's job.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or utc_now

        self._flights: Dict[uuid.UUID, Flight] = {}
        self._ids_by_number: Dict[str, uuid.UUID] = {}
        self._lock = threading.RLock()

        # Statistics
        self._adds = 0
        self._deletes = 0
        self._rejected_adds = 0

    def add(self, flight: Flight) -> Flight:
        """
        Insert a flight.

        Raises:
            DuplicateKeyError: the id is already stored
            DuplicateFlightNumberError: another live flight has the same
                number (case-insensitive)
        """
        number_key = flight.number_key

        with self._lock:
            if flight.id in self._flights:
                self._rejected_adds += 1
                logger.warning(f'Failed to add flight {flight.flight_number} ({flight.id}): id already stored')
                raise DuplicateKeyError(flight.id)

            if number_key in self._ids_by_number:
                self._rejected_adds += 1
                logger.info(f'Rejected flight {flight.flight_number}: number already in use')
                raise DuplicateFlightNumberError(flight.flight_number)

            self._flights[flight.id] = flight
            self._ids_by_number[number_key] = flight.id
            self._adds += 1

        logger.info(f'Flight {flight.flight_number} ({flight.id}) added to store')
        return flight

    def get_by_id(self, flight_id: uuid.UUID) -> Optional[Flight]:
        with self._lock:
            return self._flights.get(flight_id)

    def get_by_number(self, flight_number: str) -> Optional[Flight]:
        """Case-insensitive exact match on flight number."""
        number_key = normalize_flight_number(flight_number)

        with self._lock:
            flight_id = self._ids_by_number.get(number_key)
            if flight_id is None:
                return None
            return self._flights.get(flight_id)

    def delete(self, flight_id: uuid.UUID) -> bool:
        """Remove a flight. Returns True if it was present."""
        with self._lock:
            flight = self._flights.pop(flight_id, None)
            if flight is not None:
                self._ids_by_number.pop(flight.number_key, None)
                self._deletes += 1

        if flight is None:
            logger.warning(f'Attempted to remove flight {flight_id}, but it was not found in the store')
            return False

        logger.info(f'Flight {flight.flight_number} ({flight_id}) removed from store')
        return True

    def list_all(
        self,
        destination: Optional[str] = None,
        status: Union[str, FlightStatus, None] = None,
    ) -> List[Flight]:
        """
        List flights ordered by departure time (earliest first).

        Args:
            destination: Case-insensitive substring filter on destination
            status: Status label to match, case-insensitive. Each flight's
                    status is evaluated against one instant taken when the
                    call starts. An unknown label matches nothing.

        Ties on departure time keep insertion order (sort is stable).
        """
        with self._lock:
            result = list(self._flights.values())

        logger.debug(f'Listing flights: destination={destination!r} status={status!r} total={len(result)}')

        if destination and destination.strip():
            needle = destination.strip().casefold()
            result = [f for f in result if needle in f.destination.casefold()]

        if status is not None and str(status).strip():
            wanted = parse_status(status)
            if wanted is None:
                logger.debug(f'Unknown status filter {status!r}, no flights match')
                result = []
            else:
                now = self._clock()
                result = [f for f in result if classify_status(f.departure_time, now) == wanted]

        result.sort(key=lambda f: f.departure_time)
        return result

    def status_distribution(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """Count of flights per status, every status included."""
        now = now or self._clock()
        counts = {status.value: 0 for status in FlightStatus}

        with self._lock:
            flights = list(self._flights.values())

        for flight in flights:
            counts[classify_status(flight.departure_time, now).value] += 1
        return counts

    def clear(self) -> None:
        """Remove every flight."""
        with self._lock:
            self._flights.clear()
            self._ids_by_number.clear()

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._flights)

    def __len__(self) -> int:
        return self.count

    @property
    def stats(self) -> dict:
        """Get store statistics."""
        with self._lock:
            return {
                'entries': len(self._flights),
                'adds': self._adds,
                'deletes': self._deletes,
                'rejected_adds': self._rejected_adds,
            }
