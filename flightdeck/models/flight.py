"""
Flight model - a scheduled departure tracked by the board.

Flights are immutable records. They are created once, deleted once and never
updated in place; status is computed from `departure_time` on every read so
that a stored value can never go stale.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from flightdeck.models.status import FlightStatus, classify_status, ensure_utc, utc_now

# Field limits
FLIGHT_NUMBER_MAX_LENGTH = 10
DESTINATION_MAX_LENGTH = 100
GATE_MAX_LENGTH = 10


def normalize_flight_number(flight_number: str) -> str:
    """Key used for case-insensitive flight number comparison."""
    return flight_number.strip().casefold()


@dataclass(frozen=True)
class Flight:
    """
    A scheduled departure.

    Fields:
        flight_number: Airline designator + number (e.g., 'BA1000'), unique
                       across live flights ignoring case
        destination: Destination city or airport name
        departure_time: Scheduled departure, UTC
        gate: Departure gate (e.g., 'B12')
        id: Opaque identifier assigned at creation
    """
    flight_number: str
    destination: str
    departure_time: datetime
    gate: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, 'departure_time', ensure_utc(self.departure_time))

    def __repr__(self) -> str:
        return f'<Flight {self.flight_number} {self.destination} {self.departure_time:%Y-%m-%d %H:%M}Z>'

    @property
    def number_key(self) -> str:
        return normalize_flight_number(self.flight_number)

    def status_at(self, now: Optional[datetime] = None) -> FlightStatus:
        """Status at the given instant (defaults to the current time)."""
        return classify_status(self.departure_time, now or utc_now())

    def to_dict(self, now: Optional[datetime] = None) -> dict:
        """Convert to JSON-serializable dict for API responses and events."""
        return {
            'id': str(self.id),
            'flight_number': self.flight_number,
            'destination': self.destination,
            'departure_time': self.departure_time.isoformat(),
            'gate': self.gate,
            'status': self.status_at(now).value,
        }
