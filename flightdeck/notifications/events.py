"""
Notification events and the sink contract.

Three things are announced to subscribers:
- Added:          a flight was created (payload: the flight)
- Deleted:        a flight was removed (payload: the flight as it was)
- StatusChanged:  the monitor saw a flight cross a status threshold
                  (payload: flight id, new status, previous status)
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Protocol

from flightdeck.models import Flight, FlightStatus, utc_now


class EventType(str, Enum):
    """Event names as they appear on the wire."""
    ADDED = 'Added'
    DELETED = 'Deleted'
    STATUS_CHANGED = 'StatusChanged'


@dataclass(frozen=True)
class FlightEvent:
    """A single notification."""
    type: EventType
    flight_id: uuid.UUID
    flight: Optional[Flight] = None
    new_status: Optional[FlightStatus] = None
    previous_status: Optional[FlightStatus] = None
    occurred_at: datetime = field(default_factory=utc_now)

    @classmethod
    def added(cls, flight: Flight, now: Optional[datetime] = None) -> 'FlightEvent':
        return cls(EventType.ADDED, flight.id, flight=flight, occurred_at=now or utc_now())

    @classmethod
    def deleted(cls, flight: Flight, now: Optional[datetime] = None) -> 'FlightEvent':
        return cls(EventType.DELETED, flight.id, flight=flight, occurred_at=now or utc_now())

    @classmethod
    def status_changed(
        cls,
        flight_id: uuid.UUID,
        new_status: FlightStatus,
        previous_status: Optional[FlightStatus] = None,
        now: Optional[datetime] = None,
    ) -> 'FlightEvent':
        return cls(
            EventType.STATUS_CHANGED,
            flight_id,
            new_status=new_status,
            previous_status=previous_status,
            occurred_at=now or utc_now(),
        )

    def to_dict(self) -> dict:
        """Wire payload. Flight status is rendered as of `occurred_at`."""
        payload = {
            'type': self.type.value,
            'flight_id': str(self.flight_id),
            'occurred_at': self.occurred_at.isoformat(),
        }
        if self.flight is not None:
            payload['flight'] = self.flight.to_dict(self.occurred_at)
        if self.new_status is not None:
            payload['new_status'] = self.new_status.value
        if self.previous_status is not None:
            payload['previous_status'] = self.previous_status.value
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


class NotificationSink(Protocol):
    """Anything that can receive events."""

    def publish(self, event: FlightEvent) -> None:
        ...
