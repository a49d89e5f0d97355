"""
Shared fixtures for FlightDeck tests.

Provides a controllable clock, a recording notification sink and fresh
store / service / app instances per test.
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from flightdeck.app import create_app
from flightdeck.models import Flight
from flightdeck.notifications import EventType, FlightEvent, NotificationHub
from flightdeck.services import FlightService
from flightdeck.store import FlightStore

BASE_TIME = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = BASE_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingSink:
    """Notification sink that keeps every event it receives."""

    def __init__(self):
        self.events: List[FlightEvent] = []
        self._lock = threading.Lock()

    def publish(self, event: FlightEvent) -> None:
        with self._lock:
            self.events.append(event)

    def of_type(self, event_type: EventType) -> List[FlightEvent]:
        with self._lock:
            return [e for e in self.events if e.type == event_type]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def store(clock) -> FlightStore:
    return FlightStore(clock=clock)


@pytest.fixture
def service(store, sink, clock) -> FlightService:
    return FlightService(store, sink, clock=clock)


@pytest.fixture
def hub() -> NotificationHub:
    return NotificationHub(queue_size=10)


@pytest.fixture
def app(store, hub, clock):
    app = create_app(start_monitor=False, seed_data=False, store=store, hub=hub, clock=clock)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_flight(clock):
    """Factory for flights departing a number of minutes after the clock's time."""
    def _make(number: str, minutes_from_now: float, destination: str = 'London', gate: str = 'A1') -> Flight:
        return Flight(
            flight_number=number,
            destination=destination,
            departure_time=clock() + timedelta(minutes=minutes_from_now),
            gate=gate,
        )
    return _make
