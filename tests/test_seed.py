"""
Tests for the timed demo flights.
"""

import random

from flightdeck.models import FlightStatus
from flightdeck.monitor import FlightStatusMonitor
from flightdeck.services import build_demo_flights, seed_demo_flights
from flightdeck.services.seed import AIRLINE_CODES, DESTINATIONS


def test_demo_flights_sit_just_before_thresholds(clock):
    flights = build_demo_flights(clock, random.Random(7))

    assert [f.status_at(clock()) for f in flights] == [
        FlightStatus.SCHEDULED,
        FlightStatus.BOARDING,
        FlightStatus.DEPARTED,
        FlightStatus.DELAYED,
        FlightStatus.BOARDING,
    ]

    clock.advance(seconds=60)
    assert [f.status_at(clock()) for f in flights] == [
        FlightStatus.BOARDING,
        FlightStatus.DEPARTED,
        FlightStatus.DELAYED,
        FlightStatus.LANDED,
        FlightStatus.DEPARTED,
    ]


def test_demo_flight_fields(clock):
    flights = build_demo_flights(clock, random.Random(7))

    assert len({f.number_key for f in flights}) == len(flights)
    for counter, flight in enumerate(flights):
        assert flight.flight_number[:2] in AIRLINE_CODES
        assert flight.flight_number.endswith(str(1000 + counter))
        assert flight.destination in DESTINATIONS
        assert flight.gate[0] in 'ABCDEF'
        assert 1 <= int(flight.gate[1:]) <= 20


def test_seed_replaces_store_contents(store, clock, make_flight):
    store.add(make_flight('OLD1', 45))

    assert seed_demo_flights(store, clock, random.Random(7)) == 5
    assert store.count == 5
    assert store.get_by_number('OLD1') is None


def test_monitor_reports_every_seeded_transition(store, sink, clock):
    seed_demo_flights(store, clock, random.Random(7))
    monitor = FlightStatusMonitor(store, sink, clock=clock, interval=60, startup_delay=0)

    assert monitor.check_statuses() == 0
    clock.advance(seconds=60)

    assert monitor.check_statuses() == 5
    assert sorted(e.new_status.value for e in sink.events) == [
        'Boarding', 'Delayed', 'Departed', 'Departed', 'Landed',
    ]
