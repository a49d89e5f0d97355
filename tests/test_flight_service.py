"""
Tests for FlightService.

Tests cover:
- Input validation and the error taxonomy
- Added / Deleted notifications
- Racing adds through the service
"""

import threading
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from flightdeck.errors import ConflictError, InvalidArgumentError, NotFoundError
from flightdeck.models import FlightStatus
from flightdeck.notifications import EventType
from flightdeck.services import FlightService, parse_departure_time, parse_flight_id


def add(service, clock, number='BA100', minutes=45, destination='London', gate='A1'):
    return service.add_flight(number, destination, clock() + timedelta(minutes=minutes), gate)


# =============================================================================
# ADD
# =============================================================================


def test_add_flight_stores_and_publishes(service, store, sink, clock):
    flight = add(service, clock)

    assert store.get_by_id(flight.id) is flight
    assert flight.status_at(clock()) is FlightStatus.SCHEDULED

    assert len(sink.events) == 1
    event = sink.events[0]
    assert event.type is EventType.ADDED
    assert event.flight is flight
    assert event.to_dict()['flight']['flight_number'] == 'BA100'


def test_add_flight_strips_whitespace(service, clock):
    flight = service.add_flight('  BA100 ', ' London ', clock() + timedelta(hours=1), ' A1 ')

    assert flight.flight_number == 'BA100'
    assert flight.destination == 'London'
    assert flight.gate == 'A1'


@pytest.mark.parametrize('minutes', [0, -1, -120])
def test_departure_must_be_in_future(service, sink, clock, minutes):
    with pytest.raises(InvalidArgumentError, match='future'):
        add(service, clock, minutes=minutes)
    assert sink.events == []


def test_departure_just_after_now_is_accepted(service, clock):
    flight = service.add_flight('BA100', 'London', clock() + timedelta(seconds=1), 'A1')
    assert flight.status_at(clock()) is FlightStatus.DEPARTED


@pytest.mark.parametrize('field, value, message', [
    ('number', '', 'Flight number is required'),
    ('number', None, 'Flight number is required'),
    ('number', 'X' * 11, 'cannot exceed 10'),
    ('destination', '   ', 'Destination is required'),
    ('destination', 'D' * 101, 'cannot exceed 100'),
    ('gate', '', 'Gate is required'),
    ('gate', 'G' * 11, 'cannot exceed 10'),
])
def test_field_validation(service, clock, field, value, message):
    kwargs = {'number': 'BA100', 'destination': 'London', 'gate': 'A1', field: value}
    with pytest.raises(InvalidArgumentError, match=message):
        add(service, clock, **kwargs)


def test_field_limits_are_inclusive(service, clock):
    flight = add(service, clock, number='X' * 10, destination='D' * 100, gate='G' * 10)
    assert len(flight.destination) == 100


def test_duplicate_number_conflicts(service, sink, clock):
    add(service, clock, number='BA100')

    with pytest.raises(ConflictError):
        add(service, clock, number='ba100', minutes=90)

    assert len(sink.of_type(EventType.ADDED)) == 1


def test_racing_adds_ba100_and_lowercase(service, clock):
    barrier = threading.Barrier(2)
    outcomes = {}

    def worker(number: str):
        barrier.wait()
        try:
            outcomes[number] = add(service, clock, number=number)
        except ConflictError as e:
            outcomes[number] = e

    threads = [threading.Thread(target=worker, args=(n,)) for n in ('BA100', 'ba100')]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    conflicts = [o for o in outcomes.values() if isinstance(o, ConflictError)]
    assert len(outcomes) == 2
    assert len(conflicts) == 1
    assert len(service.list_flights()) == 1


def test_sink_failure_does_not_fail_add(store, clock):
    sink = MagicMock()
    sink.publish.side_effect = RuntimeError('hub down')
    service = FlightService(store, sink, clock=clock)

    flight = add(service, clock)
    assert store.get_by_id(flight.id) is flight


# =============================================================================
# DELETE / GET / LIST
# =============================================================================


def test_delete_then_get_is_not_found(service, sink, clock):
    flight = add(service, clock)

    service.delete_flight(flight.id)

    with pytest.raises(NotFoundError):
        service.get_flight(flight.id)

    deleted = sink.of_type(EventType.DELETED)
    assert len(deleted) == 1
    assert deleted[0].flight_id == flight.id
    assert deleted[0].flight is flight


def test_delete_accepts_string_id(service, clock):
    flight = add(service, clock)
    service.delete_flight(str(flight.id))
    assert service.list_flights() == []


def test_delete_unknown_is_not_found(service, sink):
    with pytest.raises(NotFoundError):
        service.delete_flight(uuid.uuid4())
    assert sink.events == []


def test_delete_twice_is_not_found(service, clock):
    flight = add(service, clock)
    service.delete_flight(flight.id)

    with pytest.raises(NotFoundError):
        service.delete_flight(flight.id)


def test_get_flight(service, clock):
    flight = add(service, clock)
    assert service.get_flight(str(flight.id)) is flight


def test_malformed_id_is_invalid(service):
    with pytest.raises(InvalidArgumentError):
        service.get_flight('not-a-uuid')


def test_list_flights_filters_and_orders(service, clock):
    add(service, clock, number='LATE', minutes=120, destination='Paris')
    add(service, clock, number='SOON', minutes=20, destination='Paris')
    add(service, clock, number='ROME', minutes=60, destination='Rome')

    assert [f.flight_number for f in service.list_flights()] == ['SOON', 'ROME', 'LATE']
    assert [f.flight_number for f in service.list_flights(destination='PAR')] == ['SOON', 'LATE']
    assert [f.flight_number for f in service.list_flights(status='boarding')] == ['SOON']


# =============================================================================
# PARSING HELPERS
# =============================================================================


@pytest.mark.parametrize('value', [
    '2026-03-14T13:30:00Z',
    '2026-03-14T13:30:00+00:00',
    '2026-03-14T15:30:00+02:00',
    '2026-03-14T13:30:00',
])
def test_parse_departure_time(value):
    assert parse_departure_time(value) == datetime(2026, 3, 14, 13, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize('value', [
    '',
    None,
    'tomorrow',
    42,
    '9999-12-31T23:59:59-01:00',
    '0001-01-01T00:00:00+01:00',
])
def test_parse_departure_time_rejects_garbage(value):
    with pytest.raises(InvalidArgumentError):
        parse_departure_time(value)


def test_parse_flight_id():
    flight_id = uuid.uuid4()
    assert parse_flight_id(flight_id) is flight_id
    assert parse_flight_id(str(flight_id)) == flight_id
    with pytest.raises(InvalidArgumentError):
        parse_flight_id('1234')
