"""
Tests for the departure-clock status classifier.

Tests cover:
- Exact boundary behaviour at +30, +10, -15 and -60 minutes
- A single flight walking through every status as the clock advances
- Label parsing and timezone normalization
"""

from datetime import datetime, timedelta, timezone

import pytest

from flightdeck.models import FlightStatus, classify_status, minutes_until, parse_status

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


def departing_in(minutes: float) -> datetime:
    return NOW + timedelta(minutes=minutes)


@pytest.mark.parametrize('minutes, expected', [
    (120, FlightStatus.SCHEDULED),
    (30.001, FlightStatus.SCHEDULED),
    (30, FlightStatus.BOARDING),
    (29.999, FlightStatus.BOARDING),
    (10.001, FlightStatus.BOARDING),
    (10, FlightStatus.DEPARTED),
    (9.999, FlightStatus.DEPARTED),
    (0, FlightStatus.DEPARTED),
    (-14.999, FlightStatus.DEPARTED),
    (-15, FlightStatus.DEPARTED),
    (-15.001, FlightStatus.DELAYED),
    (-59.999, FlightStatus.DELAYED),
    (-60, FlightStatus.DELAYED),
    (-60.001, FlightStatus.LANDED),
    (-600, FlightStatus.LANDED),
])
def test_boundaries(minutes, expected):
    assert classify_status(departing_in(minutes), NOW) is expected


def test_walks_through_every_status():
    departure = NOW + timedelta(minutes=31)

    assert classify_status(departure, NOW) is FlightStatus.SCHEDULED
    assert classify_status(departure, departure - timedelta(minutes=29)) is FlightStatus.BOARDING
    assert classify_status(departure, departure - timedelta(minutes=5)) is FlightStatus.DEPARTED
    assert classify_status(departure, departure + timedelta(minutes=20)) is FlightStatus.DELAYED
    assert classify_status(departure, departure + timedelta(minutes=61)) is FlightStatus.LANDED


def test_naive_datetimes_are_utc():
    naive = datetime(2026, 3, 14, 12, 20)
    assert minutes_until(naive, NOW) == pytest.approx(20)
    assert classify_status(naive, NOW) is FlightStatus.BOARDING


def test_other_timezones_are_converted():
    plus_two = timezone(timedelta(hours=2))
    departure = datetime(2026, 3, 14, 14, 45, tzinfo=plus_two)  # 12:45 UTC
    assert classify_status(departure, NOW) is FlightStatus.SCHEDULED
    assert minutes_until(departure, NOW) == pytest.approx(45)


@pytest.mark.parametrize('label, expected', [
    ('Boarding', FlightStatus.BOARDING),
    ('boarding', FlightStatus.BOARDING),
    ('  LANDED ', FlightStatus.LANDED),
    (FlightStatus.DELAYED, FlightStatus.DELAYED),
    ('Cancelled', None),
    (None, None),
])
def test_parse_status(label, expected):
    assert parse_status(label) is expected


def test_status_serializes_as_label():
    assert str(FlightStatus.DEPARTED) == 'Departed'
    assert [s.value for s in FlightStatus] == ['Scheduled', 'Boarding', 'Departed', 'Delayed', 'Landed']
