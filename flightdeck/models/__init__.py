"""
Domain models for FlightDeck.

A Flight carries only what the schedule says; its status is always derived
from the departure time and the clock (see models.status).
"""

from flightdeck.models.flight import (
    Flight,
    normalize_flight_number,
    FLIGHT_NUMBER_MAX_LENGTH,
    DESTINATION_MAX_LENGTH,
    GATE_MAX_LENGTH,
)
from flightdeck.models.status import (
    Clock,
    FlightStatus,
    classify_status,
    ensure_utc,
    minutes_until,
    parse_status,
    utc_now,
)

__all__ = [
    'Flight',
    'normalize_flight_number',
    'FLIGHT_NUMBER_MAX_LENGTH',
    'DESTINATION_MAX_LENGTH',
    'GATE_MAX_LENGTH',
    'Clock',
    'FlightStatus',
    'classify_status',
    'ensure_utc',
    'minutes_until',
    'parse_status',
    'utc_now',
]
