"""
Flight operations and demo data.

FlightService is the single entry point for creating, deleting and
querying flights; the API layer never touches the store directly.
"""

from flightdeck.services.flight_service import FlightService, parse_departure_time, parse_flight_id
from flightdeck.services.seed import build_demo_flights, seed_demo_flights

__all__ = [
    'FlightService',
    'parse_departure_time',
    'parse_flight_id',
    'build_demo_flights',
    'seed_demo_flights',
]
