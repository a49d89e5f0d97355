"""
Demo flights timed to change status shortly after startup.

Each flight sits a few seconds short of a status threshold, so a freshly
started board shows every transition within its first minute:

    ~10s  Scheduled -> Boarding   (+30 min threshold)
    ~20s  Boarding  -> Departed   (+10 min threshold)
    ~30s  Departed  -> Delayed    (-15 min threshold)
    ~40s  Delayed   -> Landed     (-60 min threshold)
    ~50s  Boarding  -> Departed   (+10 min threshold)

Seeded flights go straight into the store; some depart in the past, which
the add_flight validation would reject.
"""

import logging
import random
from datetime import timedelta
from typing import Optional, List

from flightdeck.errors import FlightDeckError
from flightdeck.models import Clock, Flight, utc_now
from flightdeck.store import FlightStore

logger = logging.getLogger(__name__)

DESTINATIONS = [
    'London', 'Paris', 'New York', 'Tokyo', 'Dubai', 'Singapore',
    'Frankfurt', 'Amsterdam', 'Los Angeles', 'Chicago', 'Rome', 'Madrid',
]

AIRLINE_CODES = ['BA', 'AF', 'LH', 'AA', 'DL', 'UA', 'EK', 'SQ', 'IB']

# (minutes, seconds) offset from now for each demo departure
TIMED_DEPARTURES = [
    (30, 10),
    (10, 20),
    (-15, 30),
    (-60, 40),
    (10, 50),
]


def _random_gate(rng: random.Random) -> str:
    return f'{chr(ord("A") + rng.randrange(6))}{rng.randint(1, 20)}'


def build_demo_flights(
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
) -> List[Flight]:
    """Build the timed demo flights without storing them."""
    now = (clock or utc_now)()
    rng = rng or random.Random()

    flights = []
    for counter, (minutes, seconds) in enumerate(TIMED_DEPARTURES):
        flights.append(Flight(
            flight_number=f'{rng.choice(AIRLINE_CODES)}{1000 + counter}',
            destination=rng.choice(DESTINATIONS),
            departure_time=now + timedelta(minutes=minutes, seconds=seconds),
            gate=_random_gate(rng),
        ))
    return flights


def seed_demo_flights(
    store: FlightStore,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Replace the store's contents with the timed demo flights.

    Returns count of flights added.
    """
    clock = clock or utc_now
    logger.info('Generating demo flights timed for status changes in the next ~60 seconds...')

    store.clear()
    added = 0
    for flight in build_demo_flights(clock, rng):
        try:
            store.add(flight)
            added += 1
        except FlightDeckError as e:
            logger.warning(f'Failed to add demo flight {flight.flight_number}: {e}')

    now = clock()
    logger.info(f'Added {added} demo flights to in-memory store')
    for status, count in store.status_distribution(now).items():
        logger.debug(f'- {status}: {count}')

    return added
