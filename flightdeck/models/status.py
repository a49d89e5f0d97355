"""
Flight status derived from the departure clock.

Status is never stored on a flight. It is a pure function of the scheduled
departure time and the current time, evaluated whenever it is needed:

    minutes until departure (d)     status
    ---------------------------     ---------
    d > 30                          Scheduled
    10 < d <= 30                    Boarding
    -15 <= d <= 10                  Departed
    -60 <= d < -15                  Delayed
    d < -60                         Landed

The boundaries are exact and asymmetric (strict '>' on the upper rules,
'<' on the overrides). Filtering and notification timing depend on them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Union

# Minutes until departure
SCHEDULED_AFTER = 30
BOARDING_AFTER = 10
DEPARTED_FROM = -60
DELAYED_BELOW = -15
LANDED_BELOW = -60

Clock = Callable[[], datetime]


class FlightStatus(str, Enum):
    """Operational status labels, in lifecycle order."""
    SCHEDULED = 'Scheduled'
    BOARDING = 'Boarding'
    DEPARTED = 'Departed'
    DELAYED = 'Delayed'
    LANDED = 'Landed'

    def __str__(self) -> str:
        return self.value


def utc_now() -> datetime:
    """Default clock: current time in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def minutes_until(departure_time: datetime, now: datetime) -> float:
    """Signed, fractional minutes from now until departure."""
    return (ensure_utc(departure_time) - ensure_utc(now)).total_seconds() / 60


def classify_status(departure_time: datetime, now: datetime) -> FlightStatus:
    """
    Map a departure time to its status at the instant `now`.

    Later rules override earlier ones, which is what produces the
    Delayed band between -60 and -15 minutes.
    """
    diff_minutes = minutes_until(departure_time, now)
    status = FlightStatus.SCHEDULED

    if diff_minutes > SCHEDULED_AFTER:
        status = FlightStatus.SCHEDULED
    elif diff_minutes > BOARDING_AFTER:
        status = FlightStatus.BOARDING
    elif diff_minutes >= DEPARTED_FROM:
        status = FlightStatus.DEPARTED

    if diff_minutes < DELAYED_BELOW:
        status = FlightStatus.DELAYED

    if diff_minutes < LANDED_BELOW:
        status = FlightStatus.LANDED

    return status


def parse_status(value: Union[str, FlightStatus, None]) -> Optional[FlightStatus]:
    """Case-insensitive label lookup. Returns None for unknown labels."""
    if value is None:
        return None
    if isinstance(value, FlightStatus):
        return value
    label = value.strip().casefold()
    for status in FlightStatus:
        if status.value.casefold() == label:
            return status
    return None
