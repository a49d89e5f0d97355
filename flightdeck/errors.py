"""
Error taxonomy for FlightDeck.

Every error raised by the service layer derives from FlightDeckError and
carries the HTTP status code the API layer answers with.
"""


class FlightDeckError(Exception):
    """Base class for all FlightDeck errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.message}


class InvalidArgumentError(FlightDeckError):
    """Bad input, e.g. a departure time that is not in the future."""
    status_code = 400


class ConflictError(FlightDeckError):
    """The request collides with an existing flight."""
    status_code = 409


class DuplicateFlightNumberError(ConflictError):
    """Another live flight already uses this flight number."""

    def __init__(self, flight_number: str):
        super().__init__(f'Flight number {flight_number} already exists.')
        self.flight_number = flight_number


class NotFoundError(FlightDeckError):
    """No flight with the requested identifier."""
    status_code = 404


class InternalError(FlightDeckError):
    """Unexpected store failure."""
    status_code = 500


class DuplicateKeyError(InternalError):
    """A flight with the same identifier is already stored."""

    def __init__(self, flight_id):
        super().__init__(f'Flight id {flight_id} is already stored.')
        self.flight_id = flight_id
