"""
Flight API endpoints.

Provides endpoints for:
- GET    /api/flights          - List flights (filters: destination, status)
- GET    /api/flights/<id>     - Get a single flight
- POST   /api/flights          - Add a flight
- DELETE /api/flights/<id>     - Delete a flight
- GET    /api/flights/stream   - Server-Sent Events stream of notifications

Errors raised by the service layer are turned into JSON responses by the
application's FlightDeckError handler.
"""

import logging
import time
from typing import Iterator

from flask import Blueprint, Response, current_app, jsonify, request, stream_with_context, url_for

from flightdeck.config import config
from flightdeck.errors import InvalidArgumentError
from flightdeck.notifications import NotificationHub, format_sse
from flightdeck.services import FlightService

logger = logging.getLogger(__name__)

flights_bp = Blueprint('flights', __name__, url_prefix='/api/flights')


def _service() -> FlightService:
    return current_app.config['FLIGHT_SERVICE']


def event_stream(hub: NotificationHub, heartbeat_seconds: float) -> Iterator[str]:
    """
    Subscribe to the hub and yield SSE frames until the client goes away.

    The subscription starts on first iteration and ends when the generator
    is closed. A comment line is emitted after `heartbeat_seconds` of
    silence so proxies keep the connection open.
    """
    subscription = hub.subscribe()
    try:
        yield ': connected\n\n'
        while True:
            event = subscription.get(timeout=heartbeat_seconds)
            if event is None:
                yield ': keep-alive\n\n'
                continue
            yield format_sse(event)
    finally:
        hub.unsubscribe(subscription)


@flights_bp.route('', methods=['GET'])
def list_flights():
    """
    List flights ordered by departure time.

    Query parameters:
    - destination: case-insensitive substring of the destination
    - status: Scheduled|Boarding|Departed|Delayed|Landed (case-insensitive)
    """
    start_time = time.perf_counter()
    service = _service()

    destination = request.args.get('destination')
    status = request.args.get('status')

    flights = service.list_flights(destination, status)
    now = service.clock()

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'flights': [f.to_dict(now) for f in flights],
        'count': len(flights),
        'timestamp': now.isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@flights_bp.route('/<flight_id>', methods=['GET'])
def get_flight(flight_id: str):
    """Get a single flight by id."""
    service = _service()
    flight = service.get_flight(flight_id)
    return jsonify(flight.to_dict(service.clock()))


@flights_bp.route('', methods=['POST'])
def add_flight():
    """
    Add a flight.

    Body: {"flight_number": str, "destination": str,
           "departure_time": ISO 8601, "gate": str}

    Responds 201 with the stored flight and a Location header.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidArgumentError('JSON body required')

    service = _service()
    flight = service.add_flight(
        flight_number=data.get('flight_number'),
        destination=data.get('destination'),
        departure_time=data.get('departure_time'),
        gate=data.get('gate'),
    )

    response = jsonify(flight.to_dict(service.clock()))
    response.status_code = 201
    response.headers['Location'] = url_for('flights.get_flight', flight_id=str(flight.id))
    return response


@flights_bp.route('/<flight_id>', methods=['DELETE'])
def delete_flight(flight_id: str):
    """Delete a flight. Responds 204 on success."""
    _service().delete_flight(flight_id)
    return '', 204


@flights_bp.route('/stream', methods=['GET'])
def stream():
    """
    Server-Sent Events stream of flight notifications.

    Event names: Added, Deleted, StatusChanged. Data is the JSON payload.
    """
    hub: NotificationHub = current_app.config['NOTIFICATION_HUB']

    return Response(
        stream_with_context(event_stream(hub, config.notifications.heartbeat_seconds)),
        mimetype='text/event-stream',
        headers={
            'Cache-Control': 'no-cache',
            'X-Accel-Buffering': 'no',
        },
    )
