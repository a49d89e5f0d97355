"""
FlightDeck Backend Package.

Departure board service built with Flask: tracks flights in memory, derives
their status from the departure clock and pushes changes to subscribers.

Modules:
    api/            REST endpoints for flights, the event stream and system status
    models/         Flight record and the departure-time status classifier
    monitor/        Background status monitor (periodic change detection)
    notifications/  Event types, in-process fan-out hub and webhook sink
    services/       Flight operations (validation, events) and demo seed data
    store.py        Thread-safe in-memory flight store
    errors.py       Error taxonomy shared by the service and API layers
    config.py       Centralized configuration from environment variables
"""

__version__ = '1.0.0'
