"""
API module for FlightDeck.

Provides REST endpoints for:
- Flights (list, get, add, delete) and the notification stream
- System status
"""

from flightdeck.api.flights import flights_bp
from flightdeck.api.metrics import metrics_bp

__all__ = ['flights_bp', 'metrics_bp']
