"""
Status monitoring module for FlightDeck.

Runs the background scan that turns departure-clock threshold crossings
into StatusChanged notifications.
"""

from flightdeck.monitor.status_monitor import FlightStatusMonitor, MonitorState

__all__ = ['FlightStatusMonitor', 'MonitorState']
