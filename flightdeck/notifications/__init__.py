"""
Notification module for FlightDeck.

Defines the events announced to subscribers and the sinks that carry them:
an in-process hub feeding the event stream, and an optional webhook.
"""

from flightdeck.notifications.events import EventType, FlightEvent, NotificationSink
from flightdeck.notifications.hub import NotificationHub, Subscription, format_sse
from flightdeck.notifications.webhook import WebhookSink

__all__ = [
    'EventType',
    'FlightEvent',
    'NotificationSink',
    'NotificationHub',
    'Subscription',
    'format_sse',
    'WebhookSink',
]
