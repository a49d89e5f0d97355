"""
In-process notification hub.

Fans every published event out to:
- stream subscribers, each with its own bounded queue (one per connected
  event-stream client)
- listener callbacks (e.g. the webhook sink)

Publishing never blocks: a subscriber whose queue is full misses that event
and the drop is counted and logged. Listeners run on the publishing thread
and must return quickly; the webhook sink only enqueues and posts from its
own worker thread.
"""

import itertools
import logging
import queue
import threading
from typing import Callable, Dict, List, Optional

from flightdeck.config import config
from flightdeck.notifications.events import FlightEvent

logger = logging.getLogger(__name__)

_subscription_ids = itertools.count(1)


def format_sse(event: FlightEvent) -> str:
    """Render an event as a Server-Sent Events frame."""
    return f'event: {event.type.value}\ndata: {event.to_json()}\n\n'


class Subscription:
    """A single subscriber's view of the event stream."""

    def __init__(self, maxsize: int):
        self.id = next(_subscription_ids)
        self.dropped = 0
        self._queue: 'queue.Queue[FlightEvent]' = queue.Queue(maxsize=maxsize)

    def offer(self, event: FlightEvent) -> bool:
        """Enqueue without blocking. Returns False if the queue is full."""
        try:
            self._queue.put_nowait(event)
            return True
        except queue.Full:
            self.dropped += 1
            return False

    def get(self, timeout: Optional[float] = None) -> Optional[FlightEvent]:
        """Next event, or None if nothing arrived within `timeout` seconds."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    @property
    def pending(self) -> int:
        return self._queue.qsize()


class NotificationHub:
    """
    Thread-safe publish/subscribe fan-out.

    Satisfies the NotificationSink contract (publish(event)).
    """

    def __init__(self, queue_size: Optional[int] = None):
        self.queue_size = queue_size or config.notifications.subscriber_queue_size

        self._subscriptions: Dict[int, Subscription] = {}
        self._listeners: List[Callable[[FlightEvent], None]] = []
        self._lock = threading.RLock()

        # Statistics
        self._published = 0
        self._dropped = 0

    def subscribe(self) -> Subscription:
        subscription = Subscription(self.queue_size)
        with self._lock:
            self._subscriptions[subscription.id] = subscription
        logger.info(f'Subscriber {subscription.id} connected')
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            removed = self._subscriptions.pop(subscription.id, None)
        if removed is not None:
            logger.info(f'Subscriber {subscription.id} disconnected ({subscription.dropped} events dropped)')

    def add_listener(self, callback: Callable[[FlightEvent], None]) -> None:
        """
        Register a callback invoked synchronously for every event.

        Callback errors are logged and never reach the publisher.
        """
        with self._lock:
            self._listeners.append(callback)

    def publish(self, event: FlightEvent) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions.values())
            listeners = list(self._listeners)
            self._published += 1

        for subscription in subscriptions:
            if not subscription.offer(event):
                with self._lock:
                    self._dropped += 1
                logger.warning(f'Subscriber {subscription.id} queue full, dropped {event.type.value} event')

        for callback in listeners:
            try:
                callback(event)
            except Exception as e:
                logger.error(f'Notification listener error: {e}')

        logger.debug(f'Published {event.type.value} for {event.flight_id} to {len(subscriptions)} subscribers')

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    @property
    def stats(self) -> dict:
        """Get hub statistics."""
        with self._lock:
            return {
                'subscribers': len(self._subscriptions),
                'listeners': len(self._listeners),
                'published': self._published,
                'dropped': self._dropped,
            }
