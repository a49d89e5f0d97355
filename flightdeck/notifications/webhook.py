"""
Webhook notification sink.

POSTs every event as JSON to a configured URL. Delivery is best-effort:
network and HTTP errors are logged and counted, never raised, so a dead
endpoint cannot break a mutation or a monitor scan.

publish() only enqueues; a background worker thread does the HTTP call, so
a slow endpoint never holds up the publishing thread. When the backlog is
full new events are dropped and counted.
"""

import logging
import queue
import threading
from typing import Optional

import requests

from flightdeck.config import config
from flightdeck.notifications.events import FlightEvent

logger = logging.getLogger(__name__)

_STOP = object()


class WebhookSink:
    """Delivers events to an HTTP endpoint from a worker thread."""

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        queue_size: Optional[int] = None,
    ):
        self.url = url
        self.timeout = timeout or config.notifications.webhook_timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})

        self._queue: queue.Queue = queue.Queue(
            maxsize=queue_size or config.notifications.webhook_queue_size
        )
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._delivered = 0
        self._failed = 0
        self._dropped = 0

    @classmethod
    def from_config(cls) -> Optional['WebhookSink']:
        """Create sink from application configuration, or None if unset."""
        if not config.notifications.webhook_enabled:
            return None
        return cls(
            url=config.notifications.webhook_url,
            timeout=config.notifications.webhook_timeout_seconds,
            queue_size=config.notifications.webhook_queue_size,
        )

    def publish(self, event: FlightEvent) -> None:
        """Queue an event for delivery without blocking."""
        self._ensure_worker()
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            with self._lock:
                self._dropped += 1
            logger.warning(f'Webhook backlog full, dropped {event.type.value} event for {event.flight_id}')

    def deliver(self, event: FlightEvent) -> bool:
        """POST one event on the calling thread. Returns True on success."""
        try:
            response = self.session.post(
                self.url,
                data=event.to_json(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout:
            self._record(False)
            logger.error(f'Webhook timeout delivering {event.type.value} for {event.flight_id}')
            return False
        except requests.exceptions.HTTPError as e:
            self._record(False)
            logger.error(f'Webhook rejected {event.type.value} event: {e.response.status_code}')
            return False
        except requests.exceptions.RequestException as e:
            self._record(False)
            logger.error(f'Webhook delivery failed: {e}')
            return False

        self._record(True)
        logger.debug(f'Delivered {event.type.value} for {event.flight_id} to webhook')
        return True

    def close(self, timeout: Optional[float] = None) -> None:
        """Deliver what is already queued, then stop the worker."""
        with self._lock:
            thread = self._thread
        if thread is None:
            return
        self._queue.put(_STOP)
        thread.join(timeout=timeout)

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._thread and self._thread.is_alive():
                return
            self._thread = threading.Thread(
                target=self._run,
                name='flight-webhook-sink',
                daemon=True,
            )
            self._thread.start()

    def _run(self) -> None:
        while True:
            event = self._queue.get()
            try:
                if event is _STOP:
                    return
                self.deliver(event)
            except Exception as e:
                logger.error(f'Unhandled exception in webhook worker: {e}')
            finally:
                self._queue.task_done()

    def _record(self, delivered: bool) -> None:
        with self._lock:
            if delivered:
                self._delivered += 1
            else:
                self._failed += 1

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def stats(self) -> dict:
        """Get delivery statistics."""
        with self._lock:
            return {
                'url': self.url,
                'delivered': self._delivered,
                'failed': self._failed,
                'dropped': self._dropped,
                'pending': self._queue.qsize(),
            }
