"""
Status monitor - detects time-driven status transitions.

Nothing mutates a flight when it starts boarding; the departure clock simply
crosses a threshold. The monitor catches those transitions by polling:

1. Snapshot: list every flight in the store
2. Classify: compute each flight's status at one instant per scan
3. Diff: compare against the last status seen for that flight
4. Notify: publish StatusChanged for every flight whose status moved
5. Prune: forget flights that are no longer in the store

The first sighting of a flight only records a baseline; it is not announced.
Removals are not announced either (the delete operation does that itself).

Cadence follows periodic-timer semantics: ticks are fixed to a grid of
`interval` seconds, and ticks missed while a scan was running are skipped
rather than queued. At most one scan runs at any time.
"""

import logging
import threading
import time
import uuid
from enum import Enum
from typing import Optional, Dict

from flightdeck.config import config
from flightdeck.models import Clock, FlightStatus, classify_status, utc_now
from flightdeck.notifications import FlightEvent, NotificationSink
from flightdeck.store import FlightStore

logger = logging.getLogger(__name__)


class MonitorState(str, Enum):
    """Lifecycle of the monitor."""
    IDLE = 'idle'
    SCANNING = 'scanning'
    STOPPED = 'stopped'


class FlightStatusMonitor:
    """
    Recurring background scan of flight statuses.

    Can run as a background thread (start_background) or be driven one
    scan at a time (check_statuses), which is how the tests use it.
    """

    def __init__(
        self,
        store: FlightStore,
        sink: NotificationSink,
        clock: Optional[Clock] = None,
        interval: Optional[float] = None,
        startup_delay: Optional[float] = None,
    ):
        """
        Initialize the monitor.

        Args:
            store: Flight store to snapshot
            sink: Receives StatusChanged events
            clock: Source of the current time (UTC)
            interval: Seconds between scans
            startup_delay: Seconds to wait before the first scan
        """
        self.store = store
        self.sink = sink
        self.clock = clock or utc_now
        self.interval = interval if interval is not None else config.monitor.interval_seconds
        self.startup_delay = (
            startup_delay if startup_delay is not None else config.monitor.startup_delay_seconds
        )

        # Last status seen per flight; only the scanning thread touches it
        self._last_known: Dict[uuid.UUID, FlightStatus] = {}

        # State tracking
        self._state = MonitorState.IDLE
        self._stop_event = threading.Event()
        self._scan_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._last_scan_time: float = 0
        self._scan_count: int = 0
        self._error_count: int = 0
        self._skipped_ticks: int = 0

    def check_statuses(self) -> int:
        """
        Execute one scan.

        Returns count of status changes published, -1 if the store could
        not be read. Returns 0 without scanning if another scan is already
        in progress or the monitor has been stopped.
        """
        if self._stop_event.is_set():
            return 0

        if not self._scan_lock.acquire(blocking=False):
            logger.debug('Status scan already in progress, skipping')
            return 0

        try:
            self._state = MonitorState.SCANNING
            return self._scan()
        finally:
            if self._state is MonitorState.SCANNING:
                self._state = MonitorState.IDLE
            self._scan_lock.release()

    def _scan(self) -> int:
        logger.debug('Checking flight statuses...')
        now = self.clock()

        try:
            flights = self.store.list_all()
        except Exception as e:
            self._error_count += 1
            logger.error(f'Error fetching flights for status check: {e}')
            return -1

        current_ids = set()
        changes = 0

        for flight in flights:
            if self._stop_event.is_set():
                logger.info('Status check interrupted by shutdown')
                break

            current_ids.add(flight.id)
            new_status = classify_status(flight.departure_time, now)
            last_status = self._last_known.get(flight.id)

            if last_status is None:
                self._last_known[flight.id] = new_status
                logger.debug(f'Tracking new flight {flight.flight_number} ({flight.id}) with status: {new_status}')
                continue

            if last_status != new_status:
                logger.info(
                    f'Status change: flight {flight.flight_number} ({flight.id}): '
                    f'{last_status} -> {new_status}'
                )
                self._last_known[flight.id] = new_status
                self._publish(FlightEvent.status_changed(flight.id, new_status, last_status, now))
                changes += 1
        else:
            # Only prune after a complete pass; a partial pass has not seen every id
            removed_ids = [fid for fid in self._last_known if fid not in current_ids]
            for removed_id in removed_ids:
                del self._last_known[removed_id]
                logger.debug(f'Stopped tracking status for removed flight {removed_id}')

        self._scan_count += 1
        self._last_scan_time = time.time()
        logger.debug(f'Flight status check complete ({changes} changes, {len(self._last_known)} tracked)')
        return changes

    def _publish(self, event: FlightEvent) -> None:
        try:
            self.sink.publish(event)
        except Exception as e:
            logger.error(f'Error publishing status update for {event.flight_id}: {e}')

    def run_continuous(self) -> None:
        """
        Run the scan loop until stop() is called.

        This method blocks - use start_background() for non-blocking.
        """
        logger.info(
            f'Flight status monitor starting (interval={self.interval}s, '
            f'startup delay={self.startup_delay}s)'
        )

        try:
            if self._stop_event.wait(self.startup_delay):
                return

            next_tick = time.monotonic()
            while not self._stop_event.is_set():
                self.check_statuses()

                next_tick += self.interval
                now = time.monotonic()
                while next_tick <= now:
                    # Scan overran one or more ticks
                    next_tick += self.interval
                    self._skipped_ticks += 1

                if self._stop_event.wait(next_tick - now):
                    break
        except Exception as e:
            logger.error(f'Unhandled exception in flight status monitor: {e}')
        finally:
            self._state = MonitorState.STOPPED
            logger.info('Flight status monitor stopped')

    def start_background(self) -> None:
        """Start the scan loop in a background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning('Status monitor already running')
            return
        if self._stop_event.is_set():
            logger.warning('Status monitor was stopped and cannot be restarted')
            return

        self._thread = threading.Thread(
            target=self.run_continuous,
            name='flight-status-monitor',
            daemon=True,
        )
        self._thread.start()
        logger.info('Background status monitor started')

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Signal the loop to stop and wait for it.

        An in-progress scan stops at the next flight boundary. No new scan
        starts after this call.
        """
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout if timeout is not None else config.monitor.shutdown_timeout_seconds)
        self._state = MonitorState.STOPPED

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    @property
    def tracked_count(self) -> int:
        return len(self._last_known)

    def last_known_status(self, flight_id: uuid.UUID) -> Optional[FlightStatus]:
        return self._last_known.get(flight_id)

    @property
    def stats(self) -> dict:
        """Get monitor statistics."""
        return {
            'state': self._state.value,
            'running': self.running,
            'interval_seconds': self.interval,
            'scan_count': self._scan_count,
            'error_count': self._error_count,
            'skipped_ticks': self._skipped_ticks,
            'tracked_flights': len(self._last_known),
            'last_scan_time': self._last_scan_time,
        }
