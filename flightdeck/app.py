"""
FlightDeck Flask Application.

Main entry point for the web application. Initializes:
- In-memory flight store (optionally seeded with timed demo flights)
- Notification hub and optional webhook sink
- Background status monitor
- API routes

Usage:
    python -m flightdeck.app

Or with gunicorn (single worker, the store is per-process):
    gunicorn --threads 8 'flightdeck.app:create_app()'
"""

import atexit
import logging
import os
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from flightdeck.config import config
from flightdeck.api import flights_bp, metrics_bp
from flightdeck.errors import FlightDeckError
from flightdeck.models import Clock, utc_now
from flightdeck.monitor import FlightStatusMonitor
from flightdeck.notifications import NotificationHub, WebhookSink
from flightdeck.services import FlightService, seed_demo_flights
from flightdeck.store import FlightStore

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format=LOG_FORMAT,
    datefmt=LOG_DATE_FORMAT,
)
logger = logging.getLogger(__name__)


def configure_file_logging(path: Optional[str] = None) -> Optional[logging.Handler]:
    """Add a daily rotated log file to the root logger if a path is set."""
    path = path or config.logging.file_path
    if not path:
        return None

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, TimedRotatingFileHandler) and handler.baseFilename == os.path.abspath(path):
            return handler

    handler = TimedRotatingFileHandler(
        path,
        when='midnight',
        backupCount=config.logging.backup_count,
        utc=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    root.addHandler(handler)
    logger.info(f'Logging to {path}')
    return handler


def create_app(
    start_monitor: bool = True,
    seed_data: Optional[bool] = None,
    store: Optional[FlightStore] = None,
    hub: Optional[NotificationHub] = None,
    clock: Optional[Clock] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        start_monitor: Whether to start the background status monitor.
                       Set to False for testing.
        seed_data: Seed timed demo flights (defaults to SEED_DEMO_DATA).
        store: Flight store to serve (a fresh one if None).
        hub: Notification hub (a fresh one if None).
        clock: Source of the current time (UTC).

    Returns:
        Configured Flask application instance.
    """
    configure_file_logging()

    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    origins = list(config.cors_origins) if config.cors_origins != ('*',) else '*'
    CORS(app, resources={r'/api/*': {'origins': origins}})

    clock = clock or utc_now
    if store is None:
        store = FlightStore(clock=clock)
    if hub is None:
        hub = NotificationHub()
    if seed_data is None:
        seed_data = config.seed.enabled

    webhook = WebhookSink.from_config()
    if webhook:
        hub.add_listener(webhook.publish)
        atexit.register(webhook.close, config.monitor.shutdown_timeout_seconds)
        logger.info(f'Webhook notifications enabled for {webhook.url}')

    if seed_data:
        seed_demo_flights(store, clock)

    service = FlightService(store, hub, clock=clock)
    monitor = FlightStatusMonitor(store, hub, clock=clock)

    app.config['FLIGHT_SERVICE'] = service
    app.config['NOTIFICATION_HUB'] = hub
    app.config['WEBHOOK_SINK'] = webhook
    app.config['STATUS_MONITOR'] = monitor

    # Register API blueprints
    app.register_blueprint(flights_bp)
    app.register_blueprint(metrics_bp)

    if start_monitor:
        monitor.start_background()
        atexit.register(monitor.stop)
        logger.info(f'Status monitor started with interval {monitor.interval}s')

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(FlightDeckError)
    def flightdeck_error(e: FlightDeckError):
        if e.status_code >= 500:
            logger.error(f'Internal error: {e.message}')
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {'error': 'Method not allowed'}, 405

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    # Get port from environment or default
    port = int(os.environ.get('PORT', 5000))

    logger.info(f'Starting FlightDeck on http://localhost:{port}')
    logger.info(f'Flights API: http://localhost:{port}/api/flights')
    logger.info(f'Event stream: http://localhost:{port}/api/flights/stream')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
        threaded=True,
        use_reloader=False,  # Disable reloader to prevent duplicate monitor threads
    )


if __name__ == '__main__':
    run_development_server()
