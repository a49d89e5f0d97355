"""
System status API endpoints.

Provides endpoints for:
- GET /api/metrics/status - Monitor, store and notification health
"""

import logging
import time

from flask import Blueprint, jsonify, current_app

from flightdeck.config import config

logger = logging.getLogger(__name__)

metrics_bp = Blueprint('metrics', __name__, url_prefix='/api/metrics')


@metrics_bp.route('/status', methods=['GET'])
def get_system_status():
    """
    Get system health and status information.

    Returns:
    - Status monitor state and scan counters
    - Store statistics and current status distribution
    - Notification hub / webhook statistics
    """
    start_time = time.perf_counter()

    service = current_app.config['FLIGHT_SERVICE']
    hub = current_app.config['NOTIFICATION_HUB']
    webhook = current_app.config.get('WEBHOOK_SINK')

    monitor = current_app.config.get('STATUS_MONITOR')
    monitor_stats = monitor.stats if monitor else {'running': False}

    now = service.clock()
    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'status': 'healthy' if monitor_stats.get('running') else 'degraded',
        'monitor': monitor_stats,
        'store': service.store.stats,
        'distribution': service.store.status_distribution(now),
        'notifications': {
            'hub': hub.stats,
            'webhook': webhook.stats if webhook else None,
        },
        'config': {
            'check_interval_seconds': config.monitor.interval_seconds,
            'seed_demo_data': config.seed.enabled,
        },
        'timestamp': now.isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })
