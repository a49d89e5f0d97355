"""
Configuration management for FlightDeck.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


def _parse_bool(value: str) -> bool:
    """Parse common truthy strings ('1', 'true', 'yes', 'on')."""
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _parse_origins(value: str) -> Tuple[str, ...]:
    """Parse comma-separated CORS origins, '*' meaning any origin."""
    origins = tuple(o.strip() for o in value.split(',') if o.strip())
    return origins or ('*',)


@dataclass(frozen=True)
class MonitorConfig:
    """Status monitor cadence."""
    interval_seconds: float = float(os.getenv('STATUS_CHECK_INTERVAL_SECONDS', '60'))
    startup_delay_seconds: float = float(os.getenv('STATUS_CHECK_STARTUP_DELAY_SECONDS', '5'))

    # How long stop() waits for the monitor thread to finish its scan
    shutdown_timeout_seconds: float = 5.0


@dataclass(frozen=True)
class SeedConfig:
    """Demo data seeded into the store at startup."""
    enabled: bool = _parse_bool(os.getenv('SEED_DEMO_DATA', 'true'))


@dataclass(frozen=True)
class NotificationConfig:
    """Event fan-out settings."""
    webhook_url: Optional[str] = os.getenv('NOTIFY_WEBHOOK_URL') or None
    webhook_timeout_seconds: float = float(os.getenv('NOTIFY_WEBHOOK_TIMEOUT_SECONDS', '5'))
    webhook_queue_size: int = int(os.getenv('NOTIFY_WEBHOOK_QUEUE_SIZE', '1000'))

    # Per-subscriber bound for the event stream; slow clients drop events
    subscriber_queue_size: int = int(os.getenv('SSE_QUEUE_SIZE', '100'))
    heartbeat_seconds: float = float(os.getenv('SSE_HEARTBEAT_SECONDS', '15'))

    @property
    def webhook_enabled(self) -> bool:
        return bool(self.webhook_url)


@dataclass(frozen=True)
class LoggingConfig:
    """Log output settings."""
    file_path: Optional[str] = os.getenv('LOG_FILE') or None
    backup_count: int = 7  # Days of rotated logs to keep


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    monitor: MonitorConfig
    seed: SeedConfig
    notifications: NotificationConfig
    logging: LoggingConfig

    cors_origins: Tuple[str, ...]

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        monitor=MonitorConfig(),
        seed=SeedConfig(),
        notifications=NotificationConfig(),
        logging=LoggingConfig(),
        cors_origins=_parse_origins(os.getenv('CORS_ORIGINS', '*')),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
