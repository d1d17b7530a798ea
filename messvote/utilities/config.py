"""Configuration management for the mess voting service."""
import logging
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Empty means server local time
TIMEZONE: Final[str] = os.getenv('MESSVOTE_TIMEZONE', '')

# Voting defaults (overridden by the stored system settings)
DEFAULT_VOTING_START: Final[str] = os.getenv('DEFAULT_VOTING_START', '00:00')
DEFAULT_VOTING_END: Final[str] = os.getenv('DEFAULT_VOTING_END', '12:00')
DEFAULT_MENU_CYCLE_DAYS: Final[int] = int(os.getenv('DEFAULT_MENU_CYCLE_DAYS', '7'))

# Static admin credential (not hardened)
ADMIN_USERNAME: Final[str] = os.getenv('ADMIN_USERNAME', 'admin')
ADMIN_PASSWORD: Final[str] = os.getenv('ADMIN_PASSWORD', 'admin123')

# Store behaviour
STORE_LOCK_TIMEOUT_SECONDS: Final[float] = float(os.getenv('STORE_LOCK_TIMEOUT_SECONDS', '5'))
VOTE_RETRY_ATTEMPTS: Final[int] = int(os.getenv('VOTE_RETRY_ATTEMPTS', '3'))
VOTE_RETRY_BACKOFF_SECONDS: Final[float] = float(os.getenv('VOTE_RETRY_BACKOFF_SECONDS', '0.2'))

# Change feed / polling cadence advertised to clients
MAX_FEED_EVENTS: Final[int] = int(os.getenv('MAX_FEED_EVENTS', '300'))
RESULTS_POLL_SECONDS: Final[int] = int(os.getenv('RESULTS_POLL_SECONDS', '30'))
SETTINGS_POLL_SECONDS: Final[int] = int(os.getenv('SETTINGS_POLL_SECONDS', '120'))
SUBSCRIPTION_KEEPALIVE_SECONDS: Final[float] = float(os.getenv('SUBSCRIPTION_KEEPALIVE_SECONDS', '15'))

# Uploads
MAX_PHOTO_BYTES: Final[int] = int(os.getenv('MAX_PHOTO_BYTES', str(5 * 1024 * 1024)))

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('MESSVOTE_DATA_DIR', str(BASE_DIR / 'data')))
MEDIA_DIR: Final[Path] = Path(os.getenv('MESSVOTE_MEDIA_DIR', str(DATA_DIR / 'media')))
MEDIA_URL: Final[str] = '/media'


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging once for the running process."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
