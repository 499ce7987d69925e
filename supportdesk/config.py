"""
Support Desk Configuration
Loads settings from environment variables with sensible defaults.
"""

import logging
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

_logger = logging.getLogger(__name__)

# Load .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        _logger.critical(f"TIMEZONE '{name}' is not a known IANA zone")
        raise ValueError(f"TIMEZONE '{name}' is not a known IANA zone, e.g. UTC or Europe/Lisbon") from exc
    return name


def _preview_chars(raw: str) -> int:
    if not raw.strip().isdecimal():
        _logger.critical(f"NOTIFICATION_PREVIEW_CHARS '{raw}' is not a non-negative integer")
        raise ValueError(f"NOTIFICATION_PREVIEW_CHARS must be a non-negative integer, got '{raw}'")
    return int(raw)


class Config:
    """Application configuration."""

    # Database — must be set in .env; never hardcode credentials here
    DATABASE_URL = os.getenv('DATABASE_URL')
    if not DATABASE_URL:
        _logger.critical("DATABASE_URL is not set — cannot start. Copy .env.example to .env and configure it.")
        raise ValueError("DATABASE_URL environment variable is not set. Copy .env.example to .env and configure it.")

    # Timezone used when stamping contacts and notifications
    TIMEZONE = _timezone(os.getenv('TIMEZONE', 'UTC'))

    # Number of message characters copied into notification payloads
    NOTIFICATION_PREVIEW_CHARS = _preview_chars(os.getenv('NOTIFICATION_PREVIEW_CHARS', '120'))

    # Row-lock the picked support agent for the rest of the transaction
    SUPPORT_SELECTION_SKIP_LOCKED = _env_flag('SUPPORT_SELECTION_SKIP_LOCKED', 'true')


# Singleton instance
config = Config()
