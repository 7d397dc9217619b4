"""
Configuration for the alert fetch cycle.

Settings live in a YAML file. Telegram credentials are read from the
environment only.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from alerts.constants import DEFAULT_CONFIG_PATH
from delivery_receipts.constants import DB_NAME, MAX_ITEMS_PER_FETCH, RECEIPT_CAPACITY
from util.logging_util import setup_logger

logger = setup_logger(__name__)

TELEGRAM_BOT_TOKEN_ENV = "TELEGRAM_BOT_TOKEN"
TELEGRAM_CHAT_ID_ENV = "TELEGRAM_CHAT_ID"


@dataclass
class FeedConfig:
    """Configuration for a single RSS feed."""
    name: str
    url: str


@dataclass
class AlertsConfig:
    """Settings for one process running the fetch-filter-present cycle."""
    db_path: str = DB_NAME
    receipt_capacity: int = RECEIPT_CAPACITY
    max_items_per_fetch: int = MAX_ITEMS_PER_FETCH
    # Whether the user has granted permission to be alerted
    alerts_enabled: bool = False
    poll_interval_seconds: int = 15 * 60
    max_poll_interval_seconds: int = 4 * 60 * 60
    feeds: List[FeedConfig] = field(default_factory=list)
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None


def _positive_int(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> AlertsConfig:
    """Load the alerts configuration from a YAML file.

    A missing file gives the defaults, with alerts disabled and no feeds.
    """
    data = {}
    if config_path.exists():
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.warning(f"Alerts config not found at {config_path}, using defaults")

    if not isinstance(data, dict):
        raise ValueError(f"Alerts config at {config_path} must be a mapping")

    feeds = []
    for feed_data in data.get("feeds") or []:
        if "name" not in feed_data or "url" not in feed_data:
            raise ValueError(f"Each feed needs a 'name' and a 'url', got {feed_data!r}")
        feeds.append(FeedConfig(name=feed_data["name"], url=feed_data["url"]))

    alerts_enabled = data.get("alerts_enabled", False)
    if not isinstance(alerts_enabled, bool):
        raise ValueError(f"'alerts_enabled' must be true or false, got {alerts_enabled!r}")

    config = AlertsConfig(
        db_path=str(data.get("db_path", DB_NAME)),
        receipt_capacity=_positive_int(data, "receipt_capacity", RECEIPT_CAPACITY),
        max_items_per_fetch=_positive_int(data, "max_items_per_fetch", MAX_ITEMS_PER_FETCH),
        alerts_enabled=alerts_enabled,
        poll_interval_seconds=_positive_int(data, "poll_interval_seconds", 15 * 60),
        max_poll_interval_seconds=_positive_int(data, "max_poll_interval_seconds", 4 * 60 * 60),
        feeds=feeds,
        telegram_bot_token=os.environ.get(TELEGRAM_BOT_TOKEN_ENV),
        telegram_chat_id=os.environ.get(TELEGRAM_CHAT_ID_ENV),
    )

    if config.max_poll_interval_seconds < config.poll_interval_seconds:
        raise ValueError("'max_poll_interval_seconds' must not be below 'poll_interval_seconds'")

    if config.receipt_capacity < config.max_items_per_fetch:
        raise ValueError("'receipt_capacity' must not be below 'max_items_per_fetch'")

    return config
