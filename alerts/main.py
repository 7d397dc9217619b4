"""
Entrypoint for the periodic alert loop.

Usage:
    python -m alerts.main --config alerts/data/alerts.yaml
    python -m alerts.main --once
"""

import argparse
import logging
import time
from functools import partial
from pathlib import Path
from typing import List, Optional

from alerts.config import AlertsConfig, load_config
from alerts.constants import DEFAULT_CONFIG_PATH
from alerts.feed_source import fetch_candidates
from alerts.presenter import AlertPresenter, telegram_sender
from alerts.scanner import CycleResult, next_poll_interval, run_fetch_cycle
from delivery_receipts import db_engine
from util.logging_util import set_log_level, setup_logger

logger = setup_logger(__name__)


def build_presenter(config: AlertsConfig) -> AlertPresenter:
    """Build the presenter, disabling alerts if Telegram credentials are missing."""
    alerts_enabled = config.alerts_enabled
    if alerts_enabled and not (config.telegram_bot_token and config.telegram_chat_id):
        logger.warning("Alerts are enabled but Telegram credentials are not set, disabling alerts")
        alerts_enabled = False

    return AlertPresenter(
        alerts_enabled=alerts_enabled,
        send=telegram_sender(config.telegram_bot_token or "", config.telegram_chat_id or ""),
    )


def run_cycle(config: AlertsConfig, presenter: AlertPresenter) -> CycleResult:
    fetch = partial(fetch_candidates, config.feeds, config.max_items_per_fetch)
    return run_fetch_cycle(fetch, presenter, capacity=config.receipt_capacity)


def run_forever(config: AlertsConfig, presenter: AlertPresenter):
    interval = config.poll_interval_seconds

    while True:
        try:
            result = run_cycle(config, presenter)
        except Exception:
            logger.exception("Alert cycle crashed")
            result = CycleResult.FAILED

        interval = next_poll_interval(
            result, interval, config.poll_interval_seconds, config.max_poll_interval_seconds
        )
        logger.info(f"Cycle result: {result.value}, next cycle in {interval}s")
        time.sleep(interval)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Fetch feed items and alert about the ones not delivered before"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to the alerts YAML config",
    )
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level(logging.DEBUG)

    config = load_config(args.config)
    db_engine.configure(config.db_path)
    presenter = build_presenter(config)

    logger.info(
        f"Starting alerts: {len(config.feeds)} feeds, db={config.db_path}, "
        f"capacity={config.receipt_capacity}, alerts_enabled={presenter.alerts_enabled}"
    )

    if args.once:
        result = run_cycle(config, presenter)
        return 1 if result == CycleResult.FAILED else 0

    run_forever(config, presenter)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
