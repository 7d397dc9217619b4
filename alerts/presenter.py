"""
Presents filtered candidate items to the user as Telegram alerts.
"""

from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable

from alerts.constants import MAX_ALERT_BODY_CHARS
from delivery_receipts.models import CandidateItem
from telegram_bot.messaging import send_message
from util.logging_util import setup_logger

logger = setup_logger(__name__)


def format_alert(item: CandidateItem) -> str:
    """Format a candidate item as alert text."""
    msg = f"[Alert] {item.title}"

    feed_name = item.metadata.get("feed_name")
    if feed_name:
        msg += f"\nSource: {feed_name}"

    if item.body:
        body = item.body
        if len(body) > MAX_ALERT_BODY_CHARS:
            body = body[:MAX_ALERT_BODY_CHARS - 3] + "..."
        msg += f"\n\n{body}"

    if item.url:
        msg += f"\n\n{item.url}"

    return msg


def telegram_sender(bot_token: str, chat_id: str) -> Callable[[str], None]:
    """Build a send function that delivers alert text to one Telegram chat."""
    return partial(send_message, bot_token, chat_id)


@dataclass
class AlertPresenter:
    """Shows one alert per item, if the user has allowed alerts."""
    alerts_enabled: bool
    send: Callable[[str], None]

    def present(self, items: Iterable[CandidateItem]) -> int:
        """Present each item once. Returns how many alerts were shown.

        A failed send is logged and the remaining items are still presented.
        """
        items = sorted(items, key=lambda item: (item.title, item.id))
        if not self.alerts_enabled:
            if items:
                logger.warning(f"Alerts are disabled, not presenting {len(items)} items")
            return 0

        shown = 0
        for item in items:
            try:
                self.send(format_alert(item))
            except Exception:
                logger.exception(f"Failed to present alert for item {item.id}")
                continue
            shown += 1
        return shown
