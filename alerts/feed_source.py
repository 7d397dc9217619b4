"""
RSS/Atom feed fetching, producing candidate items for alerts.
"""

import hashlib
from typing import List

import feedparser  # type: ignore
from html2text import html2text

from alerts.config import FeedConfig
from delivery_receipts.constants import MAX_ITEMS_PER_FETCH
from delivery_receipts.models import CandidateItem
from util.logging_util import setup_logger

logger = setup_logger(__name__)


def _generate_item_id(entry: dict, feed_url: str) -> str:
    """Generate a stable ID for a feed entry.

    Uses the entry's id/guid if available, then its link, otherwise a hash
    of the feed URL and title.
    """
    entry_id = entry.get("id") or entry.get("guid") or entry.get("link")
    if entry_id:
        return entry_id

    title = entry.get("title", "")
    hash_input = f"{feed_url}:{title}"
    return hashlib.sha256(hash_input.encode()).hexdigest()[:32]


def _extract_body(entry: dict) -> str:
    """Extract and clean summary/description from a feed entry."""
    summary = entry.get("summary", "") or entry.get("description", "")
    if not summary:
        return ""
    return html2text(summary).strip()


def fetch_candidates(
    feed_configs: List[FeedConfig], max_items: int = MAX_ITEMS_PER_FETCH
) -> List[CandidateItem]:
    """
    Fetch candidate items from RSS feeds.

    Feeds are read in order and the result stops at `max_items`. Each ID
    appears at most once. Feeds that cannot be fetched are skipped.
    """
    if not feed_configs:
        logger.warning("No feeds configured")
        return []

    seen_ids = set()
    items = []

    for feed_config in feed_configs:
        if len(items) >= max_items:
            break

        try:
            feed = feedparser.parse(feed_config.url)
        except Exception as e:
            logger.error(f"Error fetching feed {feed_config.name}: {e}")
            continue

        status = feed.get("status")
        if status and status >= 400:
            logger.warning(f"HTTP {status} for feed {feed_config.name}")
            continue

        for entry in feed.get("entries", []):
            item_id = _generate_item_id(entry, feed_config.url)
            if item_id in seen_ids:
                continue

            title = entry.get("title", "").strip()
            if not title:
                continue

            seen_ids.add(item_id)
            items.append(CandidateItem(
                id=item_id,
                title=title,
                body=_extract_body(entry),
                url=entry.get("link") or None,
                metadata={
                    "feed_name": feed_config.name,
                    "feed_url": feed_config.url,
                    "published": entry.get("published", ""),
                },
            ))
            if len(items) >= max_items:
                break

    logger.info(f"Fetched {len(items)} candidate items from {len(feed_configs)} feeds")
    return items
