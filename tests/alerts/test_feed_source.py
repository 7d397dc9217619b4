"""Tests for feed fetching."""

from unittest.mock import patch

from alerts.config import FeedConfig
from alerts.feed_source import _extract_body, _generate_item_id, fetch_candidates


def _entry(entry_id, title="Some title", **extra):
    entry = {"id": entry_id, "title": title, "link": f"https://example.com/{entry_id}"}
    entry.update(extra)
    return entry


class TestGenerateItemId:
    """Tests for _generate_item_id function."""

    def test_uses_entry_id_if_present(self):
        entry = {"id": "unique-entry-id-123", "link": "https://example.com/article"}
        assert _generate_item_id(entry, "https://feed.com/rss") == "unique-entry-id-123"

    def test_uses_guid_if_no_id(self):
        entry = {"guid": "guid-1", "link": "https://example.com/article"}
        assert _generate_item_id(entry, "https://feed.com/rss") == "guid-1"

    def test_uses_link_if_no_id(self):
        entry = {"link": "https://example.com/article"}
        assert _generate_item_id(entry, "https://feed.com/rss") == "https://example.com/article"

    def test_generates_hash_as_fallback(self):
        """Test hash generation when no ID or link available."""
        entry = {"title": "Some Article Title"}
        result = _generate_item_id(entry, "https://feed.com/rss")
        assert len(result) == 32
        assert all(c in "0123456789abcdef" for c in result)

    def test_hash_depends_on_feed(self):
        entry = {"title": "Some Article Title"}
        assert _generate_item_id(entry, "https://a.com/rss") != _generate_item_id(entry, "https://b.com/rss")


class TestExtractBody:
    """Tests for _extract_body function."""

    def test_prefers_summary_over_description(self):
        entry = {"summary": "Summary text", "description": "Description text"}
        assert _extract_body(entry) == "Summary text"

    def test_converts_html_to_text(self):
        entry = {"summary": "<p>This is <strong>bold</strong> text.</p>"}
        result = _extract_body(entry)
        assert "bold" in result
        assert "<p>" not in result

    def test_empty_body(self):
        assert _extract_body({}) == ""


class TestFetchCandidates:
    """Tests for fetch_candidates function."""

    @patch("alerts.feed_source.feedparser.parse")
    def test_fetches_items_from_feed(self, mock_parse):
        mock_parse.return_value = {
            "status": 200,
            "entries": [
                _entry("item-1", title="Release 1.0", summary="Notes", published="Mon, 19 Oct 2026"),
            ],
        }

        feeds = [FeedConfig(name="Test Feed", url="https://feed.com/rss")]
        items = fetch_candidates(feeds)

        assert len(items) == 1
        assert items[0].id == "item-1"
        assert items[0].title == "Release 1.0"
        assert items[0].body == "Notes"
        assert items[0].url == "https://example.com/item-1"
        assert items[0].metadata["feed_name"] == "Test Feed"

    @patch("alerts.feed_source.feedparser.parse")
    def test_caps_at_max_items(self, mock_parse):
        mock_parse.return_value = {
            "status": 200,
            "entries": [_entry(f"item-{i}") for i in range(80)],
        }

        feeds = [
            FeedConfig(name="Feed 1", url="https://feed.com/1"),
            FeedConfig(name="Feed 2", url="https://feed.com/2"),
        ]
        items = fetch_candidates(feeds, max_items=50)

        assert len(items) == 50
        # The second feed is never fetched once the cap is reached
        assert mock_parse.call_count == 1

    @patch("alerts.feed_source.feedparser.parse")
    def test_deduplicates_by_id(self, mock_parse):
        mock_parse.return_value = {
            "status": 200,
            "entries": [_entry("same-id", title="First"), _entry("same-id", title="Second")],
        }

        feeds = [FeedConfig(name="Test Feed", url="https://feed.com/rss")]
        items = fetch_candidates(feeds)

        assert [item.title for item in items] == ["First"]

    @patch("alerts.feed_source.feedparser.parse")
    def test_skips_entries_without_title(self, mock_parse):
        mock_parse.return_value = {
            "status": 200,
            "entries": [_entry("item-1", title=""), _entry("item-2", title="Valid")],
        }

        feeds = [FeedConfig(name="Test Feed", url="https://feed.com/rss")]
        items = fetch_candidates(feeds)

        assert [item.id for item in items] == ["item-2"]

    @patch("alerts.feed_source.feedparser.parse")
    def test_handles_http_errors(self, mock_parse):
        mock_parse.return_value = {"status": 404, "entries": []}

        feeds = [FeedConfig(name="Test Feed", url="https://feed.com/rss")]
        assert fetch_candidates(feeds) == []

    @patch("alerts.feed_source.feedparser.parse")
    def test_failing_feed_does_not_stop_others(self, mock_parse):
        mock_parse.side_effect = [
            Exception("Network error"),
            {"status": 200, "entries": [_entry("item-1")]},
        ]

        feeds = [
            FeedConfig(name="Broken", url="https://broken.com/rss"),
            FeedConfig(name="Working", url="https://feed.com/rss"),
        ]
        items = fetch_candidates(feeds)

        assert [item.id for item in items] == ["item-1"]

    def test_no_feeds(self):
        assert fetch_candidates([]) == []
