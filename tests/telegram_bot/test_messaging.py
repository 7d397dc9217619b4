"""Tests for Telegram messaging."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from telegram_bot.messaging import get_telegram_api_url, send_message


class TestSendMessage:
    """Tests for send_message function."""

    def test_api_url(self):
        assert get_telegram_api_url("abc") == "https://api.telegram.org/botabc"

    @patch("telegram_bot.messaging.requests.post")
    def test_posts_message(self, mock_post):
        mock_post.return_value = MagicMock()

        send_message("abc", "42", "hello")

        mock_post.assert_called_once_with(
            "https://api.telegram.org/botabc/sendMessage",
            json={"chat_id": "42", "text": "hello"},
            timeout=10,
        )
        mock_post.return_value.raise_for_status.assert_called_once()

    @patch("telegram_bot.messaging.requests.post")
    def test_raises_on_http_error(self, mock_post):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("403 Forbidden")
        mock_post.return_value = response

        with pytest.raises(requests.HTTPError):
            send_message("abc", "42", "hello")
