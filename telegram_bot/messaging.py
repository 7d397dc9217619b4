import requests

from util.logging_util import log_telegram_message_sent, setup_logger

logger = setup_logger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


def get_telegram_api_url(bot_token: str) -> str:

    return f"{TELEGRAM_API_URL}/bot{bot_token}"


def send_message(bot_token: str, chat_id: str, text: str, timeout: float = 10):
    """
    Sends a message from the bot to a chat.
    Raises requests.HTTPError if Telegram rejects it.
    """

    response = requests.post(
        f"{get_telegram_api_url(bot_token)}/sendMessage",
        json={"chat_id": chat_id, "text": text},
        timeout=timeout,
    )
    response.raise_for_status()

    log_telegram_message_sent(logger, chat_id, text)
