"""Telegram notification through the bot API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote_plus

import requests

from probenotify.base import DefaultNotify, Format, NotifySettings

logger = logging.getLogger(__name__)

_API_BASE = "https://api.telegram.org/bot"


class TelegramError(Exception):
    """Raised when Telegram rejects a message."""


@dataclass
class TelegramNotify(DefaultNotify):
    """Notifier sending markdown messages to a Telegram chat through a bot."""

    token: str = ""
    chat_id: str = ""

    def config(self, settings: NotifySettings) -> None:
        """Configure the Telegram notification."""
        self.kind = "telegram"
        self.format = Format.MARKDOWN
        self.send_func = self.send_telegram
        super().config(settings)
        logger.debug("Notification [%s] - [%s] configuration: %r", self.kind, self.name, self)

    def send_telegram(self, title: str, text: str) -> None:
        """Send ``text``; the title is already part of the message."""
        self.send_telegram_notification(text)

    def send_telegram_notification(self, text: str) -> None:
        """Send ``text`` to the chat; raise TelegramError on a non-200 response."""
        api = (
            f"{_API_BASE}{self.token}/sendMessage?&chat_id={self.chat_id}"
            f"&parse_mode=markdown&text={quote_plus(text)}"
        )
        logger.debug("[%s] - API %s", self.kind, api)
        response = requests.post(
            api,
            headers={"Content-Type": "application/json", "Connection": "close"},
            timeout=self.timeout or None,
        )
        if response.status_code != 200:
            raise TelegramError(
                f"Error response from Telegram - code [{response.status_code}] "
                f"- msg [{response.text}]"
            )