"""Microsoft Teams notification through an incoming webhook."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import requests

from probenotify.base import DefaultNotify, Format, NotifySettings

logger = logging.getLogger(__name__)


class TeamsError(Exception):
    """Raised when Teams rejects a message."""


@dataclass
class TeamsNotify(DefaultNotify):
    """Notifier posting message cards to a Teams webhook."""

    webhook_url: str = ""

    def config(self, settings: NotifySettings) -> None:
        """Configure the Teams notification."""
        self.kind = "teams"
        self.format = Format.MARKDOWN_SOCIAL
        self.send_func = self.send_teams_message
        super().config(settings)
        logger.debug("Notification [%s] - [%s] configuration: %r", self.kind, self.name, self)

    def send_teams_message(self, title: str, msg: str) -> None:
        """Post a message card; raise TeamsError if Teams does not accept it."""
        card = {"@type": "MessageCard", "@context": "https://schema.org/extensions"}
        if title:
            card["title"] = title
        if msg:
            card["text"] = msg
        response = requests.post(
            self.webhook_url,
            data=json.dumps(card, ensure_ascii=False).encode("utf-8"),
            headers={"Content-Type": "application/json", "Connection": "close"},
            timeout=self.timeout or None,
        )
        text = response.text
        if response.status_code != 200 and text != "1":
            raise TeamsError(
                f"error response from Teams Webhook - code [{response.status_code}] - msg [{text}]"
            )