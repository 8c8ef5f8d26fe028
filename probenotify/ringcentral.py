"""RingCentral notification through an incoming webhook."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import requests

from probenotify.base import DefaultNotify, Format, NotifySettings

logger = logging.getLogger(__name__)

_OK_BODY = '{"status":"OK"}'
_CARD_SCHEMA = "http://adaptivecards.io/schemas/adaptive-card.json"


class RingCentralError(Exception):
    """Raised when RingCentral rejects a message."""


@dataclass
class RingCentralNotify(DefaultNotify):
    """Notifier posting adaptive cards to a RingCentral incoming webhook."""

    webhook_url: str = ""

    def config(self, settings: NotifySettings) -> None:
        """Configure the RingCentral notification."""
        self.kind = "ringcentral"
        self.format = Format.TEXT
        self.send_func = self.send_ringcentral
        super().config(settings)
        logger.debug("Notification [%s] - [%s] configuration: %r", self.kind, self.name, self)

    def send_ringcentral(self, title: str, msg: str) -> None:
        """Post a card made of ``title`` and ``msg``; raise RingCentralError on failure."""
        payload = {
            "attachments": [
                {
                    "$schema": _CARD_SCHEMA,
                    "type": "AdaptiveCard",
                    "version": "1.0",
                    "body": [
                        {
                            "type": "TextBlock",
                            "text": title,
                            "weight": "bolder",
                            "size": "medium",
                            "wrap": True,
                        },
                        {"type": "TextBlock", "text": msg, "wrap": True},
                    ],
                }
            ]
        }
        response = requests.post(
            self.webhook_url,
            data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            headers={"Content-Type": "application/json", "Connection": "close"},
            timeout=self.timeout or None,
        )
        text = response.text
        if response.status_code != 200:
            logger.debug(msg)
            raise RingCentralError(
                f"Error response from RingCentral - code [{response.status_code}] - msg [{text}]"
            )
        if text != _OK_BODY:
            raise RingCentralError("Non-ok response returned from RingCentral " + text)