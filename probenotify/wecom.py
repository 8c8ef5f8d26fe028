"""WeCom notification through a group robot webhook."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import requests

from probenotify.base import DefaultNotify, Format, NotifySettings

logger = logging.getLogger(__name__)


class WecomError(Exception):
    """Raised when WeCom rejects a message."""


@dataclass
class WecomNotify(DefaultNotify):
    """Notifier posting markdown messages to a WeCom robot webhook."""

    webhook_url: str = ""

    def config(self, settings: NotifySettings) -> None:
        """Configure the WeCom notification."""
        self.kind = "wecom"
        self.format = Format.MARKDOWN
        self.send_func = self.send_wecom
        super().config(settings)
        logger.debug("Notification [%s] - [%s] configuration: %r", self.kind, self.name, self)

    def send_wecom(self, title: str, msg: str) -> None:
        """Send ``msg``; the title is already part of the markdown message."""
        self.send_wecom_notification(msg)

    def send_wecom_notification(self, msg: str) -> None:
        """Post ``msg`` as markdown; raise WecomError on a non-200 response."""
        payload = {"msgtype": "markdown", "markdown": {"content": msg}}
        response = requests.post(
            self.webhook_url,
            data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            headers={"Content-Type": "application/json", "Connection": "close"},
            timeout=self.timeout or None,
        )
        if response.status_code != 200:
            raise WecomError(
                f"Error response from Wecom - code [{response.status_code}] - msg [{response.text}]"
            )