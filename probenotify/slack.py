"""Slack notification through an incoming webhook."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from probenotify.base import DefaultNotify, Format, NotifySettings

logger = logging.getLogger(__name__)


class SlackError(Exception):
    """Raised when Slack rejects a message."""


@dataclass
class SlackNotify(DefaultNotify):
    """Notifier posting messages to a Slack incoming webhook."""

    webhook_url: str = ""

    def config(self, settings: NotifySettings) -> None:
        """Configure the Slack notification."""
        self.kind = "slack"
        self.format = Format.SLACK
        self.send_func = self.send_slack
        super().config(settings)
        logger.debug("Notification [%s] - [%s] configuration: %r", self.kind, self.name, self)

    def send_slack(self, title: str, msg: str) -> None:
        """Send ``msg``; the title is already part of the Slack message."""
        self.send_slack_notification(msg)

    def send_slack_notification(self, msg: str) -> None:
        """Post ``msg`` to the webhook; raise SlackError on a non-200 response."""
        response = requests.post(
            self.webhook_url,
            data=msg.encode("utf-8"),
            headers={"Content-Type": "application/json", "Connection": "close"},
            timeout=self.timeout or None,
        )
        if response.status_code != 200:
            logger.debug(msg)
            raise SlackError(
                f"Error response from Slack - code [{response.status_code}] - msg [{response.text}]"
            )