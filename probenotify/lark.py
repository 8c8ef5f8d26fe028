"""Lark notification through a robot webhook."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import requests

from probenotify.base import DefaultNotify, Format, NotifySettings

logger = logging.getLogger(__name__)


class LarkError(Exception):
    """Raised when Lark rejects a message."""


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class LarkNotify(DefaultNotify):
    """Notifier posting messages to a Lark robot webhook."""

    webhook_url: str = ""

    def config(self, settings: NotifySettings) -> None:
        """Configure the Lark notification."""
        self.kind = "lark"
        self.format = Format.LARK
        self.send_func = self.send_lark
        super().config(settings)
        logger.debug("Notification [%s] - [%s] configuration: %r", self.kind, self.name, self)

    def send_lark(self, title: str, msg: str) -> None:
        """Send ``msg``; the title is already part of the Lark message."""
        self.send_lark_notification(msg)

    def send_lark_notification(self, msg: str) -> None:
        """Post ``msg`` to the webhook; raise LarkError unless Lark reports success."""
        response = requests.post(
            self.webhook_url,
            data=msg.encode("utf-8"),
            headers={"Content-Type": "application/json", "Connection": "close"},
            timeout=self.timeout or None,
        )
        text = response.text
        try:
            ret = json.loads(text)
        except ValueError:
            ret = None
        if not isinstance(ret, dict):
            raise LarkError(f"Error response from Lark [{response.status_code}] - [{text}]")

        # Success looks like {"StatusCode":0,...}; failure like {"code":9499,"msg":"..."}
        status_code = ret.get("StatusCode")
        if not _is_number(status_code) or status_code != 0:
            code = ret.get("code")
            message = ret.get("msg")
            code_value = int(code) if _is_number(code) else 0
            message_value = message if isinstance(message, str) else ""
            raise LarkError(
                f"Error response from Lark - code [{code_value}] - msg [{message_value}]"
            )