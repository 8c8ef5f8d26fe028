"""DingTalk notification through a robot webhook, optionally signed."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote_plus

import requests

from probenotify.base import DefaultNotify, Format, NotifySettings

logger = logging.getLogger(__name__)


class DingtalkError(Exception):
    """Raised when DingTalk rejects a message."""


@dataclass
class DingtalkNotify(DefaultNotify):
    """Notifier posting markdown messages to a DingTalk robot webhook."""

    webhook_url: str = ""
    sign_secret: str = ""

    def config(self, settings: NotifySettings) -> None:
        """Configure the DingTalk notification."""
        self.kind = "dingtalk"
        self.format = Format.MARKDOWN
        self.send_func = self.send_dingtalk_notification
        super().config(settings)
        logger.debug("Notification [%s] - [%s] configuration: %r", self.kind, self.name, self)

    def send_dingtalk_notification(self, title: str, msg: str) -> None:
        """Post a markdown message; raise DingtalkError unless the reply says ``ok``."""
        payload = {
            "msgtype": "markdown",
            "markdown": {"title": f"**{title}**", "text": msg},
        }
        response = requests.post(
            self._add_sign(self.webhook_url, self.sign_secret),
            data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            headers={"Content-Type": "application/json", "Connection": "close"},
            timeout=self.timeout or None,
        )
        text = response.text
        try:
            ret = json.loads(text)
        except ValueError:
            ret = None
        if not isinstance(ret, dict) or ret.get("errmsg") != "ok":
            raise DingtalkError(
                f"[{self.kind} / {self.name}] - Error response from Dingtalk "
                f"[{response.status_code}] - [{text}]"
            )

    def _add_sign(
        self, webhook_url: str, secret: str, timestamp: Optional[int] = None
    ) -> str:
        webhook = webhook_url
        if secret:
            if timestamp is None:
                timestamp = int(time.time() * 1000)
            string_to_sign = f"{timestamp}\n{secret}"
            digest = hmac.new(
                secret.encode("utf-8"), string_to_sign.encode("utf-8"), hashlib.sha256
            ).digest()
            sign = quote_plus(base64.b64encode(digest).decode("ascii"))
            webhook = f"{webhook_url}&timestamp={timestamp}&sign={sign}"
        logger.debug("[%s / %s] - Dingtalk webhook: %s", self.kind, self.name, webhook)
        return webhook