"""Shared settings, retry handling and the base notifier that the channels build on."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_NAME = "__default_channel__"
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRY_TIMES = 3
DEFAULT_RETRY_INTERVAL = 5.0

SendFunc = Callable[[str, str], None]


class Format(str, Enum):
    """The message format a notifier expects."""

    UNKNOWN = "unknown"
    TEXT = "text"
    HTML = "html"
    MARKDOWN = "markdown"
    MARKDOWN_SOCIAL = "markdown-social"
    JSON = "json"
    LARK = "lark"
    SLACK = "slack"
    SMS = "sms"
    LOG = "log"
    SHELL = "shell"


@dataclass
class Retry:
    """How many times to try sending, and how long to wait in between (seconds)."""

    times: int = 0
    interval: float = 0.0


@dataclass
class NotifySettings:
    """Global notification settings used to fill in what a notifier leaves unset."""

    timeout: float = 0.0
    retry: Retry = field(default_factory=Retry)

    def normalize_timeout(self, timeout: float) -> float:
        """Return the notifier's timeout, the global one, or the default, in that order."""
        if timeout > 0:
            return timeout
        if self.timeout > 0:
            return self.timeout
        return DEFAULT_TIMEOUT

    def normalize_retry(self, retry: Retry) -> Retry:
        """Return a retry policy with every unset part filled in."""
        if retry.times > 0:
            times = retry.times
        elif self.retry.times > 0:
            times = self.retry.times
        else:
            times = DEFAULT_RETRY_TIMES

        if retry.interval > 0:
            interval = retry.interval
        elif self.retry.interval > 0:
            interval = self.retry.interval
        else:
            interval = DEFAULT_RETRY_INTERVAL
        return Retry(times=times, interval=interval)


class NoRetryError(Exception):
    """An error after which sending must not be tried again."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def do_retry(kind: str, name: str, tag: str, retry: Retry, fn: Callable[[], Any]) -> Any:
    """Call ``fn`` until it succeeds or the attempts run out; re-raise the last error."""
    times = max(retry.times, 1)
    last_error: Optional[Exception] = None
    for attempt in range(1, times + 1):
        try:
            return fn()
        except NoRetryError as err:
            logger.error("[%s / %s / %s] - %s (no retry)", kind, name, tag, err)
            raise
        except Exception as err:  # any failure of the send function counts as one attempt
            last_error = err
            logger.warning(
                "[%s / %s / %s] - attempt %d/%d failed - %s", kind, name, tag, attempt, times, err
            )
            if attempt < times and retry.interval > 0:
                time.sleep(retry.interval)
    assert last_error is not None
    raise last_error


def json_escape(text: str) -> str:
    """Escape ``text`` so it can be placed between quotes inside a JSON document."""
    return json.dumps(text, ensure_ascii=False)[1:-1]


@dataclass
class DefaultNotify:
    """The common part of every notifier: identity, channels, timeout and retry."""

    name: str = ""
    channels: list[str] = field(default_factory=list)
    dry: bool = False
    timeout: float = 0.0
    retry: Retry = field(default_factory=Retry)
    kind: str = ""
    format: Format = Format.UNKNOWN
    send_func: Optional[SendFunc] = field(default=None, repr=False, compare=False)

    def config(self, settings: NotifySettings) -> None:
        """Fill in timeout, retry and channels from the global settings."""
        mode = "Dry" if self.dry else "Live"
        logger.info("Notification [%s] - [%s] is running on %s mode!", self.kind, self.name, mode)
        self.timeout = settings.normalize_timeout(self.timeout)
        self.retry = settings.normalize_retry(self.retry)
        if not self.channels:
            self.channels.append(DEFAULT_CHANNEL_NAME)
        logger.info("Notification [%s] - [%s] is configured!", self.kind, self.name)

    def notify(self, title: str, message: str) -> None:
        """Send a formatted message, or only log it in dry mode."""
        if self.dry:
            self.dry_notify(title, message)
            return
        self.send_with_retry(title, message, "Notification")

    def send_with_retry(self, title: str, message: str, tag: str) -> bool:
        """Send through ``send_func`` with retries; log the outcome and return whether it worked."""

        def attempt() -> None:
            logger.debug("[%s / %s / %s] - %s", self.kind, self.name, tag, title)
            if self.send_func is None:
                logger.error(
                    "[%s / %s / %s] - %s send function is nil", self.kind, self.name, tag, title
                )
                raise NoRetryError("send function is nil")
            self.send_func(title, message)

        try:
            do_retry(self.kind, self.name, tag, self.retry, attempt)
        except Exception as err:  # the outcome is reported, not propagated
            logger.error(
                "[%s / %s / %s] - %s - failed to send! (%s)", self.kind, self.name, tag, title, err
            )
            return False
        logger.info("[%s / %s / %s] - %s - successfully sent!", self.kind, self.name, tag, title)
        return True

    def dry_notify(self, title: str, message: str) -> None:
        """Only log the message that would have been sent."""
        logger.info("[%s / %s / dry_notify] - %s", self.kind, self.name, message)