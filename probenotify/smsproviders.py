"""HTTP clients for the supported SMS providers."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from probenotify.smsconf import SmsOptions

logger = logging.getLogger(__name__)

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class SmsError(Exception):
    """Raised when an SMS provider rejects a message or cannot be used."""


class SmsProvider:
    """Common behaviour of the SMS providers: hold the options and post a form."""

    def __init__(self, options: SmsOptions) -> None:
        self.options = options

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.options.name!r}, url={self.options.url!r})"

    @property
    def kind(self) -> str:
        return self.options.kind

    @property
    def name(self) -> str:
        return self.options.name

    def notify(self, title: str, text: str) -> None:
        """Send ``text`` as an SMS message."""
        raise NotImplementedError

    def _post(
        self, api: str, form: dict[str, str], auth: Optional[tuple[str, str]] = None
    ) -> None:
        logger.debug("[%s / %s] - API %s - Form %s", self.kind, self.name, api, form)
        response = requests.post(
            api,
            data=form,
            auth=auth,
            headers={"Content-Type": _FORM_CONTENT_TYPE, "Connection": "close"},
            timeout=self.options.timeout or None,
        )
        if response.status_code != 200:
            raise SmsError(
                f"Error response from SMS [{response.status_code}] - [{response.text}]"
            )


class Nexmo(SmsProvider):
    """The Nexmo SMS provider."""

    def notify(self, title: str, text: str) -> None:
        opts = self.options
        form = {
            "From": opts.sender,
            "To": opts.mobile,
            "text": text,
            "api_key": opts.key,
            "api_secret": opts.secret,
        }
        self._post(opts.url, form)


class Twilio(SmsProvider):
    """The Twilio SMS provider."""

    def notify(self, title: str, text: str) -> None:
        opts = self.options
        api = opts.url + opts.key + "/Messages.json"
        form = {"From": opts.sender, "To": opts.mobile, "text": text}
        self._post(api, form, auth=(opts.key, opts.secret))


class Yunpian(SmsProvider):
    """The Yunpian SMS provider."""

    def notify(self, title: str, text: str) -> None:
        opts = self.options
        form = {"apikey": opts.key, "mobile": opts.mobile, "text": opts.sign + text}
        self._post(opts.url, form)