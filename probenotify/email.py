"""E-mail notification over SMTP with implicit TLS."""

from __future__ import annotations

import logging
import re
import smtplib
from dataclasses import dataclass

from probenotify.base import DefaultNotify, Format, NotifySettings

logger = logging.getLogger(__name__)

_ADDRESS_SEPARATORS = re.compile(r"[;,]")


def _split_host_port(address: str) -> tuple[str, str]:
    """Split ``host:port`` (or ``[v6]:port``); raise ValueError if there is no port."""
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"address {address}: missing ']' in address")
        host, rest = address[1:end], address[end + 1 :]
        if not rest.startswith(":"):
            raise ValueError(f"address {address}: missing port in address")
        return host, rest[1:]
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"address {address}: missing port in address")
    if ":" in host:
        raise ValueError(f"address {address}: too many colons in address")
    return host, port


@dataclass
class EmailNotify(DefaultNotify):
    """Notifier sending HTML e-mail through an SMTP server."""

    server: str = ""
    user: str = ""
    password: str = ""
    to: str = ""
    sender: str = ""

    def config(self, settings: NotifySettings) -> None:
        """Configure the e-mail notification."""
        self.kind = "email"
        self.format = Format.HTML
        self.send_func = self.send_mail
        super().config(settings)
        logger.debug("Notification [%s] - [%s] configuration: %r", self.kind, self.name, self)

    def _recipients(self) -> list[str]:
        return [addr for addr in _ADDRESS_SEPARATORS.split(self.to) if addr]

    def _compose(self, subject: str, message: str) -> bytes:
        headers = {
            "From": self.sender or f"Notification<{self.user}>",
            "To": self.to,
            "Subject": subject,
            "Content-Type": "text/html; charset=UTF-8",
        }
        head = "".join(f"{key}: {value}\r\n" for key, value in headers.items())
        return (head + "\r\n" + message).encode("utf-8")

    def send_mail(self, subject: str, message: str) -> None:
        """Send ``message`` with ``subject``; raise ValueError or an SMTP error on failure."""
        host, port_text = _split_host_port(self.server)
        try:
            port = int(port_text)
        except ValueError:
            raise ValueError(f"address {self.server}: invalid port {port_text!r}") from None

        body = self._compose(subject, message)
        client = smtplib.SMTP_SSL(host, port, timeout=self.timeout or None)
        try:
            client.ehlo_or_helo_if_needed()
            if client.has_extn("auth"):
                try:
                    client.login(self.user, self.password)
                except smtplib.SMTPException as err:
                    logger.error("%s", err)
                    raise

            code, reply = client.mail(self.user)
            if code != 250:
                raise smtplib.SMTPSenderRefused(code, reply, self.user)

            for addr in self._recipients():
                code, reply = client.rcpt(addr)
                if code not in (250, 251):
                    raise smtplib.SMTPRecipientsRefused({addr: (code, reply)})

            client.data(body)
            client.quit()
        finally:
            client.close()