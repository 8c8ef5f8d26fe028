"""Notification that writes messages to a log file or to syslog."""

from __future__ import annotations

import logging
import logging.handlers
import os
import re
import socket
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Optional

from probenotify.base import DefaultNotify, Format, NotifySettings

logger = logging.getLogger(__name__)

TCP = "tcp"
UDP = "udp"

SYSLOG_IDENTIFIER = "syslog"
DEFAULT_APP_NAME = "probenotify"

_LOCAL_SYSLOG_SOCKETS = ("/dev/log", "/var/run/syslog", "/var/run/log")
_PORT_PATTERN = re.compile(r"[+-]?\d+")


class LogType(IntEnum):
    """Where the log notification writes to."""

    FILE_LOG = 0
    SYS_LOG = 1


class SysLogFormatter(logging.Formatter):
    """Formats records as bare messages for syslog, or with a prefix for log files."""

    def __init__(
        self,
        log_type: LogType = LogType.FILE_LOG,
        host: Optional[str] = None,
        app: str = DEFAULT_APP_NAME,
    ) -> None:
        super().__init__()
        self.log_type = log_type
        self.host = host if host is not None else socket.gethostname()
        self.app = app

    def format(self, record: logging.LogRecord) -> str:
        """Return the message, prefixed with time, host, app and level for files."""
        message = record.getMessage()
        if self.log_type == LogType.SYS_LOG:
            return message
        timestamp = datetime.now().astimezone().isoformat(timespec="seconds")
        level = record.levelname.lower()
        return f"{timestamp} {self.host} {self.app} {level} {message}"


def _split_host_port(address: str) -> tuple[str, str]:
    """Split ``host:port`` (or ``[v6]:port``); raise ValueError if that is not possible."""
    if address.startswith("["):
        end = address.find("]")
        if end < 0 or not address[end + 1 :].startswith(":"):
            raise ValueError(f"address {address}: missing port in address")
        return address[1:end], address[end + 2 :]
    host, sep, port = address.rpartition(":")
    if not sep or ":" in host:
        raise ValueError(f"address {address}: missing port in address")
    return host, port


def _notice_priority(level_name: str) -> str:
    return "notice"


@dataclass
class LogNotify(DefaultNotify):
    """Notifier writing every line of a message to a log file, local or remote syslog."""

    file: str = ""
    host: str = ""
    network: str = ""
    app_name: str = DEFAULT_APP_NAME
    log_type: LogType = LogType.FILE_LOG
    _logger: Optional[logging.Logger] = field(
        default=None, init=False, repr=False, compare=False
    )

    def config(self, settings: NotifySettings) -> None:
        """Open the log destination, then apply the common settings."""
        self.config_log()
        super().config(settings)

    def is_syslog(self) -> bool:
        """Return whether the destination is syslog rather than a file."""
        return self.file.strip() == SYSLOG_IDENTIFIER

    def has_network(self) -> bool:
        """Return whether the destination is a remote syslog server."""
        if not self.is_syslog():
            return False
        return bool(self.network.strip()) and bool(self.host.strip())

    def check_network_protocol(self) -> None:
        """Validate the remote syslog network and address; raise ValueError if wrong."""
        title = f"[{self.kind} / {self.name}]"
        if not self.network.strip():
            raise ValueError(f"{title} protocol is required")
        if not self.host.strip():
            raise ValueError(f"{title} host is required")
        if self.network not in (TCP, UDP):
            raise ValueError(f"{title} invalid protocol: {self.network}")
        try:
            _, port = _split_host_port(self.host)
        except ValueError:
            raise ValueError(f"{title} invalid host: {self.host}") from None
        if not _PORT_PATTERN.fullmatch(port):
            raise ValueError(f"{title} invalid port: {port}")

    def config_log(self) -> None:
        """Set up the logger for a file, local syslog or remote syslog."""
        self.kind = "log"
        self.format = Format.LOG
        self.send_func = self.log
        self._reset_logger()

        if sys.platform == "win32":
            handler = self._file_handler()
        elif self.is_syslog() and self.has_network():
            handler = self._remote_syslog_handler()
        elif self.is_syslog():
            handler = self._local_syslog_handler()
        else:
            handler = self._file_handler()

        handler.setFormatter(SysLogFormatter(self.log_type, app=self.app_name))
        assert self._logger is not None
        self._logger.addHandler(handler)

    def log(self, title: str, msg: str) -> None:
        """Write each line of ``msg`` as its own log entry."""
        if self._logger is None:
            raise RuntimeError(f"[{self.kind} / {self.name}] log is not configured")
        lines = msg.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        for line in lines:
            if line.endswith("\r"):
                line = line[:-1]
            logger.debug("[%s] %s", self.kind, line)
            self._logger.info(line)

    def _reset_logger(self) -> None:
        if self._logger is not None:
            for handler in list(self._logger.handlers):
                self._logger.removeHandler(handler)
                handler.close()
        new_logger = logging.Logger(f"{__name__}.{self.name or id(self)}")
        new_logger.setLevel(logging.INFO)
        new_logger.propagate = False
        self._logger = new_logger

    def _file_handler(self) -> logging.Handler:
        self.kind = "log"
        self.log_type = LogType.FILE_LOG
        try:
            handler = logging.FileHandler(self.file, mode="a", encoding="utf-8")
        except OSError as err:
            logger.error("[%s / %s] cannot open file: %s", self.kind, self.name, err)
            raise
        logger.info("[%s / %s] - local log file(%s) configured", self.kind, self.name, self.file)
        return handler

    def _prepare_syslog(self, handler: logging.Handler) -> logging.Handler:
        handler.ident = f"{self.app_name}: "
        handler.mapPriority = _notice_priority
        return handler

    def _remote_syslog_handler(self) -> logging.Handler:
        self.kind = SYSLOG_IDENTIFIER
        self.log_type = LogType.SYS_LOG
        self.check_network_protocol()
        host, port = _split_host_port(self.host)
        socktype = socket.SOCK_STREAM if self.network == TCP else socket.SOCK_DGRAM
        try:
            handler = logging.handlers.SysLogHandler(
                address=(host, int(port)),
                facility=logging.handlers.SysLogHandler.LOG_USER,
                socktype=socktype,
            )
        except OSError as err:
            logger.error("[%s / %s] cannot dial syslog network: %s", self.kind, self.name, err)
            raise
        logger.info(
            "[%s / %s] - remote syslog (%s:%s) configured",
            self.kind,
            self.name,
            self.network,
            self.host,
        )
        return self._prepare_syslog(handler)

    def _local_syslog_handler(self) -> logging.Handler:
        self.kind = SYSLOG_IDENTIFIER
        self.log_type = LogType.SYS_LOG
        address = next(
            (path for path in _LOCAL_SYSLOG_SOCKETS if os.path.exists(path)),
            _LOCAL_SYSLOG_SOCKETS[0],
        )
        try:
            handler = logging.handlers.SysLogHandler(
                address=address, facility=logging.handlers.SysLogHandler.LOG_USER
            )
        except OSError as err:
            logger.error("[%s / %s] cannot open syslog: %s", self.kind, self.name, err)
            raise
        logger.info("[%s / %s] - local syslog configured!", self.kind, self.name)
        return self._prepare_syslog(handler)