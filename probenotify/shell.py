"""Notification that runs a command with the message passed in its environment."""

from __future__ import annotations

import json
import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass, field

from probenotify.base import DefaultNotify, Format, NotifySettings

logger = logging.getLogger(__name__)

CSV_VARIABLE = "EASEPROBE_CSV"


def _parse_env_map(msg: str) -> dict[str, str]:
    data = json.loads(msg)
    if not isinstance(data, dict) or not all(
        isinstance(value, str) for value in data.values()
    ):
        raise ValueError("shell message must be a JSON object of string values")
    return data


@dataclass
class ShellNotify(DefaultNotify):
    """Notifier running a command, with the message as environment variables."""

    cmd: str = ""
    args: list[str] = field(default_factory=list)
    env: list[str] = field(default_factory=list)
    clean_env: bool = False

    def config(self, settings: NotifySettings) -> None:
        """Configure the shell notification."""
        self.kind = "shell"
        self.format = Format.SHELL
        self.send_func = self.run_shell
        super().config(settings)

    def _environment(self, env_map: dict[str, str]) -> dict[str, str]:
        if self.clean_env:
            logger.info("[%s / %s] clean the environment variables", self.kind, self.name)
            environment: dict[str, str] = {}
        else:
            environment = dict(os.environ)
        environment.update(env_map)
        for entry in self.env:
            key, _, value = entry.partition("=")
            environment[key] = value
        return environment

    def run_shell(self, title: str, msg: str) -> str:
        """Run the command and return its combined output.

        ``msg`` is a JSON object whose entries become environment variables; its
        CSV entry is written to the command's standard input. Raises ValueError on
        a malformed message, OSError if the command cannot be started,
        CalledProcessError on a non-zero exit and TimeoutExpired on timeout.
        """
        env_map = _parse_env_map(msg)
        executable = shutil.which(self.cmd) or self.cmd
        result = subprocess.run(
            [executable, *self.args],
            input=env_map.get(CSV_VARIABLE, ""),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=self._environment(env_map),
            timeout=self.timeout or None,
            encoding="utf-8",
            errors="replace",
            check=True,
        )
        logger.debug(
            "[%s / %s] - %s", self.kind, self.name, shlex.join([self.cmd, *self.args])
        )
        logger.debug("input: \n%s", msg)
        logger.debug("output:\n%s", result.stdout)
        return result.stdout