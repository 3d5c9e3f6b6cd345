"""GitHub Actions workflow commands and a logging handler built on them."""

from __future__ import annotations

import logging
import sys
from typing import TextIO


def escape_data(value: str) -> str:
    """Escape a command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(command: str, message: str, properties: dict[str, str] | None = None) -> str:
    """Return one ``::command key=value::message`` line."""
    rendered = ""
    if properties:
        rendered = " " + ",".join(
            f"{key}={escape_property(value)}" for key, value in sorted(properties.items())
        )
    return f"::{command}{rendered}::{escape_data(message)}"


class WorkflowCommands:
    """Writes workflow commands to the runner's stdout."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def echo(self, line: str) -> None:
        """Write a plain output line."""
        stream = self._stream or sys.stdout
        stream.write(line + "\n")
        stream.flush()

    def issue(self, command: str, message: str, properties: dict[str, str] | None = None) -> None:
        """Write a single workflow command."""
        self.echo(format_command(command, message, properties))

    def notice(self, message: str, title: str | None = None) -> None:
        """Emit a non-blocking notice annotation."""
        self.issue("notice", message, {"title": title} if title else None)

    def error(self, message: str) -> None:
        """Emit an error annotation (used to report the run's failure reason)."""
        self.issue("error", message)


_LEVEL_COMMANDS = (
    (logging.ERROR, "error"),
    (logging.WARNING, "warning"),
    (logging.INFO, None),
    (logging.DEBUG, "debug"),
)


class WorkflowCommandHandler(logging.Handler):
    """Maps log records onto ::debug::, ::warning:: and ::error:: commands."""

    def __init__(self, commands: WorkflowCommands | None = None) -> None:
        super().__init__()
        self._commands = commands or WorkflowCommands()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            command = _command_for(record.levelno)
            if command is None:
                self._commands.echo(message)
            else:
                self._commands.issue(command, message)
        except Exception:
            self.handleError(record)


def _command_for(levelno: int) -> str | None:
    for threshold, command in _LEVEL_COMMANDS:
        if levelno >= threshold:
            return command
    return "debug"
