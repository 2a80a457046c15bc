"""User-facing messages raised by a command run.

An editor would show these in a modal box with a single OK button; the
command line prints them to stderr.
"""

from enum import Enum
from typing import Protocol

import click


class MessageLevel(Enum):
    WARNING = "warning"
    ERROR = "error"


class MessageSink(Protocol):
    """Anything that can show a message to the user."""

    def show(self, title: str, message: str, level: MessageLevel) -> None:
        ...


class ClickMessageSink:
    """Prints messages to stderr, coloured by level."""

    COLORS = {MessageLevel.WARNING: "yellow", MessageLevel.ERROR: "red"}

    def show(self, title: str, message: str, level: MessageLevel) -> None:
        click.secho(f"{title}: {message}", fg=self.COLORS[level], err=True)
