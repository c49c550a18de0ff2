"""Formatted diagnostic output for baredot."""

import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, TextIO

import typer


def supports_color(
    stream: Optional[TextIO] = None, environ: Optional[Mapping[str, str]] = None
) -> bool:
    """Return True when ``stream`` is a terminal and NO_COLOR is unset or empty."""
    if stream is None:
        stream = sys.stderr
    if environ is None:
        environ = os.environ
    isatty = getattr(stream, "isatty", None)
    if isatty is None or not isatty():
        return False
    return not environ.get("NO_COLOR", "")


@dataclass(frozen=True)
class Reporter:
    """
    Writes tagged log lines to stderr.

    The color decision is made once, when the reporter is built, and every
    reconciliation step receives the same instance. ``quiet`` suppresses
    info and warning lines; errors are always written.
    """

    color: bool = False
    quiet: bool = False

    @classmethod
    def from_env(cls, quiet: bool = False) -> "Reporter":
        return cls(color=supports_color(), quiet=quiet)

    def _emit(self, tag: str, fg: str, message: str) -> None:
        if self.color:
            typer.secho(f"[{tag}]", fg=fg, nl=False, err=True, color=True)
            typer.echo(f" {message}", err=True, color=True)
        else:
            typer.echo(f"[{tag}] {message}", err=True, color=False)

    def info(self, *messages: str) -> None:
        if self.quiet:
            return
        for message in messages:
            self._emit("INFO", typer.colors.BLUE, message)

    def warning(self, *messages: str) -> None:
        if self.quiet:
            return
        for message in messages:
            self._emit("WARNING", typer.colors.YELLOW, message)

    def error(self, *messages: str) -> None:
        for message in messages:
            self._emit("ERROR", typer.colors.RED, message)
