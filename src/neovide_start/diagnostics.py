"""Diagnostic output on the standard error stream.

Messages are printed in red when stderr is a terminal and ``NO_COLOR`` is
not set (any value, even empty, disables color).
"""
from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from typing import TextIO

import typer

NO_COLOR_ENV_VAR = "NO_COLOR"


def should_color(stream: TextIO, environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    if NO_COLOR_ENV_VAR in env:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class ErrorStream:
    """Writes one diagnostic line per call to stderr.

    Args:
        stream: Target stream (defaults to ``sys.stderr`` at write time).
        environ: Environment used for the ``NO_COLOR`` check.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._stream = stream
        self._environ = environ

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    @property
    def use_color(self) -> bool:
        return should_color(self.stream, self._environ)

    def report(self, message: str) -> None:
        color = self.use_color
        text = typer.style(message, fg="red") if color else message
        typer.echo(text, file=self.stream, color=color)
