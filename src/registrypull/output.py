"""Append-only output sink for login diagnostics."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Protocol, TextIO

import click

__all__ = ["OutputChannel", "OutputSink"]


class OutputSink(Protocol):
    """Interface for the text channel that receives command output."""

    def append(self, text: str) -> None:
        """Append text to the channel."""

    def show(self) -> None:
        """Make the channel visible to the user."""


class OutputChannel:
    """Output sink that collects text and displays it on request.

    Text is kept in memory and, if a file is given, appended to it as well.
    Nothing is shown to the user until `show` is called, at which point all
    text not yet shown is written to the stream.

    Parameters
    ----------
    path
        File to which all output is also appended, if any.
    stream
        Stream to display output on. Defaults to standard error.
    """

    def __init__(
        self, path: Path | None = None, stream: TextIO | None = None
    ) -> None:
        self._path = path
        self._stream = stream
        self._chunks: list[str] = []
        self._shown = 0
        self.visible = False

    @property
    def text(self) -> str:
        """All text appended so far."""
        return "".join(self._chunks)

    def append(self, text: str) -> None:
        if not text:
            return
        self._chunks.append(text)
        if self._path:
            with self._path.open("a") as f:
                f.write(text)
        if self.visible:
            self.show()

    def show(self) -> None:
        self.visible = True
        pending = "".join(self._chunks[self._shown :])
        self._shown = len(self._chunks)
        if pending:
            stream = self._stream or sys.stderr
            click.echo(pending, file=stream, nl=False)
