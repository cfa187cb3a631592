"""Console surfaces that run pull commands."""

from __future__ import annotations

import asyncio
import shlex
from typing import Protocol

from structlog.stdlib import BoundLogger

__all__ = [
    "Console",
    "ConsoleProvider",
    "ProcessConsole",
    "ProcessConsoleProvider",
]


class Console(Protocol):
    """Interface for an interactive console."""

    def show(self) -> None:
        """Make the console visible."""

    def send_text(self, text: str) -> None:
        """Submit a command line for execution without waiting for it."""


class ConsoleProvider(Protocol):
    """Interface for something that opens consoles."""

    def create_console(self, name: str) -> Console:
        """Open a console with the given name, or reuse an existing one."""


class ProcessConsole:
    """Console that runs each command as a child process.

    The child shares the terminal of this process, so its progress output
    is visible to the user. Commands run one after another in the order
    submitted.

    Parameters
    ----------
    name
        Name of the console.
    logger
        Logger for messages.
    """

    def __init__(self, name: str, logger: BoundLogger) -> None:
        self.name = name
        self._logger = logger.bind(console=name)
        self._tasks: set[asyncio.Task[int]] = set()
        self._lock = asyncio.Lock()
        self.returncodes: list[int] = []

    def show(self) -> None:
        self._logger.debug("Console shown")

    def send_text(self, text: str) -> None:
        self._logger.info("Running command", command=text)
        task = asyncio.create_task(self._run(text))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait(self) -> list[int]:
        """Wait for all submitted commands to finish.

        Returns
        -------
        list of int
            Exit status of every command run by this console so far.
        """
        while self._tasks:
            await asyncio.gather(*self._tasks)
        return list(self.returncodes)

    async def _run(self, text: str) -> int:
        async with self._lock:
            args = shlex.split(text)
            proc = await asyncio.create_subprocess_exec(*args)
            returncode = await proc.wait()
        self.returncodes.append(returncode)
        if returncode != 0:
            self._logger.warning(
                "Command failed", command=text, returncode=returncode
            )
        return returncode


class ProcessConsoleProvider:
    """Open process consoles, reusing one console per name.

    Parameters
    ----------
    logger
        Logger for messages.
    """

    def __init__(self, logger: BoundLogger) -> None:
        self._logger = logger
        self._consoles: dict[str, ProcessConsole] = {}

    def create_console(self, name: str) -> ProcessConsole:
        if name not in self._consoles:
            self._consoles[name] = ProcessConsole(name, self._logger)
        return self._consoles[name]

    async def wait(self) -> None:
        """Wait for the commands of every console to finish."""
        for console in self._consoles.values():
            await console.wait()
