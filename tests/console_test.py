"""Tests for process consoles."""

from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from registrypull.console import ProcessConsoleProvider

from .support.engine import write_fake_engine


@pytest.mark.asyncio
async def test_run(tmp_path: Path) -> None:
    engine = write_fake_engine(tmp_path / "engine")
    provider = ProcessConsoleProvider(structlog.get_logger(__name__))
    console = provider.create_console("docker pull")
    assert provider.create_console("docker pull") is console

    console.show()
    console.send_text(f"{engine.path} pull contoso.azurecr.io/webapp -a")
    console.send_text(f"{engine.path} pull contoso.azurecr.io/webapp:v2")
    assert await console.wait() == [0, 0]
    assert engine.pulls == [
        "pull contoso.azurecr.io/webapp -a",
        "pull contoso.azurecr.io/webapp:v2",
    ]
    assert not engine.logged_in


@pytest.mark.asyncio
async def test_failed_command(tmp_path: Path) -> None:
    engine = write_fake_engine(tmp_path / "engine", pull_exit=1)
    provider = ProcessConsoleProvider(structlog.get_logger(__name__))
    console = provider.create_console("docker pull")
    console.send_text(f"{engine.path} pull contoso.azurecr.io/missing:v9")
    await provider.wait()
    assert console.returncodes == [1]
