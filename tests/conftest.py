"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from io import StringIO
from pathlib import Path

import pytest
import pytest_asyncio
import structlog
from httpx import AsyncClient
from pydantic import SecretStr

from registrypull.config import Config, CredentialProviderType
from registrypull.constants import ENV_PREFIX, ROOT_LOGGER
from registrypull.factory import Factory
from registrypull.output import OutputChannel

from .support.console import MockConsoleProvider
from .support.constants import TEST_ACCESS_TOKEN
from .support.engine import FakeEngine, write_fake_engine


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for variable in list(os.environ):
        if variable.startswith(ENV_PREFIX):
            monkeypatch.delenv(variable)


@pytest.fixture
def fake_engine(tmp_path: Path) -> FakeEngine:
    return write_fake_engine(tmp_path / "engine")


@pytest.fixture
def config(tmp_path: Path, fake_engine: FakeEngine) -> Config:
    """Construct default configuration for tests."""
    home = tmp_path / "home"
    home.mkdir()
    return Config(
        engine=str(fake_engine.path),
        home=home,
        credential_provider=CredentialProviderType.ACR,
        acr_access_token=SecretStr(TEST_ACCESS_TOKEN),
    )


@pytest.fixture
def output() -> OutputChannel:
    return OutputChannel(stream=StringIO())


@pytest.fixture
def consoles() -> MockConsoleProvider:
    return MockConsoleProvider()


@pytest_asyncio.fixture
async def factory(
    config: Config, output: OutputChannel, consoles: MockConsoleProvider
) -> AsyncIterator[Factory]:
    """Component factory using the mock output and consoles."""
    logger = structlog.get_logger(ROOT_LOGGER)
    async with AsyncClient() as http_client:
        yield Factory(
            config, http_client, logger, output=output, consoles=consoles
        )
