"""Component factory for registry-pull."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager
from typing import Self

import structlog
from httpx import AsyncClient
from structlog.stdlib import BoundLogger

from .config import Config, CredentialProviderType
from .console import ConsoleProvider, ProcessConsoleProvider
from .constants import ROOT_LOGGER
from .output import OutputChannel, OutputSink
from .services.orchestrator import PullOrchestrator
from .services.puller import RegistryPuller
from .services.resolver import CredentialResolver
from .storage.acr import ACRCredentialProvider
from .storage.credentials import CredentialProvider, StaticCredentialProvider
from .storage.engine import EngineConfigInspector

__all__ = ["Factory"]


class Factory:
    """Build the components needed for a pull.

    The output sink and console provider are shared by everything the
    factory creates. They may be passed in to replace the defaults.

    Parameters
    ----------
    config
        Application configuration.
    http_client
        Shared HTTP client.
    logger
        Logger for messages.
    output
        Output sink for login output.
    consoles
        Provider of consoles for pull commands.
    """

    @classmethod
    @asynccontextmanager
    async def standalone(cls, config: Config) -> AsyncIterator[Self]:
        """Async context manager for registry-pull components.

        Intended for the command-line interface and for tests.

        Parameters
        ----------
        config
            Application configuration.

        Yields
        ------
        Factory
            Newly-created factory. Must be used as a context manager.
        """
        logger = structlog.get_logger(ROOT_LOGGER)
        http_client = AsyncClient()
        factory = cls(config, http_client, logger)
        async with aclosing(factory):
            yield factory

    def __init__(
        self,
        config: Config,
        http_client: AsyncClient,
        logger: BoundLogger,
        *,
        output: OutputSink | None = None,
        consoles: ConsoleProvider | None = None,
    ) -> None:
        self._config = config
        self._http_client = http_client
        self._logger = logger
        if output is None:
            output = OutputChannel(config.output_file)
        if consoles is None:
            consoles = ProcessConsoleProvider(logger)
        self.output = output
        self.consoles = consoles

    async def aclose(self) -> None:
        """Shut down the factory.

        After this method is called, the factory object is no longer valid and
        must not be used.
        """
        await self._http_client.aclose()

    def create_credential_provider(self) -> CredentialProvider:
        """Create the configured source of registry credentials.

        Returns
        -------
        CredentialProvider
            Newly-created credential provider.
        """
        match self._config.credential_provider:
            case CredentialProviderType.ACR:
                return ACRCredentialProvider(
                    access_token=self._config.acr_access_token,
                    tenant=self._config.acr_tenant,
                    http_client=self._http_client,
                    logger=self._logger,
                )
            case CredentialProviderType.STATIC:
                return StaticCredentialProvider(
                    self._config.registry_username,
                    self._config.registry_password,
                    self._logger,
                )

    def create_credential_resolver(self) -> CredentialResolver:
        return CredentialResolver(
            self.create_credential_provider(), self._logger
        )

    def create_engine_inspector(self) -> EngineConfigInspector:
        return EngineConfigInspector(self._config.home_path, self._logger)

    def create_orchestrator(self) -> PullOrchestrator:
        """Create the login and pull orchestrator.

        Returns
        -------
        PullOrchestrator
            Newly-created orchestrator.
        """
        return PullOrchestrator(
            engine=self._config.engine,
            output=self.output,
            consoles=self.consoles,
            inspector=self.create_engine_inspector(),
            console_name=self._config.console_name,
            logger=self._logger,
        )

    def create_puller(self) -> RegistryPuller:
        """Create the service that pulls user selections.

        Returns
        -------
        RegistryPuller
            Newly-created puller.
        """
        return RegistryPuller(
            resolver=self.create_credential_resolver(),
            orchestrator=self.create_orchestrator(),
            logger=self._logger,
        )
