"""Sources of registry credentials."""

from __future__ import annotations

from typing import Protocol

from pydantic import SecretStr
from structlog.stdlib import BoundLogger

from ..exceptions import AuthResolutionError
from ..models.credentials import Credentials
from ..models.selection import RegistrySelection

__all__ = ["CredentialProvider", "StaticCredentialProvider"]


class CredentialProvider(Protocol):
    """Interface for anything that can issue registry credentials."""

    async def get_login_credentials(
        self, registry: RegistrySelection
    ) -> Credentials:
        """Get credentials for a registry.

        Parameters
        ----------
        registry
            Registry to authenticate to.

        Returns
        -------
        Credentials
            Username and password for the registry.
        """


class StaticCredentialProvider:
    """Return fixed credentials from the configuration.

    Parameters
    ----------
    username
        Configured username, if any.
    password
        Configured password, if any.
    logger
        Logger for messages.
    """

    def __init__(
        self,
        username: str | None,
        password: SecretStr | None,
        logger: BoundLogger,
    ) -> None:
        self._username = username
        self._password = password
        self._logger = logger

    async def get_login_credentials(
        self, registry: RegistrySelection
    ) -> Credentials:
        """Get the configured credentials.

        Raises
        ------
        AuthResolutionError
            Raised if no username or password is configured.
        """
        if not self._username or not self._password:
            msg = f"No static credentials configured for {registry.identifier}"
            raise AuthResolutionError(msg)
        self._logger.debug(
            "Using static credentials",
            registry=registry.login_server,
            username=self._username,
        )
        return Credentials(
            username=self._username,
            password=self._password.get_secret_value(),
        )
