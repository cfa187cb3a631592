"""Turn a registry selection into credentials."""

from __future__ import annotations

from structlog.stdlib import BoundLogger

from ..exceptions import AuthResolutionError
from ..models.credentials import Credentials
from ..models.selection import RegistrySelection
from ..storage.credentials import CredentialProvider

__all__ = ["CredentialResolver"]


class CredentialResolver:
    """Obtain fresh credentials for a registry from a provider.

    Parameters
    ----------
    provider
        Source of registry credentials.
    logger
        Logger for messages.
    """

    def __init__(
        self, provider: CredentialProvider, logger: BoundLogger
    ) -> None:
        self._provider = provider
        self._logger = logger

    async def resolve(self, registry: RegistrySelection) -> Credentials:
        """Get credentials for a registry.

        Parameters
        ----------
        registry
            Registry to authenticate to.

        Returns
        -------
        Credentials
            Username and password. The password is guaranteed to be
            non-empty and free of line breaks, since it will be streamed to
            the standard input of the login command.

        Raises
        ------
        AuthResolutionError
            Raised if the provider failed, with the provider error chained,
            or if it returned an unusable password.
        """
        try:
            credentials = await self._provider.get_login_credentials(registry)
        except AuthResolutionError:
            raise
        except Exception as e:
            msg = f"Cannot get credentials for {registry.identifier}: {e!s}"
            raise AuthResolutionError(msg) from e
        if not credentials.password:
            msg = f"Empty password returned for {registry.identifier}"
            raise AuthResolutionError(msg)
        if "\n" in credentials.password or "\r" in credentials.password:
            msg = f"Password for {registry.identifier} contains a line break"
            raise AuthResolutionError(msg)
        self._logger.debug(
            "Resolved registry credentials",
            registry=registry.login_server,
            username=credentials.username,
        )
        return credentials
