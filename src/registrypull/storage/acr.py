"""Client for the registry token exchange."""

from __future__ import annotations

from httpx import AsyncClient, HTTPError
from pydantic import SecretStr
from structlog.stdlib import BoundLogger

from ..constants import ACR_EXCHANGE_PATH, ACR_NULL_USERNAME
from ..exceptions import AuthResolutionError
from ..models.credentials import Credentials, TokenExchangeReply
from ..models.selection import RegistrySelection

__all__ = ["ACRCredentialProvider"]


class ACRCredentialProvider:
    """Exchange an identity access token for registry credentials.

    The registry accepts an access token from the cloud identity service and
    returns a refresh token, which the container engine can then use as a
    password with a fixed null username. This works for any authenticated
    user and does not depend on any other locally installed tool.

    Parameters
    ----------
    access_token
        Access token from the identity service.
    tenant
        Identity tenant, if the registry needs one.
    http_client
        Shared HTTP client.
    logger
        Logger for messages.
    """

    def __init__(
        self,
        *,
        access_token: SecretStr | None,
        tenant: str | None,
        http_client: AsyncClient,
        logger: BoundLogger,
    ) -> None:
        self._access_token = access_token
        self._tenant = tenant
        self._client = http_client
        self._logger = logger

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
            Null username and the refresh token as password.

        Raises
        ------
        AuthResolutionError
            Raised if no access token is configured, the exchange failed or
            was rejected, or the reply could not be parsed.
        """
        if not self._access_token:
            msg = "No identity access token configured for token exchange"
            raise AuthResolutionError(msg)
        # We're assuming HTTPS, since the engine will refuse to talk to the
        # registry without it anyway.
        url = f"https://{registry.login_server}{ACR_EXCHANGE_PATH}"
        data = {
            "grant_type": "access_token",
            "service": registry.login_server,
            "access_token": self._access_token.get_secret_value(),
        }
        if self._tenant:
            data["tenant"] = self._tenant
        try:
            r = await self._client.post(url, data=data)
        except HTTPError as e:
            raise AuthResolutionError.from_exception(e) from e
        if r.status_code in (401, 403):
            msg = f"Access token rejected by {registry.login_server}"
            self._logger.warning(msg, status=r.status_code)
            raise AuthResolutionError(
                msg, method="POST", url=url, status=r.status_code
            )
        try:
            r.raise_for_status()
            reply = TokenExchangeReply.model_validate(r.json())
        except HTTPError as e:
            raise AuthResolutionError.from_exception(e) from e
        except ValueError as e:
            raise AuthResolutionError.from_parse_error(e) from e
        self._logger.debug(
            "Exchanged access token for refresh token",
            registry=registry.login_server,
        )
        return Credentials(
            username=ACR_NULL_USERNAME, password=reply.refresh_token
        )
