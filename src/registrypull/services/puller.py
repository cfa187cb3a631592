"""Pull images selected by the user."""

from __future__ import annotations

from structlog.stdlib import BoundLogger

from ..models.selection import (
    ImageRequest,
    RegistrySelection,
    Selection,
)
from .orchestrator import PullOrchestrator
from .resolver import CredentialResolver

__all__ = ["RegistryPuller"]


class RegistryPuller:
    """Resolve credentials for a selection and run the authenticated pull.

    Parameters
    ----------
    resolver
        Source of fresh registry credentials.
    orchestrator
        Performs the login and submits the pull.
    logger
        Logger for messages.
    """

    def __init__(
        self,
        resolver: CredentialResolver,
        orchestrator: PullOrchestrator,
        logger: BoundLogger,
    ) -> None:
        self._resolver = resolver
        self._orchestrator = orchestrator
        self._logger = logger

    async def pull(self, selection: Selection) -> ImageRequest:
        """Pull what the user selected.

        Parameters
        ----------
        selection
            Registry, repository, and image or all tags to pull.

        Returns
        -------
        ImageRequest
            The request that was submitted.

        Raises
        ------
        AuthResolutionError
            Raised if credentials could not be obtained.
        LoginError
            Raised if the engine login failed.
        ValueError
            Raised if the selection names neither a tag nor all tags.
        """
        request = ImageRequest.from_target(selection.to_target())
        registry = selection.registry
        self._logger.info(
            "Pulling from registry",
            registry=registry.login_server,
            request=str(request),
        )
        credentials = await self._resolver.resolve(registry)
        await self._orchestrator.pull(
            registry.login_server,
            request,
            credentials.username,
            credentials.password,
        )
        return request

    async def pull_repository(
        self, registry: RegistrySelection, repository: str
    ) -> ImageRequest:
        """Pull all tags of a repository."""
        return await self.pull(Selection.for_repository(registry, repository))

    async def pull_image(
        self, registry: RegistrySelection, repository: str, tag: str
    ) -> ImageRequest:
        """Pull a single image of a repository."""
        selection = Selection.for_image(registry, repository, tag)
        return await self.pull(selection)
