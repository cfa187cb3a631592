"""Models for what the user selected to pull."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

from ..constants import PULL_ALL_FLAG

__all__ = [
    "ImageRequest",
    "ImageTagTarget",
    "PullTarget",
    "RegistrySelection",
    "RepositoryTarget",
    "Selection",
]


@dataclass(frozen=True, slots=True)
class RegistrySelection:
    """A chosen remote registry."""

    login_server: str
    """Host name of the registry endpoint."""

    identifier: str
    """Opaque identifier passed to the credential provider."""

    @classmethod
    def from_login_server(
        cls, login_server: str, identifier: str | None = None
    ) -> Self:
        """Create a selection, using the host as identifier by default."""
        return cls(
            login_server=login_server, identifier=identifier or login_server
        )


@dataclass(frozen=True, slots=True)
class RepositoryTarget:
    """Pull every tag in a repository."""

    repository: str


@dataclass(frozen=True, slots=True)
class ImageTagTarget:
    """Pull a single image.

    The label is used verbatim as the image request.
    """

    repository: str
    label: str


type PullTarget = RepositoryTarget | ImageTagTarget


@dataclass(frozen=True, slots=True)
class Selection:
    """Registry, repository, and image chosen by the user."""

    registry: RegistrySelection
    """Registry to pull from."""

    repository_name: str
    """Repository holding the image or images."""

    tag: str | None = None
    """Image tag label, if a single image was chosen."""

    pull_all: bool = False
    """Whether to pull all tags in the repository."""

    @classmethod
    def for_repository(
        cls, registry: RegistrySelection, repository: str
    ) -> Self:
        """Select every tag of a repository."""
        return cls(
            registry=registry, repository_name=repository, pull_all=True
        )

    @classmethod
    def for_image(
        cls, registry: RegistrySelection, repository: str, tag: str
    ) -> Self:
        """Select one image of a repository.

        The tag label is qualified with the repository name, which is the
        form needed when the image was picked from within a repository.
        """
        return cls(
            registry=registry,
            repository_name=repository,
            tag=f"{repository}:{tag}",
        )

    def to_target(self) -> PullTarget:
        """Resolve the selection into what should be pulled.

        Raises
        ------
        ValueError
            Raised if neither a tag nor pulling all tags was selected.
        """
        if self.pull_all:
            return RepositoryTarget(repository=self.repository_name)
        if not self.tag:
            msg = f"No tag selected in repository {self.repository_name}"
            raise ValueError(msg)
        return ImageTagTarget(repository=self.repository_name, label=self.tag)


@dataclass(frozen=True, slots=True)
class ImageRequest:
    """What to pull, in the form consumed by the pull command."""

    repository_name: str
    tag: str | None = None
    pull_all: bool = False

    @classmethod
    def from_target(cls, target: PullTarget) -> Self:
        """Convert either kind of pull target into a request."""
        match target:
            case RepositoryTarget(repository=repository):
                return cls(repository_name=repository, pull_all=True)
            case ImageTagTarget(repository=repository, label=label):
                return cls(repository_name=repository, tag=label)

    def __str__(self) -> str:
        if self.pull_all:
            return f"{self.repository_name} {PULL_ALL_FLAG}"
        return self.tag or self.repository_name
