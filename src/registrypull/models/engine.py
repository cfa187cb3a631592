"""Models for the container engine state."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..exceptions import ConfigReadError

__all__ = ["LoginState"]


@dataclass(frozen=True, slots=True)
class LoginState:
    """Result of probing the engine configuration for a registry."""

    config_path: Path
    """Path to the engine configuration file."""

    logged_in: bool
    """Whether the registry host appears in the configuration."""

    error: ConfigReadError | None = None
    """Why the configuration could not be read, if it could not."""

    @property
    def known(self) -> bool:
        """Whether the login state could be determined at all."""
        return self.error is None
