"""Inspection of the container engine configuration."""

from __future__ import annotations

from pathlib import Path

from structlog.stdlib import BoundLogger

from ..constants import ENGINE_CONFIG_DIR, ENGINE_CONFIG_FILE
from ..exceptions import ConfigReadError
from ..models.engine import LoginState

__all__ = ["EngineConfigInspector"]


class EngineConfigInspector:
    """Read-only view of the engine configuration file.

    The file is owned by the container engine. Its format is treated as
    opaque; only its raw bytes are examined.

    Parameters
    ----------
    home
        Home directory holding the engine configuration directory.
    logger
        Logger for messages.
    """

    def __init__(self, home: Path, logger: BoundLogger) -> None:
        self._home = home
        self._logger = logger

    @property
    def config_path(self) -> Path:
        """Path to the engine configuration file."""
        return self._home / ENGINE_CONFIG_DIR / ENGINE_CONFIG_FILE

    def is_logged_in(self, login_server: str) -> LoginState:
        """Guess whether the engine holds a login for a registry.

        This is a heuristic: the registry counts as logged in if its host
        name appears anywhere in the configuration file. It is best-effort
        and never raises. If the file cannot be read, the failure is logged
        and the registry is reported as not logged in.

        Parameters
        ----------
        login_server
            Host name of the registry.

        Returns
        -------
        LoginState
            Configuration path and whether the host was found.
        """
        path = self.config_path
        try:
            data = path.read_bytes()
        except OSError as e:
            error = ConfigReadError(path, f"{type(e).__name__}: {e!s}")
            self._logger.warning(
                "Cannot determine login state",
                config_path=str(path),
                error=error.error,
            )
            return LoginState(config_path=path, logged_in=False, error=error)
        logged_in = login_server.encode() in data
        self._logger.debug(
            "Checked engine configuration",
            config_path=str(path),
            registry=login_server,
            logged_in=logged_in,
        )
        return LoginState(config_path=path, logged_in=logged_in)
