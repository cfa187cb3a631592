"""Log in to the container engine and submit a pull."""

from __future__ import annotations

import asyncio
import shlex
from asyncio.subprocess import PIPE

from structlog.stdlib import BoundLogger

from ..console import ConsoleProvider
from ..constants import CREDENTIAL_STORE_DEFECT, MASKED_PASSWORD
from ..exceptions import CredentialStoreDefectError, LoginError
from ..models.selection import ImageRequest
from ..output import OutputSink
from ..storage.engine import EngineConfigInspector

__all__ = ["PullOrchestrator"]


class PullOrchestrator:
    """Perform a non-interactive login, then hand the pull to a console.

    Parameters
    ----------
    engine
        Container engine executable.
    output
        Sink for the output of the login command.
    consoles
        Provider of the console that runs the pull command.
    inspector
        View of the engine configuration, used for remediation messages.
    console_name
        Name of the console that receives pull commands.
    logger
        Logger for messages.
    """

    def __init__(
        self,
        *,
        engine: str,
        output: OutputSink,
        consoles: ConsoleProvider,
        inspector: EngineConfigInspector,
        console_name: str,
        logger: BoundLogger,
    ) -> None:
        self._engine = engine
        self._output = output
        self._consoles = consoles
        self._inspector = inspector
        self._console_name = console_name
        self._logger = logger

    async def pull(
        self,
        login_server: str,
        image_request: ImageRequest | str,
        username: str,
        password: str,
    ) -> None:
        """Log in to a registry and submit a pull of the requested image.

        Once the login process has been started it is always allowed to run
        to completion. The pull itself is only submitted to the console; its
        outcome is not observed.

        Parameters
        ----------
        login_server
            Host name of the registry.
        image_request
            Image or repository to pull.
        username
            Registry username.
        password
            Registry password. It is only ever written to the standard input
            of the login process.

        Raises
        ------
        CredentialStoreDefectError
            Raised if the engine credential helper rejected the credentials.
        LoginError
            Raised if the login failed for any other reason or printed
            diagnostics.
        """
        logger = self._logger.bind(registry=login_server, username=username)
        await self._login(login_server, username, password, logger)

        # The console splits the command line again, so the engine path has
        # to survive shell quoting.
        engine = shlex.quote(self._engine)
        command = f"{engine} pull {login_server}/{image_request}"
        console = self._consoles.create_console(self._console_name)
        console.show()
        console.send_text(command)
        logger.info("Submitted pull", command=command)

    async def _login(
        self,
        login_server: str,
        username: str,
        password: str,
        logger: BoundLogger,
    ) -> None:
        # Only used for the remediation message; not read here.
        config_path = self._inspector.config_path

        args = [
            self._engine,
            "login",
            login_server,
            "--username",
            username,
            "--password-stdin",
        ]
        echo = f"{shlex.join(args)} {MASKED_PASSWORD}"
        logger.debug("Logging in to registry")

        try:
            proc = await asyncio.create_subprocess_exec(
                *args, stdin=PIPE, stdout=PIPE, stderr=PIPE
            )
        except OSError as e:
            self._output.append(f"{echo}\n")
            self._output.show()
            error = f"{type(e).__name__}: {e!s}"
            raise LoginError(
                f"Cannot run {self._engine}", command=echo, detail=error
            ) from e

        # communicate() writes the password and then closes standard input.
        stdout_data, stderr_data = await proc.communicate(password.encode())
        stdout = self._redact(stdout_data.decode(errors="replace"), password)
        stderr = self._redact(stderr_data.decode(errors="replace"), password)
        self._output.append(f"{echo}\n")
        self._output.append(stdout)
        self._output.append(stderr)

        if proc.returncode != 0:
            error = f"Command failed: {echo}\n{stderr}"
            if CREDENTIAL_STORE_DEFECT.search(error):
                self._output.show()
                logger.warning(
                    "Engine credential store rejected credentials",
                    config_path=str(config_path),
                )
                raise CredentialStoreDefectError(
                    config_path,
                    command=echo,
                    returncode=proc.returncode,
                    detail=error,
                )
            self._output.show()
            logger.warning("Login failed", returncode=proc.returncode)
            raise LoginError(
                f"Login to {login_server} failed",
                command=echo,
                returncode=proc.returncode,
                detail=error,
            )
        if stderr:
            # Warnings from an otherwise successful login are treated as
            # failures too.
            self._output.show()
            logger.warning("Login printed diagnostics", stderr=stderr)
            raise LoginError(
                stderr, command=echo, returncode=proc.returncode, detail=stderr
            )
        logger.info("Logged in to registry")

    def _redact(self, text: str, password: str) -> str:
        return text.replace(password, MASKED_PASSWORD) if password else text
