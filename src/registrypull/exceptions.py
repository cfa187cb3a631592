"""Exceptions for registry-pull."""

from __future__ import annotations

from pathlib import Path
from typing import Self, override

from safir.slack.blockkit import (
    SlackCodeBlock,
    SlackException,
    SlackMessage,
    SlackTextBlock,
    SlackWebException,
)
from safir.slack.sentry import SentryEventInfo

__all__ = [
    "AuthResolutionError",
    "ConfigReadError",
    "CredentialStoreDefectError",
    "LoginError",
]


class AuthResolutionError(SlackWebException):
    """Registry credentials could not be obtained from the provider.

    When the failure was an HTTP failure, the exception is created with
    `from_exception` and carries the method, URL, and status of the failed
    request.
    """

    @classmethod
    def from_parse_error(cls, exc: ValueError) -> Self:
        """Create an exception from a failure to parse a reply.

        Parameters
        ----------
        exc
            Exception from decoding the JSON body, or the Pydantic
            `~pydantic.ValidationError` from validating it.

        Returns
        -------
        AuthResolutionError
            Constructed exception.
        """
        error = f"{type(exc).__name__}: {exc!s}"
        return cls(f"Unable to parse credential reply: {error}")


class LoginError(SlackException):
    """The container engine rejected the login attempt.

    Parameters
    ----------
    message
        Summary of error.
    command
        Login command as echoed to the output, with the password masked.
    returncode
        Exit status of the login process, if it ran to completion.
    detail
        Diagnostic output of the login process or the original error.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str,
        returncode: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.detail = detail

    @override
    def to_slack(self) -> SlackMessage:
        """Format the exception as a Slack message.

        Returns
        -------
        safir.slack.blockkit.SlackMessage
            Slack message suitable for posting with
            `~safir.slack.webhook.SlackWebhookClient`.
        """
        message = super().to_slack()
        block = SlackTextBlock(heading="Command", text=self.command)
        message.blocks.append(block)
        if self.detail:
            code = SlackCodeBlock(heading="Error", code=self.detail)
            message.blocks.append(code)
        return message

    @override
    def to_sentry(self) -> SentryEventInfo:
        """Return a collection of Sentry event metadata about the exception.

        Returns
        -------
        safir.slack.sentry.SentryEventInfo
            Sentry event metadata for use with \
            `~safir.sentry.before_send_handler`
        """
        info = super().to_sentry()
        info.contexts["login"] = {"command": self.command}
        if self.returncode is not None:
            info.tags["returncode"] = str(self.returncode)
        if self.detail:
            info.attachments["detail"] = self.detail
        return info


class CredentialStoreDefectError(LoginError):
    """The engine credential helper rejected programmatic credentials.

    The default Windows credential helper fails to store tokens with "The
    stub received bad data." The only remedy is to stop using that helper,
    which has to be done by the user.

    Parameters
    ----------
    config_path
        Path to the engine configuration file naming the credential helper.
    command
        Login command as echoed to the output, with the password masked.
    returncode
        Exit status of the login process.
    detail
        Original error text from the login process.
    """

    def __init__(
        self,
        config_path: Path,
        *,
        command: str,
        returncode: int | None = None,
        detail: str | None = None,
    ) -> None:
        msg = (
            "In order to log in to the container engine using tokens, you"
            f" currently need to go to \n{config_path} and remove"
            ' "credsStore": "wincred" from the config.json file, then try'
            " again. \nDoing this will disable wincred and cause the engine"
            " to store credentials directly in the .docker/config.json file."
            " All registries that are currently logged in will be"
            " effectively logged out."
        )
        super().__init__(
            msg, command=command, returncode=returncode, detail=detail
        )
        self.config_path = config_path


class ConfigReadError(SlackException):
    """The engine configuration file could not be read.

    Only used to record the failure of the best-effort login state probe. It
    is logged and never raised.

    Parameters
    ----------
    config_path
        Path of the file that could not be read.
    error
        Description of the underlying error.
    """

    def __init__(self, config_path: Path, error: str) -> None:
        super().__init__(f"Cannot read {config_path}: {error}")
        self.config_path = config_path
        self.error = error
