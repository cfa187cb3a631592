"""Application configuration for registry-pull."""

from enum import StrEnum
from pathlib import Path
from typing import Annotated, Self

import yaml
from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from safir.logging import LogLevel, Profile, configure_logging

from .constants import (
    DEFAULT_CONSOLE_NAME,
    DEFAULT_ENGINE,
    ENV_PREFIX,
    ROOT_LOGGER,
)

__all__ = ["Config", "CredentialProviderType"]


class CredentialProviderType(StrEnum):
    """Source of registry credentials."""

    ACR = "acr"
    STATIC = "static"


class EnvFirstSettings(BaseSettings):
    """Base class for Pydantic settings with environment overrides.

    Classes that inherit from this base class will prioritize environment
    variables over arguments to the class constructor.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX, extra="forbid", validate_by_name=True
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Override the sources of settings.

        Deactivate :file:`.env` and secret file support. Allow environment
        variables to override init parameters, since init parameters come
        from the YAML configuration file and we want environment variables
        to take precedent.
        """
        return (env_settings, init_settings)


class Config(EnvFirstSettings):
    """Configuration for registry-pull."""

    engine: Annotated[
        str,
        Field(
            title="Container engine executable",
            description=(
                "Name or path of the engine command used for login and pull."
            ),
            validation_alias=AliasChoices(ENV_PREFIX + "ENGINE", "engine"),
        ),
    ] = DEFAULT_ENGINE

    home: Annotated[
        Path | None,
        Field(
            title="Home directory",
            description=(
                "Directory holding the engine configuration directory. If not"
                " set, the home directory of the current user is used."
            ),
            validation_alias=AliasChoices(ENV_PREFIX + "HOME", "homeDir"),
        ),
    ] = None

    credential_provider: Annotated[
        CredentialProviderType,
        Field(
            title="Credential provider",
            validation_alias=AliasChoices(
                ENV_PREFIX + "CREDENTIAL_PROVIDER", "credentialProvider"
            ),
        ),
    ] = CredentialProviderType.ACR

    acr_access_token: Annotated[
        SecretStr | None,
        Field(
            title="Identity access token",
            description=(
                "Access token from the cloud identity service, exchanged at"
                " the registry for a refresh token used as the password."
            ),
            validation_alias=AliasChoices(
                ENV_PREFIX + "ACR_ACCESS_TOKEN", "acrAccessToken"
            ),
        ),
    ] = None

    acr_tenant: Annotated[
        str | None,
        Field(
            title="Identity tenant",
            validation_alias=AliasChoices(
                ENV_PREFIX + "ACR_TENANT", "acrTenant"
            ),
        ),
    ] = None

    registry_username: Annotated[
        str | None,
        Field(
            title="Static registry username",
            validation_alias=AliasChoices(
                ENV_PREFIX + "REGISTRY_USERNAME", "registryUsername"
            ),
        ),
    ] = None

    registry_password: Annotated[
        SecretStr | None,
        Field(
            title="Static registry password",
            validation_alias=AliasChoices(
                ENV_PREFIX + "REGISTRY_PASSWORD", "registryPassword"
            ),
        ),
    ] = None

    output_file: Annotated[
        Path | None,
        Field(
            title="Output file",
            description=(
                "If set, login output is also appended to this file."
            ),
            validation_alias=AliasChoices(
                ENV_PREFIX + "OUTPUT_FILE", "outputFile"
            ),
        ),
    ] = None

    console_name: Annotated[
        str,
        Field(
            title="Name of the console that runs pull commands",
            validation_alias=AliasChoices(
                ENV_PREFIX + "CONSOLE_NAME", "consoleName"
            ),
        ),
    ] = DEFAULT_CONSOLE_NAME

    debug: Annotated[
        bool,
        Field(
            title="Show debug output and log style",
            description=(
                "If True, then log level will be set to debug and will"
                " non-structured, human-readable output."
            ),
        ),
    ] = False

    log_profile: Annotated[
        Profile,
        Field(
            title="Logging profile",
            validation_alias=AliasChoices(
                ENV_PREFIX + "LOG_PROFILE", "logProfile"
            ),
        ),
    ] = Profile.production

    log_level: Annotated[
        LogLevel,
        Field(
            title="Log level",
            validation_alias=AliasChoices(
                ENV_PREFIX + "LOG_LEVEL", "logLevel"
            ),
        ),
    ] = LogLevel.INFO

    add_timestamp: Annotated[
        bool,
        Field(
            title="Add timestamp to log lines",
            validation_alias=AliasChoices(
                ENV_PREFIX + "ADD_TIMESTAMP", "addTimestamp"
            ),
        ),
    ] = False

    alert_hook: Annotated[
        SecretStr | None,
        Field(
            title="Slack webhook URL used for sending alerts",
            description=(
                "An https URL, which should be considered secret."
                " If not set or set to `None`, this feature will be disabled."
            ),
            validation_alias=AliasChoices(
                ENV_PREFIX + "ALERT_HOOK", "alertHook"
            ),
        ),
    ] = None

    @property
    def home_path(self) -> Path:
        """Home directory in which to find the engine configuration."""
        return self.home if self.home else Path.home()

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Construct the configuration from a YAML file.

        Parameters
        ----------
        path
            Path to the configuration file in YAML.

        Returns
        -------
        Config
            The corresponding configuration.
        """
        with path.open("r") as f:
            config = cls(**(yaml.safe_load(f) or {}))
        config.configure_logging()
        return config

    def configure_logging(self) -> None:
        """Configure logging based on the configuration."""
        if self.debug:
            log_level = LogLevel.DEBUG
            log_profile = Profile.development
        else:
            log_level = self.log_level
            log_profile = self.log_profile

        configure_logging(
            profile=log_profile,
            log_level=log_level,
            add_timestamp=self.add_timestamp,
            name=ROOT_LOGGER,
        )
