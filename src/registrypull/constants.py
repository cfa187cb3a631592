"""Constants for registry-pull.  Overrideable for testing."""

import re

ENV_PREFIX = "REGISTRY_PULL_"
ALERT_HOOK_ENV_VAR = f"{ENV_PREFIX}ALERT_HOOK"
CONFIG_FILE_ENV_VAR = f"{ENV_PREFIX}CONFIG_FILE"
ROOT_LOGGER = "registrypull"

DEFAULT_ENGINE = "docker"
"""Container engine executable used for login and pull commands."""

DEFAULT_CONSOLE_NAME = "docker pull"
"""Name of the console surface that receives pull commands."""

ENGINE_CONFIG_DIR = ".docker"
ENGINE_CONFIG_FILE = "config.json"

MASKED_PASSWORD = "xxxxxx"
"""Placeholder echoed in place of the password in command output."""

PULL_ALL_FLAG = "-a"

CREDENTIAL_STORE_DEFECT = re.compile(
    r"error storing credentials.*The stub received bad data"
)
"""Login error from the Windows credential helper rejecting a token.

See https://github.com/Azure/azure-cli/issues/4843.
"""

ACR_NULL_USERNAME = "00000000-0000-0000-0000-000000000000"
"""Username the registry expects alongside an exchanged refresh token."""

ACR_EXCHANGE_PATH = "/oauth2/exchange"
