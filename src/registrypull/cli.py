"""Command-line interface for registry-pull."""

from __future__ import annotations

import functools
import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import click
from safir.asyncio import run_with_asyncio
from safir.click import display_help
from safir.sentry import initialize_sentry, report_exception
from safir.slack.webhook import SlackWebhookClient
from structlog.stdlib import BoundLogger, get_logger

from . import __version__
from .config import Config
from .console import ProcessConsoleProvider
from .constants import ALERT_HOOK_ENV_VAR, CONFIG_FILE_ENV_VAR, ROOT_LOGGER
from .factory import Factory
from .models.selection import RegistrySelection

__all__ = ["main", "main_with_sentry"]


def _slack_client(
    alert_hook: str | None, logger: BoundLogger
) -> SlackWebhookClient | None:
    if not alert_hook:
        return None
    return SlackWebhookClient(alert_hook, "Registry Pull", logger=logger)


def _common[R](func: Callable[..., Awaitable[R]]) -> Callable[..., R]:
    """Add common Click options, configuration, and error reporting.

    The wrapped command receives the loaded configuration as ``config``
    instead of the ``config_file`` and ``debug`` options.
    """

    @click.option(
        "--debug",
        "-d",
        is_flag=True,
        help="Enable debug logging",
    )
    @click.option(
        "--config-file",
        "-c",
        help="Application configuration file",
        type=Path,
        default=None,
    )
    @run_with_asyncio
    @functools.wraps(func)
    async def wrapper(
        *, config_file: Path | None, debug: bool, **kwargs: Any
    ) -> R:
        # Configure slack alerting and report any exceptions. Until the
        # configuration is loaded, only the environment can name a hook.
        logger = get_logger(ROOT_LOGGER)
        alert_hook = os.environ.get(ALERT_HOOK_ENV_VAR, None)
        slack_client = _slack_client(alert_hook, logger)

        try:
            config = _load_config(config_file=config_file, debug=debug)
            if config.alert_hook:
                alert_hook = config.alert_hook.get_secret_value()
                slack_client = _slack_client(alert_hook, logger)
            return await func(config=config, **kwargs)
        except Exception as exc:
            await report_exception(exc, slack_client)
            raise

    return wrapper


def _load_config(*, config_file: Path | None, debug: bool) -> Config:
    """Load the configuration, overriding it from CLI options."""
    # Prefer config file from env var
    if env_config_path := os.getenv(CONFIG_FILE_ENV_VAR):
        config_file = Path(env_config_path)

    if config_file:
        config = Config.from_file(config_file)
    else:
        config = Config()
        config.configure_logging()

    if debug:
        config.debug = debug
        config.configure_logging()
    return config


async def _wait_for_consoles(factory: Factory) -> None:
    # The pull runs in the console after the pull command has returned, so
    # keep the process alive until it is done.
    if isinstance(factory.consoles, ProcessConsoleProvider):
        await factory.consoles.wait()


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, message="%(version)s")
def main() -> None:
    """Pull images from a container registry with fresh credentials."""


@main.command()
@click.argument("topic", default=None, required=False, nargs=1)
@click.argument("subtopic", default=None, required=False, nargs=1)
@click.pass_context
def help(ctx: click.Context, topic: str | None, subtopic: str | None) -> None:
    """Show help for any command."""
    display_help(main, ctx, topic, subtopic)


@main.command("pull-repo")
@click.argument("login_server")
@click.argument("repository")
@click.option(
    "--registry-id",
    default=None,
    help="Registry identifier for the credential provider",
)
@_common
async def pull_repo(
    *,
    login_server: str,
    repository: str,
    registry_id: str | None,
    config: Config,
) -> None:
    """Pull all tags of a repository."""
    registry = RegistrySelection.from_login_server(login_server, registry_id)
    async with Factory.standalone(config) as factory:
        puller = factory.create_puller()
        await puller.pull_repository(registry, repository)
        await _wait_for_consoles(factory)


@main.command("pull-image")
@click.argument("login_server")
@click.argument("repository")
@click.argument("tag")
@click.option(
    "--registry-id",
    default=None,
    help="Registry identifier for the credential provider",
)
@_common
async def pull_image(
    *,
    login_server: str,
    repository: str,
    tag: str,
    registry_id: str | None,
    config: Config,
) -> None:
    """Pull one image of a repository."""
    registry = RegistrySelection.from_login_server(login_server, registry_id)
    async with Factory.standalone(config) as factory:
        puller = factory.create_puller()
        await puller.pull_image(registry, repository, tag)
        await _wait_for_consoles(factory)


@main.command()
@click.argument("login_server")
@_common
async def status(
    *,
    login_server: str,
    config: Config,
) -> None:
    """Show whether the container engine holds a login for a registry."""
    async with Factory.standalone(config) as factory:
        state = factory.create_engine_inspector().is_logged_in(login_server)
    click.echo(f"Configuration: {state.config_path}")
    if not state.known:
        click.echo(f"Logged in: unknown ({state.error})")
    else:
        click.echo(f"Logged in: {'yes' if state.logged_in else 'no'}")


def main_with_sentry() -> None:
    """Call the main command group after initializing Sentry."""
    initialize_sentry(release=__version__)
    main()
