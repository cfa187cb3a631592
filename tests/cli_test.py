"""Test that CLI works."""

from __future__ import annotations

import json
import os
import subprocess
from pathlib import Path

import pytest
import respx
from click.testing import CliRunner
from pydantic import SecretStr
from safir.testing.slack import mock_slack_webhook

from registrypull.cli import main
from registrypull.exceptions import LoginError

from .support.engine import write_fake_engine


def _env(**kwargs: str) -> dict[str, str]:
    prefix = "REGISTRY_PULL_"
    env = {k: v for k, v in os.environ.items() if not k.startswith(prefix)}
    env.update({f"{prefix}{k.upper()}": v for k, v in kwargs.items()})
    return env


def test_version() -> None:
    proc = subprocess.run(
        ["registry-pull", "--version"], check=False, capture_output=True
    )
    assert proc.returncode == 0


def test_status(tmp_path: Path) -> None:
    config_path = tmp_path / ".docker" / "config.json"
    config_path.parent.mkdir()
    config_path.write_text(json.dumps({"auths": {"contoso.azurecr.io": {}}}))

    proc = subprocess.run(
        ["registry-pull", "status", "contoso.azurecr.io"],
        check=False,
        capture_output=True,
        text=True,
        env=_env(home=str(tmp_path)),
    )
    assert proc.returncode == 0
    assert str(config_path) in proc.stdout
    assert "Logged in: yes" in proc.stdout

    proc = subprocess.run(
        ["registry-pull", "status", "fabrikam.azurecr.io"],
        check=False,
        capture_output=True,
        text=True,
        env=_env(home=str(tmp_path)),
    )
    assert proc.returncode == 0
    assert "Logged in: no" in proc.stdout


def test_status_unreadable(tmp_path: Path) -> None:
    proc = subprocess.run(
        ["registry-pull", "status", "contoso.azurecr.io"],
        check=False,
        capture_output=True,
        text=True,
        env=_env(home=str(tmp_path)),
    )
    assert proc.returncode == 0
    assert "Logged in: unknown" in proc.stdout


def test_pull_image(tmp_path: Path) -> None:
    engine = write_fake_engine(tmp_path / "engine")
    env = _env(
        engine=str(engine.path),
        home=str(tmp_path),
        credential_provider="static",
        registry_username="someuser",
        registry_password="some-password",
    )
    proc = subprocess.run(
        ["registry-pull", "pull-image", "contoso.azurecr.io", "webapp", "v2"],
        check=False,
        capture_output=True,
        text=True,
        env=env,
    )
    assert proc.returncode == 0
    assert engine.stdin == "some-password"
    assert engine.pulls == ["pull contoso.azurecr.io/webapp:v2"]
    assert "some-password" not in proc.stdout
    assert "some-password" not in proc.stderr


def test_pull_repo_from_config_file(tmp_path: Path) -> None:
    engine = write_fake_engine(tmp_path / "engine")
    output_file = tmp_path / "output.log"
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        f"engine: {engine.path}\n"
        f"homeDir: {tmp_path}\n"
        f"outputFile: {output_file}\n"
        "credentialProvider: static\n"
        "registryUsername: someuser\n"
        "registryPassword: some-password\n"
    )
    proc = subprocess.run(
        ["registry-pull", "pull-repo", "-c", str(config_file), "x.io", "app"],
        check=False,
        env=_env(),
    )
    assert proc.returncode == 0
    assert engine.pulls == ["pull x.io/app -a"]
    assert "xxxxxx" in output_file.read_text()
    assert "some-password" not in output_file.read_text()


def test_credential_store_defect(tmp_path: Path) -> None:
    stderr = (
        "Error saving credentials: error storing credentials - err: exit"
        " status 1, out: `The stub received bad data.`\n"
    )
    engine = write_fake_engine(
        tmp_path / "engine", stdout="", stderr=stderr, exit_code=1
    )
    env = _env(
        engine=str(engine.path),
        home=str(tmp_path),
        credential_provider="static",
        registry_username="someuser",
        registry_password="some-password",
    )
    proc = subprocess.run(
        ["registry-pull", "pull-repo", "contoso.azurecr.io", "webapp"],
        check=False,
        capture_output=True,
        text=True,
        env=env,
    )
    assert proc.returncode != 0
    assert "The stub received bad data" in proc.stderr
    assert engine.pulls == []


def test_missing_credentials(tmp_path: Path) -> None:
    engine = write_fake_engine(tmp_path / "engine")
    env = _env(engine=str(engine.path), credential_provider="static")
    proc = subprocess.run(
        ["registry-pull", "pull-repo", "contoso.azurecr.io", "webapp"],
        check=False,
        env=env,
    )
    assert proc.returncode != 0
    assert not engine.logged_in


def test_bad_config_file() -> None:
    proc = subprocess.run(
        [
            "registry-pull",
            "status",
            "-c",
            "/this/file/does/not/exist",
            "contoso.azurecr.io",
        ],
        check=False,
    )
    assert proc.returncode != 0


def test_alert_hook_from_config_file(
    tmp_path: Path, respx_mock: respx.Router
) -> None:
    hook = "https://slack.example.com/webhook"
    mock_slack = mock_slack_webhook(SecretStr(hook), respx_mock)
    engine = write_fake_engine(
        tmp_path / "engine",
        stdout="",
        stderr="Error response from daemon: unauthorized\n",
        exit_code=1,
    )
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        f"engine: {engine.path}\n"
        f"homeDir: {tmp_path}\n"
        f"alertHook: {hook}\n"
        "credentialProvider: static\n"
        "registryUsername: someuser\n"
        "registryPassword: some-password\n"
    )

    runner = CliRunner()
    result = runner.invoke(
        main,
        ["pull-repo", "-c", str(config_file), "contoso.azurecr.io", "webapp"],
    )

    assert result.exit_code != 0
    assert isinstance(result.exception, LoginError)
    assert len(mock_slack.messages) == 1
    message = json.dumps(mock_slack.messages[0])
    assert "Login to contoso.azurecr.io failed" in message
    assert "some-password" not in message
    assert engine.pulls == []


def test_alert_hook_bad_config_file(
    monkeypatch: pytest.MonkeyPatch, respx_mock: respx.Router
) -> None:
    hook = "https://slack.example.com/webhook"
    mock_slack = mock_slack_webhook(SecretStr(hook), respx_mock)
    monkeypatch.setenv("REGISTRY_PULL_ALERT_HOOK", hook)

    runner = CliRunner()
    result = runner.invoke(
        main,
        ["status", "-c", "/this/file/does/not/exist", "contoso.azurecr.io"],
    )

    assert result.exit_code != 0
    assert isinstance(result.exception, FileNotFoundError)
    assert len(mock_slack.messages) == 1
