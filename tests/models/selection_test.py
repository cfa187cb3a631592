"""Tests for selection and image request models."""

from __future__ import annotations

import pytest

from registrypull.models.selection import (
    ImageRequest,
    ImageTagTarget,
    RegistrySelection,
    RepositoryTarget,
    Selection,
)

from ..support.constants import TEST_LOGIN_SERVER


def test_registry_selection() -> None:
    registry = RegistrySelection.from_login_server(TEST_LOGIN_SERVER)
    assert registry.identifier == TEST_LOGIN_SERVER
    registry = RegistrySelection.from_login_server(
        TEST_LOGIN_SERVER, "/subscriptions/x/registries/contoso"
    )
    assert registry.login_server == TEST_LOGIN_SERVER
    assert registry.identifier == "/subscriptions/x/registries/contoso"


@pytest.mark.parametrize("repository", ["webapp", "team/service", "a"])
def test_pull_all(repository: str) -> None:
    registry = RegistrySelection.from_login_server(TEST_LOGIN_SERVER)
    selection = Selection(
        registry=registry, repository_name=repository, pull_all=True
    )
    target = selection.to_target()
    assert target == RepositoryTarget(repository=repository)
    assert str(ImageRequest.from_target(target)) == f"{repository} -a"

    # A tag is ignored when pulling all tags.
    selection = Selection(
        registry=registry, repository_name=repository, tag="v1", pull_all=True
    )
    request = ImageRequest.from_target(selection.to_target())
    assert str(request) == f"{repository} -a"


def test_tag_label_verbatim() -> None:
    registry = RegistrySelection.from_login_server(TEST_LOGIN_SERVER)
    selection = Selection(
        registry=registry, repository_name="webapp", tag="v2", pull_all=False
    )
    target = selection.to_target()
    assert target == ImageTagTarget(repository="webapp", label="v2")
    request = ImageRequest.from_target(target)
    assert request == ImageRequest(repository_name="webapp", tag="v2")
    assert str(request) == "v2"


def test_image_in_repository() -> None:
    registry = RegistrySelection.from_login_server(TEST_LOGIN_SERVER)
    selection = Selection.for_image(registry, "webapp", "v2")
    assert selection.tag == "webapp:v2"
    request = ImageRequest.from_target(selection.to_target())
    assert str(request) == "webapp:v2"

    selection = Selection.for_repository(registry, "webapp")
    request = ImageRequest.from_target(selection.to_target())
    assert str(request) == "webapp -a"


def test_all_and_one_are_distinct() -> None:
    one = ImageRequest(repository_name="webapp", tag="webapp")
    everything = ImageRequest(repository_name="webapp", pull_all=True)
    assert str(one) != str(everything)


def test_missing_tag() -> None:
    registry = RegistrySelection.from_login_server(TEST_LOGIN_SERVER)
    selection = Selection(registry=registry, repository_name="webapp")
    with pytest.raises(ValueError, match="No tag selected"):
        selection.to_target()
