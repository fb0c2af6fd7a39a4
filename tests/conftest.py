"""Shared pytest fixtures for wirebox tests."""

import pytest

from wirebox import Container

pytest_plugins = ["wirebox.integrations.pytest_plugin"]


@pytest.fixture()
def container() -> Container:
    """Container without bindings or registered services."""
    return Container()


@pytest.fixture()
def thread_safe_container() -> Container:
    """Container guarding every operation with a re-entrant lock."""
    return Container(thread_safe=True)
