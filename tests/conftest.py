"""Shared fixtures for git-drive tests."""

import tempfile
from pathlib import Path

import pytest

from git_drive.core.store import Store
from git_drive.models import Identity, Kind


@pytest.fixture
def temp_dir():
    """Temporary directory removed after the test."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def nav1():
    return Identity(alias="nav1", name="bernd", email="foo@bar.org")


@pytest.fixture
def nav2():
    return Identity(alias="nav2", name="ronny", email="baz@bar.org")


@pytest.fixture
def drv1():
    return Identity(alias="drv1", name="ralle", email="qux@bar.org", signing_key="ABCD1234")


@pytest.fixture
def store_dir(temp_dir, nav1, nav2, drv1):
    """Store directory with two navigators and one driver."""
    home = temp_dir / "home"
    with Store.open(home) as store:
        store.registry.add(Kind.NAVIGATOR, nav1)
        store.registry.add(Kind.NAVIGATOR, nav2)
        store.registry.add(Kind.DRIVER, drv1)
    return home
