"""Test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from adstrategy.dependencies.config import config_dependency
from adstrategy.models.directory import DirectoryRecord

from .support.config import config_path
from .support.constants import TEST_GUID
from .support.directory import MockDirectoryClient
from .support.ldap import MockLDAP, patch_ldap


@pytest.fixture(autouse=True)
def environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear environment variables that would override test settings."""
    for setting in ("LOG_LEVEL", "LOG_PROFILE", "LDAP_URL", "LDAP_PASSWORD"):
        monkeypatch.delenv(f"ADSTRATEGY_{setting}", raising=False)


@pytest.fixture
def integrated_config() -> None:
    """Use the configuration for integrated authentication."""
    config_dependency.set_config_path(config_path("integrated"))


@pytest.fixture
def jdoe_record() -> DirectoryRecord:
    """Return the directory record of the test user."""
    return {
        "dn": "CN=jdoe,OU=Users,DC=corp,DC=example,DC=com",
        "objectGUID": TEST_GUID,
        "displayName": "Jane Doe",
        "givenName": "Jane",
        "sn": "Doe",
        "mail": "jdoe@example.com",
        "sAMAccountName": "jdoe",
        "userPrincipalName": "jdoe@corp.example.com",
    }


@pytest.fixture
def mock_directory(jdoe_record: DirectoryRecord) -> MockDirectoryClient:
    """Return a mock directory containing the test user."""
    directory = MockDirectoryClient()
    directory.add_user("jdoe", jdoe_record, "s3cr3t")
    return directory


@pytest.fixture
def mock_ldap() -> Iterator[MockLDAP]:
    """Replace the bonsai LDAP API with a mock class."""
    yield from patch_ldap()
