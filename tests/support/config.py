"""Build test configuration for adstrategy."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from adstrategy.config import LDAPConfig

__all__ = ["build_ldap_config", "config_path"]


def config_path(filename: str) -> Path:
    """Return the path to a test configuration file.

    Parameters
    ----------
    filename
        The base name of a test configuration file.

    Returns
    -------
    Path
        The path to that file.
    """
    return (
        Path(__file__).parent.parent / "data" / "config" / (filename + ".yaml")
    )


def build_ldap_config(**kwargs: Any) -> LDAPConfig:
    """Build an LDAP configuration pointing at the mock server.

    Parameters
    ----------
    **kwargs
        Settings to override.

    Returns
    -------
    LDAPConfig
        Configuration for the test directory.
    """
    settings: dict[str, Any] = {
        "url": "ldap://ad.example.com",
        "base_dn": "dc=example,dc=com",
    }
    settings.update(kwargs)
    return LDAPConfig(**settings)
