"""Data models for the directory service."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias

__all__ = ["DirectoryClient", "DirectoryRecord", "FindResult"]

DirectoryRecord: TypeAlias = dict[str, Any]
"""A directory entry as a mapping of attribute name to value."""


@dataclass
class FindResult:
    """Result of a directory search for users."""

    users: list[DirectoryRecord] | None = None
    """Matching user records, or `None` if the search returned nothing."""


class DirectoryClient(Protocol):
    """Interface to a directory service used by the strategy.

    Any object providing these methods may be given to the strategy as a
    pre-built client. `~adstrategy.storage.ldap.LDAPDirectoryClient` is the
    implementation used when the strategy is given connection settings.
    """

    async def find(
        self, filter_exp: str, attributes: Sequence[str]
    ) -> FindResult | None:
        """Search the directory for users.

        Parameters
        ----------
        filter_exp
            LDAP search filter.
        attributes
            Attributes to retrieve for each matching entry.

        Returns
        -------
        FindResult or None
            The matching users.
        """

    async def authenticate(self, dn: str, password: str | None) -> bool:
        """Check a password by binding to the directory.

        Parameters
        ----------
        dn
            Distinguished name of the user.
        password
            Password to check.

        Returns
        -------
        bool
            Whether the bind succeeded.
        """
