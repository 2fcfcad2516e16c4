"""Mock bonsai LDAP API for testing."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import Mock, patch

import bonsai

from adstrategy import factory
from adstrategy.constants import LDAP_TIMEOUT

__all__ = ["MockLDAP", "patch_ldap"]


class MockLDAP(Mock):
    """Mock bonsai LDAP connection pool and connection for testing.

    Searches return every entry added for the search filter, restricted to
    the requested attributes.
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(spec=bonsai.LDAPConnection, **kwargs)
        self._entries: dict[tuple[str, str], list[bonsai.LDAPEntry]] = {}
        self.error: Exception | None = None
        self.closed = False

    def add_entries_for_test(
        self, base_dn: str, filter_exp: str, entries: list[bonsai.LDAPEntry]
    ) -> None:
        """Add LDAP entries for testing.

        Parameters
        ----------
        base_dn
            The base DN of a search that should return these entries.
        filter_exp
            The exact search filter that returns these entries.
        entries
            The entries returned by that search.
        """
        self._entries[(base_dn, filter_exp)] = entries

    async def close(self) -> None:
        self.closed = True

    async def search(
        self,
        base: str,
        scope: bonsai.LDAPSearchScope,
        filter_exp: str,
        attrlist: list[str],
        timeout: float,
    ) -> list[bonsai.LDAPEntry]:
        assert scope == bonsai.LDAPSearchScope.SUB
        assert timeout == LDAP_TIMEOUT
        assert "dn" not in attrlist
        if self.error:
            raise self.error
        results = []
        for entry in self._entries.get((base, filter_exp), []):
            result = bonsai.LDAPEntry(entry.dn)
            for attr in attrlist:
                if attr in entry:
                    result[attr] = entry[attr]
            results.append(result)
        return results

    @asynccontextmanager
    async def spawn(self) -> AsyncIterator[MockLDAP]:
        yield self


def patch_ldap() -> Iterator[MockLDAP]:
    """Mock the bonsai API for testing.

    Returns
    -------
    MockLDAP
        The mock LDAP API.
    """
    mock_ldap = MockLDAP()
    with patch.object(factory, "AIOConnectionPool") as mock_pool:
        mock_pool.return_value = mock_ldap
        yield mock_ldap
