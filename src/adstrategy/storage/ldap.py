"""LDAP storage layer for adstrategy."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Sequence
from typing import Any

import bonsai
from bonsai import LDAPClient, LDAPSearchScope
from bonsai.asyncio import AIOConnectionPool
from structlog.stdlib import BoundLogger

from ..config import LDAPConfig
from ..constants import LDAP_TIMEOUT
from ..exceptions import LDAPError
from ..models.directory import DirectoryRecord, FindResult

__all__ = ["LDAPDirectoryClient"]


class LDAPDirectoryClient:
    """Directory client that talks to Active Directory with bonsai.

    Parameters
    ----------
    config
        Configuration for LDAP searches.
    pool
        Connection pool for LDAP searches.
    logger
        Logger for debug messages and errors.
    """

    def __init__(
        self, config: LDAPConfig, pool: AIOConnectionPool, logger: BoundLogger
    ) -> None:
        self._config = config
        self._pool = pool
        self._logger = logger.bind(ldap_url=str(config.url))

    async def find(
        self, filter_exp: str, attributes: Sequence[str]
    ) -> FindResult:
        """Search for users below the configured base DN.

        Parameters
        ----------
        filter_exp
            LDAP search filter.
        attributes
            Attributes to retrieve. ``dn`` is not an LDAP attribute and is
            always included in the records from the entry's DN.

        Returns
        -------
        FindResult
            Records for the matching entries, empty if there are none.

        Raises
        ------
        LDAPError
            Raised if the search failed or timed out.
        """
        attrlist = [a for a in attributes if a.lower() != "dn"]
        logger = self._logger.bind(
            ldap_attrs=attrlist,
            ldap_base=self._config.base_dn,
            ldap_search=filter_exp,
        )
        try:
            async with self._pool.spawn() as conn:
                logger.debug("Querying LDAP")
                entries = await conn.search(
                    base=self._config.base_dn,
                    scope=LDAPSearchScope.SUB,
                    filter_exp=filter_exp,
                    attrlist=attrlist,
                    timeout=LDAP_TIMEOUT,
                )
        except (bonsai.LDAPError, asyncio.TimeoutError) as e:
            logger.exception("Cannot query LDAP", error=str(e))
            raise LDAPError("Error querying LDAP") from e

        users = [_entry_to_record(e) for e in entries]
        logger.debug("LDAP entries found", count=len(users))
        return FindResult(users=users)

    async def authenticate(self, dn: str, password: str | None) -> bool:
        """Check a password by performing a simple bind as the user.

        Parameters
        ----------
        dn
            Distinguished name of the user.
        password
            Password to check.

        Returns
        -------
        bool
            `True` if the bind succeeded, `False` if the credentials were
            rejected. An empty DN or password is always rejected without
            contacting the server, since an LDAP simple bind with an empty
            password is an unauthenticated bind and would succeed.

        Raises
        ------
        LDAPError
            Raised if the bind failed for any reason other than invalid
            credentials.
        """
        logger = self._logger.bind(ldap_dn=dn)
        if not dn or not password:
            logger.info("Rejecting bind with empty DN or password")
            return False

        client = LDAPClient(str(self._config.url))
        client.set_credentials("SIMPLE", user=dn, password=password)
        try:
            logger.debug("Binding to LDAP")
            conn = await client.connect(is_async=True, timeout=LDAP_TIMEOUT)
        except bonsai.AuthenticationError:
            logger.info("LDAP bind rejected")
            return False
        except (bonsai.LDAPError, asyncio.TimeoutError) as e:
            logger.exception("Cannot bind to LDAP", error=str(e))
            raise LDAPError("Error binding to LDAP", dn) from e
        conn.close()
        logger.debug("LDAP bind succeeded")
        return True

    async def aclose(self) -> None:
        """Close the connection pool used for searches."""
        await self._pool.close()


def _entry_to_record(entry: bonsai.LDAPEntry) -> DirectoryRecord:
    """Convert a bonsai entry to a directory record.

    Attributes with a single value are stored as that value and attributes
    with multiple values as a list. ``objectGUID`` is stored as the
    canonical GUID string.
    """
    record: DirectoryRecord = {}
    for attr, values in entry.items():
        if attr.lower() == "dn":
            continue
        if attr == "objectGUID":
            values = [_format_guid(v) for v in values]
        record[attr] = values[0] if len(values) == 1 else list(values)
    record["dn"] = str(entry.dn)
    return record


def _format_guid(value: Any) -> Any:
    if isinstance(value, bytes) and len(value) == 16:
        return str(uuid.UUID(bytes_le=value))
    return value
