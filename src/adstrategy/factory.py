"""Create directory clients from configuration."""

from __future__ import annotations

import structlog
from bonsai import LDAPClient
from bonsai.asyncio import AIOConnectionPool
from structlog.stdlib import BoundLogger

from .config import LDAPConfig
from .storage.ldap import LDAPDirectoryClient

__all__ = ["create_ldap_client", "create_ldap_pool"]


def create_ldap_pool(config: LDAPConfig) -> AIOConnectionPool:
    """Create the bonsai connection pool used for user searches.

    Parameters
    ----------
    config
        LDAP configuration.

    Returns
    -------
    bonsai.asyncio.AIOConnectionPool
        Connection pool, which is opened on first use. If ``user_dn`` and
        ``password`` are configured, connections use a simple bind as that
        user; otherwise they bind anonymously.
    """
    client = LDAPClient(str(config.url))
    if config.user_dn and config.password:
        client.set_credentials(
            "SIMPLE",
            user=config.user_dn,
            password=config.password.get_secret_value(),
        )
    return AIOConnectionPool(client)


def create_ldap_client(
    config: LDAPConfig, logger: BoundLogger | None = None
) -> LDAPDirectoryClient:
    """Create a directory client for Active Directory.

    Parameters
    ----------
    config
        LDAP configuration.
    logger
        Logger to use. Defaults to the ``adstrategy`` logger.

    Returns
    -------
    LDAPDirectoryClient
        New directory client with its own connection pool.
    """
    if not logger:
        logger = structlog.get_logger("adstrategy")
    return LDAPDirectoryClient(config, create_ldap_pool(config), logger)
