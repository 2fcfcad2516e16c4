"""Constants for adstrategy."""

__all__ = [
    "CONFIG_PATH",
    "DEFAULT_ATTRIBUTES",
    "DEFAULT_PASSWORD_FIELD",
    "DEFAULT_USERNAME_FIELD",
    "LDAP_TIMEOUT",
    "LOGON_USER_HEADER",
    "STRATEGY_NAME",
]

CONFIG_PATH = "/etc/adstrategy/adstrategy.yaml"
"""Default configuration path."""

DEFAULT_ATTRIBUTES = (
    "dn",
    "displayName",
    "givenName",
    "sn",
    "title",
    "userPrincipalName",
    "sAMAccountName",
    "mail",
    "description",
)
"""Attributes retrieved for a user if none are configured."""

DEFAULT_PASSWORD_FIELD = "password"
"""Default body or query parameter holding the password."""

DEFAULT_USERNAME_FIELD = "username"
"""Default body or query parameter holding the username."""

LDAP_TIMEOUT = 5.0
"""Timeout (in seconds) for LDAP searches and binds."""

LOGON_USER_HEADER = "X-Iisnode-Logon_User"
"""Header set by iisnode with the Windows identity of the user.

The value is in the form ``DOMAIN\\username``.
"""

STRATEGY_NAME = "ActiveDirectory"
"""Name under which the strategy is registered."""
