"""Exceptions for adstrategy."""

from __future__ import annotations

__all__ = [
    "LDAPError",
    "MissingVerifyError",
    "StrategyConfigError",
]


class StrategyConfigError(Exception):
    """The strategy was constructed with an invalid configuration."""


class MissingVerifyError(StrategyConfigError):
    """The strategy was constructed without a verification callback."""

    def __init__(self) -> None:
        super().__init__(
            "Active Directory authentication strategy requires a verify"
            " function"
        )


class LDAPError(Exception):
    """Searching or binding to the LDAP server failed.

    Parameters
    ----------
    message
        Description of the failure.
    user
        User for which the operation was being performed.
    """

    def __init__(self, message: str, user: str | None = None) -> None:
        super().__init__(message)
        self.user = user
