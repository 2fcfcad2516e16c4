"""Results of an authentication attempt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

__all__ = ["AuthError", "AuthFailure", "AuthOutcome", "AuthSuccess"]


@dataclass(frozen=True)
class AuthSuccess:
    """The user was authenticated and accepted by the verify function."""

    user: Any
    """User returned by the verify function."""

    info: Any = None
    """Additional information returned by the verify function."""


@dataclass(frozen=True)
class AuthFailure:
    """Authentication was rejected.

    The hosting application should normally respond with a 401 error.
    """

    info: Any = None
    """Message or structured information describing the rejection."""


@dataclass(frozen=True)
class AuthError:
    """Authentication could not be completed because of an error."""

    error: BaseException
    """The underlying exception, unmodified."""


AuthOutcome: TypeAlias = AuthSuccess | AuthFailure | AuthError
"""Terminal outcome of `~adstrategy.ActiveDirectoryStrategy.authenticate`."""
