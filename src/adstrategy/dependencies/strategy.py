"""Authentication strategy dependencies for FastAPI."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from safir.dependencies.logger import logger_dependency
from structlog.stdlib import BoundLogger

from ..models.outcome import AuthError, AuthFailure, AuthSuccess
from ..models.request import AuthenticationRequest
from ..strategy import ActiveDirectoryStrategy

__all__ = [
    "StrategyDependency",
    "authenticated_user",
    "strategy_dependency",
]


class StrategyDependency:
    """Provides the authentication strategy as a dependency.

    The strategy has to be created by the application, since only the
    application can supply the verify function, so it is registered with
    `initialize` from the lifespan of the app.
    """

    def __init__(self) -> None:
        self._strategy: ActiveDirectoryStrategy | None = None

    async def __call__(self) -> ActiveDirectoryStrategy:
        """Return the strategy."""
        if not self._strategy:
            raise RuntimeError("Authentication strategy not initialized")
        return self._strategy

    def initialize(self, strategy: ActiveDirectoryStrategy) -> None:
        """Set the strategy to use.

        Parameters
        ----------
        strategy
            Authentication strategy for the application.
        """
        self._strategy = strategy

    async def aclose(self) -> None:
        """Close the strategy.

        Should be called from the shutdown part of the lifespan so that the
        LDAP connection pool, if any, is cleanly shut down.
        """
        if self._strategy:
            await self._strategy.aclose()
            self._strategy = None


strategy_dependency = StrategyDependency()
"""The dependency that will return the authentication strategy."""


async def authenticated_user(
    request: Request,
    strategy: Annotated[ActiveDirectoryStrategy, Depends(strategy_dependency)],
    logger: Annotated[BoundLogger, Depends(logger_dependency)],
) -> Any:
    """Authenticate the request and return the verified user.

    Returns
    -------
    Any
        User returned by the verify function.

    Raises
    ------
    fastapi.HTTPException
        Raised with a 401 status if authentication was rejected.
    Exception
        The underlying error is raised again if authentication could not be
        completed, which results in a 500 error.
    """
    auth_request = await AuthenticationRequest.from_request(request)
    outcome = await strategy.authenticate(auth_request)
    match outcome:
        case AuthSuccess(user=user):
            return user
        case AuthFailure(info=info):
            detail = info if isinstance(info, str) else "Authentication failed"
            logger.info("Authentication rejected", reason=detail)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=[{"msg": detail, "type": "authentication_failed"}],
                headers={"WWW-Authenticate": "Negotiate"},
            )
        case AuthError(error=error):
            raise error
