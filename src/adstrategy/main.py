"""Application definition for adstrategy."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from . import __version__
from .dependencies.config import config_dependency
from .dependencies.strategy import strategy_dependency
from .handlers import index, login
from .models.verify import Verify
from .strategy import ActiveDirectoryStrategy

__all__ = ["create_app"]


def create_app(verify: Verify, **options: Any) -> FastAPI:
    """Create the FastAPI application.

    This is in a function rather than using a global variable because the
    application has to supply the verify function used by the strategy.

    Parameters
    ----------
    verify
        Verify function for the authentication strategy.
    **options
        Additional `~adstrategy.config.StrategyConfig` options that cannot
        be set in the configuration file, such as custom functions or a
        pre-built directory client.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        config = config_dependency.config()
        strategy = ActiveDirectoryStrategy(
            verify, config.strategy_config(**options)
        )
        strategy_dependency.initialize(strategy)

        yield

        await strategy_dependency.aclose()

    app = FastAPI(
        title="adstrategy",
        description="Active Directory authentication",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(index.router)
    app.include_router(login.router)
    return app
