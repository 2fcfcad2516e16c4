"""Create and configure the test FastAPI application."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from adstrategy.main import create_app
from adstrategy.models.verify import Verify

from .constants import TEST_HOSTNAME

__all__ = ["create_test_client"]


@asynccontextmanager
async def create_test_client(
    verify: Verify, **options: Any
) -> AsyncIterator[AsyncClient]:
    """Create the application and a client to talk to it.

    The application is wrapped in a lifespan manager so that the strategy is
    created and closed as it would be in production.

    Parameters
    ----------
    verify
        Verify function for the strategy.
    **options
        Additional strategy options.

    Yields
    ------
    httpx.AsyncClient
        Client for the application.
    """
    app = create_app(verify, **options)
    async with LifespanManager(app):
        async with AsyncClient(
            base_url=f"https://{TEST_HOSTNAME}",
            transport=ASGITransport(app=app),
        ) as client:
            yield client
