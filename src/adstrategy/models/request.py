"""Model for the parts of an HTTP request used for authentication."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Self

from starlette.datastructures import Headers
from starlette.requests import Request

__all__ = ["AuthenticationRequest"]


@dataclass
class AuthenticationRequest:
    """The data from an incoming request that the strategy looks at.

    This is separate from the Starlette request so that the strategy can be
    used from any framework and so that the body, which Starlette only
    exposes asynchronously, is parsed once up front.
    """

    headers: Headers = field(default_factory=Headers)
    """Request headers (case-insensitive)."""

    body: Mapping[str, Any] = field(default_factory=dict)
    """Parsed JSON object or form body of the request."""

    query: Mapping[str, Any] = field(default_factory=dict)
    """Query parameters of the request."""

    request: Request | None = None
    """The underlying Starlette request, if there is one."""

    @classmethod
    async def from_request(cls, request: Request) -> Self:
        """Build the authentication request from a Starlette request.

        JSON bodies are used if they contain an object. Form bodies (both
        URL-encoded and multipart) are converted to a dictionary. Any other
        body is ignored.

        Parameters
        ----------
        request
            Incoming request.

        Returns
        -------
        AuthenticationRequest
            Corresponding authentication request.
        """
        body: Mapping[str, Any] = {}
        content_type = request.headers.get("Content-Type", "")
        if content_type.startswith("application/json"):
            try:
                data = await request.json()
            except ValueError:
                data = None
            if isinstance(data, dict):
                body = data
        elif content_type.startswith(
            ("application/x-www-form-urlencoded", "multipart/form-data")
        ):
            form = await request.form()
            body = {k: v for k, v in form.items() if isinstance(v, str)}
        return cls(
            headers=request.headers,
            body=body,
            query=dict(request.query_params),
            request=request,
        )
