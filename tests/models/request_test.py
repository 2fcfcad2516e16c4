"""Tests for building authentication requests from Starlette requests."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from adstrategy.models.request import AuthenticationRequest


async def capture(method: str, url: str, **kwargs: Any) -> dict[str, Any]:
    """Send a request to a test app and return what it parsed."""
    app = FastAPI()

    @app.api_route("/", methods=["GET", "POST"])
    async def handler(request: Request) -> dict[str, Any]:
        auth_request = await AuthenticationRequest.from_request(request)
        assert auth_request.request is request
        return {
            "user": auth_request.headers.get("X-Iisnode-Logon_User"),
            "body": dict(auth_request.body),
            "query": dict(auth_request.query),
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://x") as c:
        r = await c.request(method, url, **kwargs)
    assert r.status_code == 200
    return r.json()


@pytest.mark.asyncio
async def test_headers_and_query() -> None:
    result = await capture(
        "GET",
        "/?username=jdoe&password=s3cr3t",
        headers={"X-IISNode-Logon_User": "CORP\\jdoe"},
    )
    assert result == {
        "user": "CORP\\jdoe",
        "body": {},
        "query": {"username": "jdoe", "password": "s3cr3t"},
    }


@pytest.mark.asyncio
async def test_json_body() -> None:
    result = await capture(
        "POST", "/", json={"username": "jdoe", "password": "s3cr3t"}
    )
    assert result["body"] == {"username": "jdoe", "password": "s3cr3t"}

    result = await capture("POST", "/", json=["jdoe", "s3cr3t"])
    assert result["body"] == {}

    result = await capture(
        "POST",
        "/",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert result["body"] == {}


@pytest.mark.asyncio
async def test_form_body() -> None:
    result = await capture(
        "POST", "/", data={"username": "jdoe", "password": "s3cr3t"}
    )
    assert result["body"] == {"username": "jdoe", "password": "s3cr3t"}


@pytest.mark.asyncio
async def test_other_body() -> None:
    result = await capture(
        "POST",
        "/",
        content=b"username=jdoe",
        headers={"Content-Type": "text/plain"},
    )
    assert result["body"] == {}
