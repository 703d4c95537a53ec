"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock

import pytest
from aiohttp import ClientSession, web

from pyecoflow.signing import sign


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from aiohttp.web import Application


TEST_ACCESS_KEY = "test-access-key"
TEST_SECRET_KEY = "test-secret-key"
TEST_SERIAL = "HW52ZDH4SF123456"


def flatten_command_body(body: dict[str, Any]) -> list[tuple[str, str]]:
    """Flatten a command body the way the server does before verifying it."""
    pairs = [(key, str(value)) for key, value in body.items() if key != "params"]
    pairs.extend((f"params.{key}", str(value)) for key, value in body.get("params", {}).items())
    return pairs


async def verify_signature(request: web.Request) -> bool:
    """Recompute the signature of an incoming request."""
    if request.method == "PUT":
        params = flatten_command_body(await request.json())
    else:
        params = list(request.query.items())

    expected = sign(
        params,
        request.headers.get("accessKey", ""),
        TEST_SECRET_KEY,
        int(request.headers.get("timestamp", "0")),
        request.headers.get("nonce", ""),
    )
    return request.headers.get("sign") == expected


@pytest.fixture
def responses() -> dict[str, tuple[int, str | bytes]]:
    """Canned (status, body) per route, editable by tests.

    Returns:
        Mapping of "METHOD path" to response.
    """
    return {
        "GET /iot-open/sign/device/list": (
            200,
            json.dumps(
                {
                    "code": "0",
                    "message": "Success",
                    "data": [
                        {"sn": TEST_SERIAL, "deviceName": "Garage", "online": 1, "productName": "WAVE 3"},
                        {"sn": "HW52ZDH4SF654321", "deviceName": "Office", "online": 0},
                    ],
                }
            ),
        ),
        "GET /iot-open/sign/device/quota/all": (
            200,
            json.dumps(
                {
                    "code": "0",
                    "message": "Success",
                    "data": {"bms.soc": 87, "pd.acOutState": "1", "pd.temp": 20.5},
                }
            ),
        ),
        "PUT /iot-open/sign/device/quota": (200, json.dumps({"code": "0", "message": "Success"})),
    }


@pytest.fixture
def received() -> list[dict[str, Any]]:
    """Requests received by the fake server, with their JSON bodies attached."""
    return []


@pytest.fixture
def app(responses: dict[str, tuple[int, str | bytes]], received: list[dict[str, Any]]) -> Application:
    """Create a fake EcoFlow open-platform server."""
    app = web.Application()

    async def handler(request: web.Request) -> web.Response:
        body = await request.json() if request.method == "PUT" else None
        received.append({"request": request, "query": dict(request.query), "body": body})

        if not await verify_signature(request):
            return web.json_response({"code": "8521", "message": "signature is wrong"})

        status, payload = responses[f"{request.method} {request.path}"]
        if isinstance(payload, bytes):
            return web.Response(status=status, body=payload, content_type="application/json")
        return web.Response(status=status, text=payload, content_type="application/json")

    app.router.add_get("/iot-open/sign/device/list", handler)
    app.router.add_get("/iot-open/sign/device/quota/all", handler)
    app.router.add_put("/iot-open/sign/device/quota", handler)

    return app


@pytest.fixture
async def mock_session() -> AsyncGenerator[ClientSession]:
    """Create a mock aiohttp ClientSession.

    Yields:
        Mock ClientSession for testing.
    """
    session = AsyncMock(spec=ClientSession)
    session.closed = False

    async def mock_close() -> None:
        session.closed = True

    session.close = mock_close

    yield session

    if not session.closed:
        await session.close()
