"""Shared fixtures: API key, canned JSON fixtures and transport stubs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

FIXTURES = Path(__file__).parent / "fixtures"
API_KEY = "6b1e65b9-4186-45c2-8981-b77a9842c4f0"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def api_key() -> str:
    return API_KEY


@pytest.fixture
def load_fixture() -> Callable[[str], Any]:
    def load(name: str) -> Any:
        return json.loads((FIXTURES / name).read_text(encoding="utf-8"))

    return load


@pytest.fixture
def rpc_transport():
    """Build a ``MockTransport`` that answers with ``reply(request_json)``.

    Every parsed request is appended to ``transport.requests``; the
    reply's ``id`` is set to the request id unless the reply has one.
    """

    def build(reply: Callable[[dict[str, Any]], dict[str, Any]]) -> httpx.MockTransport:
        requests: list[dict[str, Any]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            requests.append(body)
            payload = dict(reply(body))
            payload.setdefault("id", body["id"])
            return httpx.Response(200, json=payload)

        transport = httpx.MockTransport(handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return build


@pytest.fixture
def failing_transport() -> httpx.MockTransport:
    """A transport that fails the test when any request reaches it."""

    def handler(request: httpx.Request) -> httpx.Response:
        pytest.fail(f"unexpected request to {request.url}")

    return httpx.MockTransport(handler)
