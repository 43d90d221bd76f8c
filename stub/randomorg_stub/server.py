"""RANDOM.ORG emulator — Starlette ASGI server.

Single ``/json-rpc/2/invoke`` POST endpoint answering the RANDOM.ORG
JSON-RPC methods from local randomness.  Point a client at it with
``endpoint="http://127.0.0.1:8100/json-rpc/2/invoke"``.

Run directly::

    python -m randomorg_stub.server --api-key 00000000-0000-0000-0000-000000000000
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import uuid
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv
from randomorg_wire.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    PARSE_ERROR,
    JsonRpcRequest,
    JsonRpcResponse,
)
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from randomorg_stub.dispatcher import MethodNotFoundError
from randomorg_stub.errors import ServiceError
from randomorg_stub.handlers import registry
from randomorg_stub.service import StubService

log = logging.getLogger(__name__)

INVOKE_PATH = "/json-rpc/2/invoke"


# ── Helpers ──────────────────────────────────────────────────────────


def _error_response(req_id: str | None, code: int, msg: str, status: int = 200) -> JSONResponse:
    """Build a JSON-RPC error response."""
    resp = JsonRpcResponse.fail(req_id, code, msg)
    return JSONResponse(resp.to_dict(), status_code=status)


# ── RPC endpoint ─────────────────────────────────────────────────────


async def rpc_endpoint(request: Request) -> JSONResponse:
    """Handle a JSON-RPC 2.0 POST to ``/json-rpc/2/invoke``."""
    service: StubService = request.app.state.service
    req_id: str | None = None

    try:
        body = await request.body()
        raw = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error_response(None, PARSE_ERROR, "Parse error")

    try:
        rpc_req = JsonRpcRequest.from_dict(raw)
        req_id = rpc_req.id
    except ValueError as exc:
        return _error_response(None, INVALID_REQUEST, str(exc))

    log.info("rpc ← %s(id=%s)", rpc_req.method, req_id)

    try:
        result = await registry.dispatch(rpc_req.method, rpc_req.params, service)
        resp = JsonRpcResponse.ok(req_id, result)
        return JSONResponse(resp.to_dict())
    except MethodNotFoundError as exc:
        return _error_response(req_id, exc.code, str(exc))
    except ServiceError as exc:
        log.info("rpc ✗ %s(id=%s): [%d] %s", rpc_req.method, req_id, exc.code, exc.message)
        return _error_response(req_id, exc.code, exc.message)
    except Exception as exc:
        log.exception("handler error for %s", rpc_req.method)
        return _error_response(req_id, INTERNAL_ERROR, f"Internal error: {exc}")


# ── App factory ──────────────────────────────────────────────────────


def create_app(service: StubService | None = None) -> Starlette:
    app = Starlette(
        debug=False,
        routes=[Route(INVOKE_PATH, rpc_endpoint, methods=["POST"])],
    )
    app.state.service = service or StubService()
    return app


# ── Runnable entrypoint ──────────────────────────────────────────────


def main() -> None:
    import uvicorn

    load_dotenv(os.path.join(Path.cwd(), ".env"))

    parser = argparse.ArgumentParser(description="RANDOM.ORG JSON-RPC emulator")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8100, help="Port to listen on")
    parser.add_argument(
        "--api-key",
        action="append",
        default=None,
        help="API key the emulator accepts; repeatable. Defaults to RANDOM_ORG_API_KEY, "
        "or a fresh key that is logged at startup.",
    )
    parser.add_argument(
        "--advisory-delay",
        type=int,
        default=1000,
        help="Advisory delay reported after each generation request, in milliseconds",
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    api_keys = args.api_key or [os.getenv("RANDOM_ORG_API_KEY") or str(uuid.uuid4())]
    for api_key in api_keys:
        log.info("accepting API key %s", api_key)

    service = StubService(api_keys, advisory_delay=timedelta(milliseconds=args.advisory_delay))
    uvicorn.run(create_app(service), host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
