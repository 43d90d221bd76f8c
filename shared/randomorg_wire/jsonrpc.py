"""JSON-RPC 2.0 envelope models.

Pure data — no I/O, no RANDOM.ORG semantics.  The client serialises
requests with these and validates the response envelope; the stub
service parses requests and builds responses with the same types.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

# ── Standard error codes (JSON-RPC 2.0 §5.1) ────────────────────────
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

JSONRPC_VERSION = "2.0"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ── Models ───────────────────────────────────────────────────────────
@dataclass(slots=True)
class JsonRpcError:
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            d["data"] = self.data
        return d

    @classmethod
    def from_dict(cls, raw: Any) -> "JsonRpcError":
        """Parse an error member — raises ``ValueError`` on bad input."""
        if not isinstance(raw, dict):
            raise ValueError("error must be a JSON object")
        code = raw.get("code")
        if not _is_int(code):
            raise ValueError("missing or invalid 'code' field")
        message = raw.get("message")
        if not isinstance(message, str):
            raise ValueError("missing or invalid 'message' field")
        return cls(code=code, message=message, data=raw.get("data"))


@dataclass(slots=True)
class JsonRpcRequest:
    """JSON-RPC 2.0 request.

    ``id`` is a fresh UUID when not supplied.  Notifications (no ``id``)
    are not part of the RANDOM.ORG API and are not supported.
    """

    method: str
    params: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    jsonrpc: str = JSONRPC_VERSION

    # -- Convenience ---------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "JsonRpcRequest":
        """Parse a raw dict into a request — raises ``ValueError`` on bad input."""
        if not isinstance(raw, dict):
            raise ValueError("request must be a JSON object")
        if raw.get("jsonrpc") != JSONRPC_VERSION:
            raise ValueError("missing or invalid 'jsonrpc' field")
        method = raw.get("method")
        if not isinstance(method, str) or not method:
            raise ValueError("missing or invalid 'method' field")
        params = raw.get("params", {})
        if not isinstance(params, dict):
            raise ValueError("'params' must be a JSON object")
        req_id = raw.get("id")
        if req_id is None:
            raise ValueError("missing 'id' field")
        return cls(method=method, params=params, id=req_id)


@dataclass(slots=True)
class JsonRpcResponse:
    """JSON-RPC 2.0 response: either ``result`` or ``error`` is meaningful."""

    id: Any
    result: Any = None
    error: JsonRpcError | None = None
    jsonrpc: str = JSONRPC_VERSION

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.error is not None:
            d["error"] = self.error.to_dict()
        else:
            d["result"] = self.result
        d["id"] = self.id
        return d

    @classmethod
    def from_dict(cls, raw: Any) -> "JsonRpcResponse":
        """Parse a single response object — raises ``ValueError`` on bad input.

        A ``null`` result is accepted here; whether a result is required
        is the caller's decision.
        """
        if not isinstance(raw, dict):
            raise ValueError("response must be a JSON object")
        if raw.get("jsonrpc") != JSONRPC_VERSION:
            raise ValueError("missing or invalid 'jsonrpc' field")
        if "id" not in raw:
            raise ValueError("missing 'id' field")
        has_error = raw.get("error") is not None
        if has_error and raw.get("result") is not None:
            raise ValueError("response carries both 'result' and 'error'")
        if has_error:
            return cls(id=raw["id"], error=JsonRpcError.from_dict(raw["error"]))
        if "result" not in raw:
            raise ValueError("response carries neither 'result' nor 'error'")
        return cls(id=raw["id"], result=raw["result"])

    # -- Factories -----------------------------------------------------
    @classmethod
    def ok(cls, req_id: Any, result: Any) -> "JsonRpcResponse":
        return cls(id=req_id, result=result)

    @classmethod
    def fail(
        cls, req_id: Any, code: int, message: str, data: Any = None
    ) -> "JsonRpcResponse":
        return cls(id=req_id, error=JsonRpcError(code=code, message=message, data=data))
