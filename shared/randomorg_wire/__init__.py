"""randomorg_wire — JSON-RPC 2.0 envelope models and RANDOM.ORG wire converters."""

from randomorg_wire.convert import ApiKeyStatus
from randomorg_wire.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JSONRPC_VERSION,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
)

__all__ = [
    "ApiKeyStatus",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcError",
    "JSONRPC_VERSION",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
]
