"""Service errors raised by stub handlers, with RANDOM.ORG error codes."""

from __future__ import annotations

from typing import Any

from randomorg_wire.jsonrpc import INVALID_PARAMS

# RANDOM.ORG error codes
PARAMETER_MALFORMED = 200
PARAMETER_OUT_OF_RANGE = 202
MIN_GREATER_THAN_MAX = 300
DOMAIN_TOO_SMALL = 301
KEY_DOES_NOT_EXIST = 400
KEY_NOT_RUNNING = 401
REQUESTS_EXHAUSTED = 402
BITS_EXHAUSTED = 403
SERIAL_NUMBER_UNKNOWN = 420


class ServiceError(Exception):
    """A JSON-RPC error the emulated service answers with."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"[{code}] {message}")


def missing(name: str) -> ServiceError:
    return ServiceError(INVALID_PARAMS, f"Invalid params: missing parameter '{name}'")


def malformed(name: str) -> ServiceError:
    return ServiceError(PARAMETER_MALFORMED, f"Parameter '{name}' is malformed")


def out_of_range(name: str, low: Any, high: Any) -> ServiceError:
    return ServiceError(
        PARAMETER_OUT_OF_RANGE,
        f"Parameter '{name}' is out of range. Allowable values are [{low}, {high}]",
    )
