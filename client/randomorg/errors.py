"""Error types raised by the RANDOM.ORG client.

* ``RandomOrgParameterError`` — local input validation, before any I/O.
* ``RandomOrgTransportError`` — HTTP status or content type is wrong.
* ``RandomOrgFormatError``    — the body is not the JSON-RPC response we expect.
* ``RandomOrgServiceError``   — the service answered with a JSON-RPC error.
"""

from __future__ import annotations

from typing import Any

from randomorg_wire.jsonrpc import JsonRpcError


class RandomOrgError(Exception):
    """Base class for all client errors."""


# ── Local validation ─────────────────────────────────────────────────


class RandomOrgParameterError(RandomOrgError, ValueError):
    """An argument was rejected before anything was sent."""

    def __init__(self, parameter: str, message: str) -> None:
        self.parameter = parameter
        super().__init__(f"{parameter}: {message}")


class RandomOrgRangeError(RandomOrgParameterError):
    """An argument lies outside the range the service accepts."""

    def __init__(self, parameter: str, value: Any, message: str) -> None:
        self.value = value
        super().__init__(parameter, f"{message} (got {value!r})")


class RandomOrgShapeError(RandomOrgParameterError):
    """An argument is missing, has a ``None`` element, or arrays disagree in length."""


# ── Remote failures ──────────────────────────────────────────────────


class RandomOrgTransportError(RandomOrgError):
    """The HTTP exchange itself failed.

    ``status_code`` is the status of the response, or ``None`` when no
    response was received at all (connection refused, timeout, …).
    """

    def __init__(
        self, message: str, *, status_code: int | None = None, body: str | None = None
    ) -> None:
        self.status_code = status_code
        self.body = body
        if status_code is not None:
            message = f"HTTP {status_code}: {message}"
        super().__init__(message)


class RandomOrgFormatError(RandomOrgError):
    """The response body is not a usable JSON-RPC response."""


class RandomOrgServiceError(RandomOrgError):
    """Raised when RANDOM.ORG returns a JSON-RPC error."""

    def __init__(self, method: str, error: JsonRpcError) -> None:
        self.method = method
        self.error = error
        super().__init__(f"{method}: [{error.code}] {error.message}")

    @property
    def code(self) -> int:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message
