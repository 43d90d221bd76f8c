"""Request dispatcher — one JSON-RPC round trip per call.

* ``invoke(method, params)`` → parsed result DTO of *method*

The dispatcher owns everything between the façade and the wire:
serialisation, HTTP headers, response validation, the id → method
binding used to pick the result contract, and the optional advisory
delay pacing.  It never retries.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from email.utils import formatdate
from typing import Any, Iterator

import anyio
import httpx
from randomorg_wire.jsonrpc import JsonRpcRequest, JsonRpcResponse

from randomorg.contracts import RandomMethod, ResultParser, build_contracts
from randomorg.errors import (
    RandomOrgFormatError,
    RandomOrgServiceError,
    RandomOrgTransportError,
)

log = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.random.org/json-rpc/2/invoke"
DEFAULT_USER_AGENT = "randomorg-python/0.1.0"
MEDIA_TYPE = "application/json"
CHARSET = "utf-8"


class ResponseBindings:
    """Request id → method, held only while that request is in flight.

    The binding tells the dispatcher which result contract applies to a
    response; it is removed on every exit path, cancellation included.
    """

    def __init__(self) -> None:
        self._bindings: dict[str, RandomMethod] = {}

    @contextmanager
    def bind(self, request_id: str, method: RandomMethod) -> Iterator[None]:
        self._bindings[request_id] = method
        try:
            yield
        finally:
            self._bindings.pop(request_id, None)

    def resolve(self, request_id: Any) -> RandomMethod | None:
        if not isinstance(request_id, str):
            return None
        return self._bindings.get(request_id)

    def __len__(self) -> int:
        return len(self._bindings)


def _check_content_type(resp: httpx.Response) -> None:
    """Accept ``application/json`` with no charset or a UTF-8 charset."""
    header = resp.headers.get("content-type")
    if not header:
        raise RandomOrgTransportError(
            "response has no Content-Type", status_code=resp.status_code
        )
    if header.partition(";")[0].strip().lower() != MEDIA_TYPE:
        raise RandomOrgTransportError(
            f"unexpected Content-Type {header!r}", status_code=resp.status_code
        )
    charset = resp.charset_encoding
    if charset is not None and charset.lower().replace("_", "-") not in (CHARSET, "utf8"):
        raise RandomOrgTransportError(
            f"unexpected charset in Content-Type {header!r}",
            status_code=resp.status_code,
        )


class RequestDispatcher:
    """Sends RANDOM.ORG requests and validates their responses.

    Parameters
    ----------
    api_key : str
        Injected as ``apiKey`` into every request that takes one.
    http_client : httpx.AsyncClient
        Transport; owned by the caller.
    endpoint : str
        RANDOM.ORG JSON-RPC endpoint URL.
    user_agent : str
        Value of the ``User-Agent`` header.
    pacing : bool
        Serialise calls and wait out the service's advisory delay before
        each generation request.
    """

    def __init__(
        self,
        api_key: str,
        *,
        http_client: httpx.AsyncClient,
        endpoint: str = DEFAULT_ENDPOINT,
        user_agent: str = DEFAULT_USER_AGENT,
        pacing: bool = True,
    ) -> None:
        self._api_key = api_key
        self._client = http_client
        self.endpoint = endpoint
        self.user_agent = user_agent
        self.pacing = pacing
        self._contracts: dict[RandomMethod, ResultParser] = build_contracts()
        self._bindings = ResponseBindings()
        self._lock = anyio.Lock()
        self._advisory_time: datetime | None = None

    # -- Pacing --------------------------------------------------------

    @property
    def advisory_time(self) -> datetime | None:
        """Earliest UTC time the service advised for the next generation call."""
        return self._advisory_time

    async def _wait_advisory(self) -> None:
        if self._advisory_time is None:
            return
        delay = (self._advisory_time - datetime.now(timezone.utc)).total_seconds()
        if delay > 0:
            log.debug("waiting %.3fs for advisory delay", delay)
            await anyio.sleep(delay)

    # -- Invocation ----------------------------------------------------

    async def invoke(self, method: RandomMethod, params: dict[str, Any]) -> Any:
        """Call *method* with *params* and return its parsed result DTO.

        ``apiKey`` is added to *params* for every method that takes one.
        Raises ``RandomOrgTransportError``,
        ``RandomOrgFormatError`` or ``RandomOrgServiceError``.
        """
        if not self.pacing:
            return await self._round_trip(method, params)

        async with self._lock:
            if method.generates:
                await self._wait_advisory()
            result = await self._round_trip(method, params)
            if method.generates:
                self._advisory_time = (
                    result.random.completion_time + result.advisory_delay
                )
            return result

    def _build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": f"{MEDIA_TYPE}; charset={CHARSET}",
            "Accept": MEDIA_TYPE,
            "Accept-Charset": CHARSET,
            "User-Agent": self.user_agent,
            "Date": formatdate(usegmt=True),
        }

    async def _round_trip(self, method: RandomMethod, params: dict[str, Any]) -> Any:
        if method.authenticated:
            params = {"apiKey": self._api_key, **params}
        req = JsonRpcRequest(method=method.value, params=params)
        body = json.dumps(req.to_dict(), ensure_ascii=False).encode(CHARSET)

        log.debug("rpc → %s(id=%s)", method.value, req.id)

        with self._bindings.bind(req.id, method):
            try:
                resp = await self._client.post(
                    self.endpoint, content=body, headers=self._build_headers()
                )
            except httpx.TransportError as exc:
                raise RandomOrgTransportError(
                    f"{type(exc).__name__}: {exc}"
                ) from exc
            result = self._read_response(resp, req)

        log.debug("rpc ← %s(id=%s)", method.value, req.id)
        return result

    def _read_response(self, resp: httpx.Response, req: JsonRpcRequest) -> Any:
        if resp.status_code != httpx.codes.OK:
            raise RandomOrgTransportError(
                "unexpected status code", status_code=resp.status_code, body=resp.text
            )
        _check_content_type(resp)

        try:
            raw = json.loads(resp.content, parse_float=Decimal)
        except (ValueError, UnicodeDecodeError) as exc:
            raise RandomOrgFormatError("response body is not valid JSON") from exc
        if isinstance(raw, list):
            raise RandomOrgFormatError("batch response received for a single request")

        try:
            response = JsonRpcResponse.from_dict(raw)
        except ValueError as exc:
            raise RandomOrgFormatError(f"invalid JSON-RPC response: {exc}") from exc

        method = self._bindings.resolve(response.id)
        if method is None or response.id != req.id:
            raise RandomOrgFormatError(
                f"response id {response.id!r} does not match request id {req.id!r}"
            )

        if not response.success:
            raise RandomOrgServiceError(method.value, response.error)
        if response.result is None:
            raise RandomOrgFormatError(f"{method.value}: response carries no result")

        try:
            return self._contracts[method](response.result)
        except (KeyError, TypeError, ValueError) as exc:
            raise RandomOrgFormatError(
                f"{method.value}: result does not match the contract: {exc!r}"
            ) from exc
