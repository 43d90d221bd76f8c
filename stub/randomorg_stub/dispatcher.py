"""Handler table of the emulator.

RANDOM.ORG method names map to async handlers taking the request params
and the emulated service.  Generation handlers are registered in pairs
by ``handlers.generation``; everything else uses ``@registry.handler``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterator

from randomorg_wire.jsonrpc import METHOD_NOT_FOUND

if TYPE_CHECKING:
    from randomorg_stub.service import StubService

log = logging.getLogger(__name__)

HandlerFn = Callable[[dict[str, Any], "StubService"], Awaitable[Any]]


class MethodNotFoundError(Exception):
    """The service has no method of that name."""

    def __init__(self, method: str) -> None:
        self.method = method
        self.code = METHOD_NOT_FOUND
        super().__init__(f"Method not found: {method}")


class Registry:
    """RANDOM.ORG method name → handler.

    Registering a name twice is a programming error and raises
    ``ValueError``; the plain and signed variants of a generation method
    are two distinct names.
    """

    def __init__(self) -> None:
        self._table: dict[str, HandlerFn] = {}

    def __contains__(self, method: object) -> bool:
        return method in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    @property
    def methods(self) -> list[str]:
        return sorted(self._table)

    def handler(self, method: str) -> Callable[[HandlerFn], HandlerFn]:
        """Register the decorated coroutine function as *method*."""

        def register(fn: HandlerFn) -> HandlerFn:
            if method in self._table:
                raise ValueError(f"method {method!r} is already registered")
            self._table[method] = fn
            log.debug("registered %s → %s", method, fn.__qualname__)
            return fn

        return register

    async def dispatch(self, method: str, params: dict[str, Any], service: StubService) -> Any:
        try:
            fn = self._table[method]
        except KeyError:
            raise MethodNotFoundError(method) from None
        return await fn(params, service)
