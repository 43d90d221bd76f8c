"""In-memory state of the emulated RANDOM.ORG service.

* ``KeyAccount``  — status and quota of one API key.
* ``StubService`` — accounts, signer, stored signed results, advisory delay.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from randomorg_wire.convert import ApiKeyStatus

from randomorg_stub.errors import (
    BITS_EXHAUSTED,
    KEY_DOES_NOT_EXIST,
    KEY_NOT_RUNNING,
    REQUESTS_EXHAUSTED,
    SERIAL_NUMBER_UNKNOWN,
    ServiceError,
    malformed,
    missing,
)
from randomorg_stub.signing import Signer

log = logging.getLogger(__name__)

DEFAULT_BITS = 250_000
DEFAULT_REQUESTS = 1_000
DEVELOPER_LICENSE: dict[str, Any] = {
    "type": "developer",
    "text": "Random values licensed strictly for development and testing only",
    "infoUrl": None,
}


@dataclass(slots=True)
class KeyAccount:
    status: ApiKeyStatus = ApiKeyStatus.RUNNING
    bits_left: int = DEFAULT_BITS
    requests_left: int = DEFAULT_REQUESTS
    creation_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    total_bits: int = 0
    total_requests: int = 0

    def charge(self, bits: int) -> None:
        """Book one request of *bits* bits, or refuse it without booking."""
        if self.requests_left < 1:
            raise ServiceError(
                REQUESTS_EXHAUSTED,
                "The operation requires 1 request, but the API key only has 0 left",
            )
        if self.bits_left < bits:
            raise ServiceError(
                BITS_EXHAUSTED,
                f"The operation requires {bits} bits, "
                f"but the API key only has {self.bits_left} left",
            )
        self.requests_left -= 1
        self.bits_left -= bits
        self.total_requests += 1
        self.total_bits += bits


@dataclass(slots=True)
class StoredResult:
    api_key: str
    random: dict[str, Any]
    signature: bytes


class StubService:
    """State shared by all handlers of one emulator app.

    Parameters
    ----------
    api_keys : iterable of str
        Keys that exist, each with a fresh running account.
    advisory_delay : timedelta
        Reported as ``advisoryDelay`` after every generation request.
    signer : Signer, optional
        Signs random objects; a randomly keyed one by default.
    """

    def __init__(
        self,
        api_keys: Any = (),
        *,
        advisory_delay: timedelta = timedelta(0),
        signer: Signer | None = None,
        license: dict[str, Any] | None = None,
    ) -> None:
        self.accounts: dict[str, KeyAccount] = {}
        for api_key in api_keys:
            self.add_key(api_key)
        self.advisory_delay = advisory_delay
        self.signer = signer or Signer()
        self.license = dict(license or DEVELOPER_LICENSE)
        self._serial = 0
        self._results: dict[int, StoredResult] = {}

    # -- Accounts ------------------------------------------------------

    def add_key(self, api_key: str, **fields: Any) -> KeyAccount:
        account = KeyAccount(**fields)
        self.accounts[api_key] = account
        return account

    def account(self, params: dict[str, Any], running: bool = True) -> KeyAccount:
        """Look up the account of ``params["apiKey"]``."""
        if "apiKey" not in params:
            raise missing("apiKey")
        api_key = params["apiKey"]
        if not isinstance(api_key, str):
            raise malformed("apiKey")
        account = self.accounts.get(api_key)
        if account is None:
            raise ServiceError(KEY_DOES_NOT_EXIST, "The API key you specified does not exist")
        if running and account.status is not ApiKeyStatus.RUNNING:
            raise ServiceError(KEY_NOT_RUNNING, "The API key you specified is not running")
        return account

    @staticmethod
    def hash_api_key(api_key: str) -> bytes:
        return hashlib.sha512(api_key.encode("utf-8")).digest()

    # -- Signed results ------------------------------------------------

    def next_serial_number(self) -> int:
        self._serial += 1
        return self._serial

    def store(self, serial_number: int, api_key: str, random: dict[str, Any], signature: bytes) -> None:
        self._results[serial_number] = StoredResult(api_key, random, signature)
        log.debug("stored signed result #%d", serial_number)

    def stored(self, serial_number: int, api_key: str) -> StoredResult:
        stored = self._results.get(serial_number)
        if stored is None or stored.api_key != api_key:
            raise ServiceError(
                SERIAL_NUMBER_UNKNOWN,
                f"No signed result with serial number {serial_number} exists for this API key",
            )
        return stored
