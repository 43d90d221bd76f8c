"""Public result and parameter types.

Plain and signed generation share one result schema,
``GenerationResult``; a signed result carries a ``SignedRandom`` and a
signature.  The parameter classes form a closed set, one per
generation kind, that ``RandomOrgClient.verify_signature`` dispatches on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Generic, TypeVar, Union

import httpx
from randomorg_wire.convert import ApiKeyStatus

T = TypeVar("T")


# ── Usage ────────────────────────────────────────────────────────────
@dataclass(slots=True, frozen=True)
class RandomUsage:
    """Usage counters of the API key.

    ``creation_time``, ``total_bits`` and ``total_requests`` are only
    present when the service reports them.
    """

    status: ApiKeyStatus
    bits_left: int
    requests_left: int
    creation_time: datetime | None = None
    total_bits: int | None = None
    total_requests: int | None = None


# ── Parameters ───────────────────────────────────────────────────────
@dataclass(slots=True)
class IntegerParameters:
    minimum: int = 0
    maximum: int = 0
    replacement: bool = True


@dataclass(slots=True)
class IntegerSequenceParameters:
    """Per-sequence boundaries; one entry per sub-sequence of the data."""

    minimums: list[int] | None = None
    maximums: list[int] | None = None
    replacements: list[bool] | None = None


@dataclass(slots=True)
class DecimalFractionParameters:
    decimal_places: int = 0
    replacement: bool = True


@dataclass(slots=True)
class GaussianParameters:
    mean: Decimal = Decimal(0)
    standard_deviation: Decimal = Decimal(0)
    significant_digits: int = 0


@dataclass(slots=True)
class StringParameters:
    length: int = 0
    characters: str | None = None
    replacement: bool = True


@dataclass(slots=True)
class UuidParameters:
    pass


@dataclass(slots=True)
class BlobParameters:
    """``size`` is the size of each blob in bytes; the wire carries bits."""

    size: int = 0


RandomParameters = Union[
    IntegerParameters,
    IntegerSequenceParameters,
    DecimalFractionParameters,
    GaussianParameters,
    StringParameters,
    UuidParameters,
    BlobParameters,
]


# ── Random objects ───────────────────────────────────────────────────
@dataclass(slots=True)
class RandomLicense:
    """License terms under which signed values may be used."""

    type: str | None = None
    text: str | None = None
    info_url: httpx.URL | None = None


@dataclass(slots=True)
class Random(Generic[T]):
    """Generated values and the time the service completed the request."""

    data: list[T] | None
    completion_time: datetime


@dataclass(slots=True)
class SignedRandom(Random[T]):
    """Signed values plus everything the signature covers.

    Instances returned by the client can be passed back unchanged to
    ``RandomOrgClient.verify_signature``.
    """

    parameters: Any = None
    api_key_hash: bytes = b""
    serial_number: int = 0
    user_data: str | None = None
    license: RandomLicense = field(default_factory=RandomLicense)


# ── Results ──────────────────────────────────────────────────────────
@dataclass(slots=True, frozen=True)
class GenerationResult(Generic[T]):
    """Result of one generation call.

    ``advisory_delay`` is how long the service asks the client to wait
    before the next generation request.  ``signature`` is set for the
    ``generate_signed_*`` methods and ``get_result`` only.
    """

    random: Random[T]
    bits_used: int
    bits_left: int
    requests_left: int
    advisory_delay: timedelta = timedelta(0)
    signature: bytes | None = None

    @property
    def signed(self) -> bool:
        return self.signature is not None

    @property
    def data(self) -> list[T]:
        return self.random.data or []
