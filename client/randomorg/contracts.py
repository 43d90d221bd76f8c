"""RANDOM.ORG method table and result contracts.

Each supported method has exactly one result parser.  The dispatcher
builds the ``RandomMethod → parser`` table once (``build_contracts``) and
picks the parser from the method bound to the response id, so the shape
of a ``result`` member is always known before it is read.

Parsers produce the wire DTOs below.  They raise ``ValueError``,
``KeyError`` or ``TypeError`` on anything that does not match the
contract; the dispatcher reports those as ``RandomOrgFormatError``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from functools import partial
from typing import Any, Callable

from randomorg_wire import convert


class RandomMethod(str, Enum):
    """Every RANDOM.ORG method the client speaks."""

    GET_USAGE = "getUsage"
    GENERATE_INTEGERS = "generateIntegers"
    GENERATE_INTEGER_SEQUENCES = "generateIntegerSequences"
    GENERATE_DECIMAL_FRACTIONS = "generateDecimalFractions"
    GENERATE_GAUSSIANS = "generateGaussians"
    GENERATE_STRINGS = "generateStrings"
    GENERATE_UUIDS = "generateUUIDs"
    GENERATE_BLOBS = "generateBlobs"
    GENERATE_SIGNED_INTEGERS = "generateSignedIntegers"
    GENERATE_SIGNED_INTEGER_SEQUENCES = "generateSignedIntegerSequences"
    GENERATE_SIGNED_DECIMAL_FRACTIONS = "generateSignedDecimalFractions"
    GENERATE_SIGNED_GAUSSIANS = "generateSignedGaussians"
    GENERATE_SIGNED_STRINGS = "generateSignedStrings"
    GENERATE_SIGNED_UUIDS = "generateSignedUUIDs"
    GENERATE_SIGNED_BLOBS = "generateSignedBlobs"
    GET_RESULT = "getResult"
    VERIFY_SIGNATURE = "verifySignature"

    @property
    def generates(self) -> bool:
        """True for methods whose result carries an advisory delay."""
        return self in GENERATION_METHODS

    @property
    def authenticated(self) -> bool:
        """True for methods that take an ``apiKey`` parameter."""
        return self is not RandomMethod.VERIFY_SIGNATURE


class ValueKind(Enum):
    """The seven kinds of generated values."""

    INTEGER = "integer"
    INTEGER_SEQUENCE = "integer_sequence"
    DECIMAL_FRACTION = "decimal_fraction"
    GAUSSIAN = "gaussian"
    STRING = "string"
    UUID = "uuid"
    BLOB = "blob"


def _decode_integer_sequence(value: Any) -> list[int]:
    if not isinstance(value, list):
        raise TypeError("integer sequence must be a JSON array")
    return [convert.json_to_int(v) for v in value]


def _decode_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError("expected a JSON string")
    return value


def _decode_uuid(value: Any) -> uuid.UUID:
    if not isinstance(value, str):
        raise TypeError("UUID must be a JSON string")
    return uuid.UUID(value)


VALUE_DECODERS: dict[ValueKind, Callable[[Any], Any]] = {
    ValueKind.INTEGER: convert.json_to_int,
    ValueKind.INTEGER_SEQUENCE: _decode_integer_sequence,
    ValueKind.DECIMAL_FRACTION: convert.json_to_decimal,
    ValueKind.GAUSSIAN: convert.json_to_decimal,
    ValueKind.STRING: _decode_string,
    ValueKind.UUID: _decode_uuid,
    ValueKind.BLOB: convert.base64_to_bytes,
}

# (value kind, signed) per generation method
GENERATION_METHODS: dict[RandomMethod, tuple[ValueKind, bool]] = {
    RandomMethod.GENERATE_INTEGERS: (ValueKind.INTEGER, False),
    RandomMethod.GENERATE_INTEGER_SEQUENCES: (ValueKind.INTEGER_SEQUENCE, False),
    RandomMethod.GENERATE_DECIMAL_FRACTIONS: (ValueKind.DECIMAL_FRACTION, False),
    RandomMethod.GENERATE_GAUSSIANS: (ValueKind.GAUSSIAN, False),
    RandomMethod.GENERATE_STRINGS: (ValueKind.STRING, False),
    RandomMethod.GENERATE_UUIDS: (ValueKind.UUID, False),
    RandomMethod.GENERATE_BLOBS: (ValueKind.BLOB, False),
    RandomMethod.GENERATE_SIGNED_INTEGERS: (ValueKind.INTEGER, True),
    RandomMethod.GENERATE_SIGNED_INTEGER_SEQUENCES: (ValueKind.INTEGER_SEQUENCE, True),
    RandomMethod.GENERATE_SIGNED_DECIMAL_FRACTIONS: (ValueKind.DECIMAL_FRACTION, True),
    RandomMethod.GENERATE_SIGNED_GAUSSIANS: (ValueKind.GAUSSIAN, True),
    RandomMethod.GENERATE_SIGNED_STRINGS: (ValueKind.STRING, True),
    RandomMethod.GENERATE_SIGNED_UUIDS: (ValueKind.UUID, True),
    RandomMethod.GENERATE_SIGNED_BLOBS: (ValueKind.BLOB, True),
}

SIGNED_METHODS: dict[ValueKind, RandomMethod] = {
    kind: method for method, (kind, signed) in GENERATION_METHODS.items() if signed
}


# ── Wire DTOs ────────────────────────────────────────────────────────
@dataclass(slots=True)
class RpcUsage:
    status: convert.ApiKeyStatus
    bits_left: int
    requests_left: int
    creation_time: datetime | None = None
    total_bits: int | None = None
    total_requests: int | None = None


@dataclass(slots=True)
class RpcLicense:
    type: str
    text: str | None = None
    info_url: str | None = None


@dataclass(slots=True)
class RpcRandom:
    data: list[Any]
    completion_time: datetime


@dataclass(slots=True)
class RpcSignedRandom(RpcRandom):
    """A signed random object; ``echo`` holds the method-specific members
    (``n``, ``min``, ``size``, …) exactly as received."""

    method: str = ""
    hashed_api_key: bytes = b""
    serial_number: int = 0
    user_data: str | None = None
    license: RpcLicense | None = None
    echo: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class RpcGenerationResult:
    kind: ValueKind
    random: RpcRandom
    bits_used: int
    bits_left: int
    requests_left: int
    advisory_delay: timedelta
    signature: bytes | None = None


@dataclass(slots=True)
class RpcVerifyResult:
    authenticity: bool


# Members of a signed random object that are not method parameters.
SIGNED_COMMON_MEMBERS = frozenset(
    {
        "method",
        "hashedApiKey",
        "data",
        "license",
        "userData",
        "completionTime",
        "serialNumber",
    }
)


# ── Parsers ──────────────────────────────────────────────────────────


def _object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"{what} must be a JSON object")
    return value


def _optional_str(raw: dict[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string")
    return value


def parse_usage(result: Any) -> RpcUsage:
    raw = _object(result, "getUsage result")
    creation_time = raw.get("creationTime")
    total_bits = raw.get("totalBits")
    total_requests = raw.get("totalRequests")
    return RpcUsage(
        status=convert.parse_api_key_status(raw["status"]),
        bits_left=convert.json_to_int(raw["bitsLeft"]),
        requests_left=convert.json_to_int(raw["requestsLeft"]),
        creation_time=None if creation_time is None else convert.parse_timestamp(creation_time),
        total_bits=None if total_bits is None else convert.json_to_int(total_bits),
        total_requests=None if total_requests is None else convert.json_to_int(total_requests),
    )


def _parse_data(raw: dict[str, Any], kind: ValueKind) -> list[Any]:
    data = raw["data"]
    if not isinstance(data, list):
        raise TypeError("'data' must be a JSON array")
    decode = VALUE_DECODERS[kind]
    return [decode(v) for v in data]


def parse_license(value: Any) -> RpcLicense:
    raw = _object(value, "license")
    license_type = raw["type"]
    if not isinstance(license_type, str):
        raise TypeError("license 'type' must be a string")
    info_url = _optional_str(raw, "infoUrl")
    convert.parse_url(info_url)
    return RpcLicense(type=license_type, text=_optional_str(raw, "text"), info_url=info_url)


def parse_random(value: Any, kind: ValueKind) -> RpcRandom:
    raw = _object(value, "random")
    return RpcRandom(
        data=_parse_data(raw, kind),
        completion_time=convert.parse_timestamp(raw["completionTime"]),
    )


def parse_signed_random(value: Any, kind: ValueKind) -> RpcSignedRandom:
    raw = _object(value, "random")
    method = raw["method"]
    if not isinstance(method, str):
        raise TypeError("'method' must be a string")
    return RpcSignedRandom(
        data=_parse_data(raw, kind),
        completion_time=convert.parse_timestamp(raw["completionTime"]),
        method=method,
        hashed_api_key=convert.base64_to_bytes(raw["hashedApiKey"]),
        serial_number=convert.json_to_int(raw["serialNumber"]),
        user_data=_optional_str(raw, "userData"),
        license=parse_license(raw["license"]),
        echo={k: v for k, v in raw.items() if k not in SIGNED_COMMON_MEMBERS},
    )


def _counter(raw: dict[str, Any], key: str, required: bool) -> int:
    if not required and raw.get(key) is None:
        return 0
    return convert.json_to_int(raw[key])


def parse_generation(
    result: Any, kind: ValueKind, signed: bool, counters_required: bool = True
) -> RpcGenerationResult:
    raw = _object(result, "generation result")
    if signed:
        random: RpcRandom = parse_signed_random(raw["random"], kind)
        signature = convert.base64_to_bytes(raw["signature"])
    else:
        random = parse_random(raw["random"], kind)
        signature = None
    return RpcGenerationResult(
        kind=kind,
        random=random,
        bits_used=_counter(raw, "bitsUsed", counters_required),
        bits_left=_counter(raw, "bitsLeft", counters_required),
        requests_left=_counter(raw, "requestsLeft", counters_required),
        advisory_delay=convert.milliseconds_to_timedelta(
            _counter(raw, "advisoryDelay", counters_required)
        ),
        signature=signature,
    )


def parse_stored_result(result: Any) -> RpcGenerationResult:
    """``getResult`` replays a signed result; its kind comes from the echoed method."""
    raw = _object(result, "getResult result")
    method_name = _object(raw["random"], "random")["method"]
    try:
        kind, signed = GENERATION_METHODS[RandomMethod(method_name)]
    except (ValueError, KeyError):
        raise ValueError(f"unsupported signed method {method_name!r}") from None
    if not signed:
        raise ValueError(f"method {method_name!r} is not a signed method")
    return parse_generation(raw, kind, signed=True, counters_required=False)


def parse_verify(result: Any) -> RpcVerifyResult:
    raw = _object(result, "verifySignature result")
    authenticity = raw["authenticity"]
    if not isinstance(authenticity, bool):
        raise TypeError("'authenticity' must be a boolean")
    return RpcVerifyResult(authenticity=authenticity)


ResultParser = Callable[[Any], Any]


def build_contracts() -> dict[RandomMethod, ResultParser]:
    """Return the result parser for every method in ``RandomMethod``."""
    contracts: dict[RandomMethod, ResultParser] = {
        RandomMethod.GET_USAGE: parse_usage,
        RandomMethod.GET_RESULT: parse_stored_result,
        RandomMethod.VERIFY_SIGNATURE: parse_verify,
    }
    for method, (kind, signed) in GENERATION_METHODS.items():
        contracts[method] = partial(parse_generation, kind=kind, signed=signed)
    return contracts
