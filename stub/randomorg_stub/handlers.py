"""RANDOM.ORG method handlers.

All handlers are registered on the module-level ``registry`` which the
server imports.  Each generation method is written once as a builder
that checks its params and draws the values; ``@generation`` registers
it under both its plain and its signed method name.
"""

from __future__ import annotations

import logging
import math
import random as _random
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable

from randomorg_wire import convert

from randomorg_stub.dispatcher import Registry
from randomorg_stub.errors import (
    DOMAIN_TOO_SMALL,
    MIN_GREATER_THAN_MAX,
    PARAMETER_OUT_OF_RANGE,
    ServiceError,
    malformed,
    missing,
    out_of_range,
)
from randomorg_stub.service import StubService

log = logging.getLogger(__name__)

registry = Registry()

_rng = _random.SystemRandom()
_REQUIRED = object()

MAX_N = 10_000
INTEGER_LIMIT = 1_000_000_000
GAUSSIAN_LIMIT = 1_000_000
MAX_BLOB_BITS = 1_048_576
MAX_USER_DATA = 1_000
UUID_BITS = 122


# ── Param readers ────────────────────────────────────────────────────


def _get(params: dict[str, Any], name: str, default: Any = _REQUIRED) -> Any:
    if name in params:
        return params[name]
    if default is _REQUIRED:
        raise missing(name)
    return default


def _check_int(name: str, value: Any, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise malformed(name)
    if value < low or value > high:
        raise out_of_range(name, low, high)
    return value


def _int_param(params: dict[str, Any], name: str, low: int, high: int, default: Any = _REQUIRED) -> int:
    return _check_int(name, _get(params, name, default), low, high)


def _check_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise malformed(name)
    return value


def _bool_param(params: dict[str, Any], name: str, default: bool = True) -> bool:
    return _check_bool(name, _get(params, name, default))


def _number_param(params: dict[str, Any], name: str, limit: int) -> float:
    value = _get(params, name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise malformed(name)
    if value < -limit or value > limit:
        raise out_of_range(name, -limit, limit)
    return value


def _per_sequence(
    params: dict[str, Any], name: str, count: int, read: Callable[[str, Any], Any], default: Any = _REQUIRED
) -> list[Any]:
    """One value per sequence: either a scalar for all or an array of *count*."""
    value = _get(params, name, default)
    if isinstance(value, list):
        if len(value) != count:
            raise malformed(name)
        return [read(f"{name}[{i}]", v) for i, v in enumerate(value)]
    return [read(name, value)] * count


def _user_data(params: dict[str, Any]) -> str | None:
    value = params.get("userData")
    if value is None:
        return None
    if not isinstance(value, str):
        raise malformed("userData")
    if len(value) > MAX_USER_DATA:
        raise out_of_range("userData", 0, MAX_USER_DATA)
    return value


# ── Drawing values ───────────────────────────────────────────────────


def _bits(domain: int) -> int:
    """Bits of randomness in one value drawn from *domain* outcomes."""
    return max(1, math.ceil(math.log2(domain))) if domain > 1 else 1


def _draw(low: int, size: int, count: int, replacement: bool) -> list[int]:
    """Draw *count* integers from ``[low, low + size)``."""
    if replacement:
        return [low + secrets.randbelow(size) for _ in range(count)]
    if count > size:
        raise ServiceError(
            DOMAIN_TOO_SMALL,
            f"You requested {count} values without replacement but the domain "
            f"you specified contains only {size}",
        )
    picked: dict[int, None] = {}
    while len(picked) < count:
        picked[low + secrets.randbelow(size)] = None
    return list(picked)


def _number(value: Decimal | float) -> int | float:
    # The service writes integral numbers without a fraction.
    return convert.decimal_to_json(value)


# ── Generation ───────────────────────────────────────────────────────


@dataclass(slots=True)
class Generated:
    """Outcome of a builder: echoed params, values and bits consumed."""

    echo: dict[str, Any]
    data: list[Any]
    bits: int


Builder = Callable[[dict[str, Any]], Generated]


async def _respond(
    method: str, build: Builder, params: dict[str, Any], service: StubService, signed: bool
) -> dict[str, Any]:
    account = service.account(params)
    user_data = _user_data(params) if signed else None
    generated = build(params)
    account.charge(generated.bits)
    completion_time = convert.format_timestamp(datetime.now(timezone.utc))

    result: dict[str, Any]
    if signed:
        api_key = params["apiKey"]
        serial_number = service.next_serial_number()
        random = {
            "method": method,
            "hashedApiKey": convert.bytes_to_base64(service.hash_api_key(api_key)),
            **generated.echo,
            "data": generated.data,
            "license": dict(service.license),
            "userData": user_data,
            "completionTime": completion_time,
            "serialNumber": serial_number,
        }
        signature = service.signer.sign(random)
        service.store(serial_number, api_key, random, signature)
        result = {"random": random, "signature": convert.bytes_to_base64(signature)}
    else:
        result = {"random": {"data": generated.data, "completionTime": completion_time}}

    result.update(
        bitsUsed=generated.bits,
        bitsLeft=account.bits_left,
        requestsLeft=account.requests_left,
        advisoryDelay=convert.timedelta_to_milliseconds(service.advisory_delay),
    )
    return result


def generation(method: str, signed_method: str) -> Callable[[Builder], Builder]:
    """Register *build* under both the plain and the signed method name."""

    def decorator(build: Builder) -> Builder:
        async def plain(params: dict[str, Any], service: StubService) -> dict[str, Any]:
            return await _respond(method, build, params, service, signed=False)

        async def signed(params: dict[str, Any], service: StubService) -> dict[str, Any]:
            return await _respond(signed_method, build, params, service, signed=True)

        plain.__qualname__ = f"{build.__qualname__}[plain]"
        signed.__qualname__ = f"{build.__qualname__}[signed]"
        registry.handler(method)(plain)
        registry.handler(signed_method)(signed)
        return build

    return decorator


@generation("generateIntegers", "generateSignedIntegers")
def integers(params: dict[str, Any]) -> Generated:
    n = _int_param(params, "n", 1, MAX_N)
    low = _int_param(params, "min", -INTEGER_LIMIT, INTEGER_LIMIT)
    high = _int_param(params, "max", -INTEGER_LIMIT, INTEGER_LIMIT)
    replacement = _bool_param(params, "replacement")
    base = _int_param(params, "base", 10, 10, default=10)
    if low > high:
        raise ServiceError(MIN_GREATER_THAN_MAX, "Parameter 'min' is greater than parameter 'max'")
    size = high - low + 1
    return Generated(
        echo={"n": n, "min": low, "max": high, "replacement": replacement, "base": base},
        data=_draw(low, size, n, replacement),
        bits=n * _bits(size),
    )


@generation("generateIntegerSequences", "generateSignedIntegerSequences")
def integer_sequences(params: dict[str, Any]) -> Generated:
    n = _int_param(params, "n", 1, MAX_N)
    length = _per_sequence(params, "length", n, lambda k, v: _check_int(k, v, 1, MAX_N))
    low = _per_sequence(
        params, "min", n, lambda k, v: _check_int(k, v, -INTEGER_LIMIT, INTEGER_LIMIT)
    )
    high = _per_sequence(
        params, "max", n, lambda k, v: _check_int(k, v, -INTEGER_LIMIT, INTEGER_LIMIT)
    )
    replacement = _per_sequence(params, "replacement", n, _check_bool, default=True)
    _per_sequence(params, "base", n, lambda k, v: _check_int(k, v, 10, 10), default=10)
    if sum(length) > MAX_N:
        raise out_of_range("length", 1, MAX_N)

    data: list[list[int]] = []
    bits = 0
    for i in range(n):
        if low[i] > high[i]:
            raise ServiceError(
                MIN_GREATER_THAN_MAX, f"Parameter 'min[{i}]' is greater than parameter 'max[{i}]'"
            )
        size = high[i] - low[i] + 1
        data.append(_draw(low[i], size, length[i], replacement[i]))
        bits += length[i] * _bits(size)

    echo = {
        "n": n,
        "length": params["length"],
        "min": params["min"],
        "max": params["max"],
        "replacement": params.get("replacement", True),
        "base": params.get("base", 10),
    }
    return Generated(echo=echo, data=data, bits=bits)


@generation("generateDecimalFractions", "generateSignedDecimalFractions")
def decimal_fractions(params: dict[str, Any]) -> Generated:
    n = _int_param(params, "n", 1, MAX_N)
    places = _int_param(params, "decimalPlaces", 1, 20)
    replacement = _bool_param(params, "replacement")
    size = 10**places
    data = [_number(Decimal(k).scaleb(-places)) for k in _draw(0, size, n, replacement)]
    return Generated(
        echo={"n": n, "decimalPlaces": places, "replacement": replacement},
        data=data,
        bits=n * _bits(size),
    )


@generation("generateGaussians", "generateSignedGaussians")
def gaussians(params: dict[str, Any]) -> Generated:
    n = _int_param(params, "n", 1, MAX_N)
    mean = _number_param(params, "mean", GAUSSIAN_LIMIT)
    deviation = _number_param(params, "standardDeviation", GAUSSIAN_LIMIT)
    digits = _int_param(params, "significantDigits", 2, 20)
    data = [
        _number(Decimal(f"{_rng.gauss(mean, deviation):.{digits - 1}e}")) for _ in range(n)
    ]
    return Generated(
        echo={
            "n": n,
            "mean": mean,
            "standardDeviation": deviation,
            "significantDigits": digits,
        },
        data=data,
        bits=n * _bits(10**digits),
    )


@generation("generateStrings", "generateSignedStrings")
def strings(params: dict[str, Any]) -> Generated:
    n = _int_param(params, "n", 1, MAX_N)
    length = _int_param(params, "length", 1, 20)
    characters = _get(params, "characters")
    if not isinstance(characters, str):
        raise malformed("characters")
    if not 1 <= len(characters) <= 80:
        raise out_of_range("characters", 1, 80)
    replacement = _bool_param(params, "replacement")

    domain = len(set(characters)) ** length
    if not replacement and n > domain:
        raise ServiceError(
            DOMAIN_TOO_SMALL,
            f"You requested {n} values without replacement but the domain "
            f"you specified contains only {domain}",
        )
    data: list[str] = []
    seen: set[str] = set()
    while len(data) < n:
        value = "".join(secrets.choice(characters) for _ in range(length))
        if not replacement:
            if value in seen:
                continue
            seen.add(value)
        data.append(value)
    return Generated(
        echo={"n": n, "length": length, "characters": characters, "replacement": replacement},
        data=data,
        bits=n * length * _bits(len(characters)),
    )


@generation("generateUUIDs", "generateSignedUUIDs")
def uuids(params: dict[str, Any]) -> Generated:
    n = _int_param(params, "n", 1, 1_000)
    return Generated(
        echo={"n": n}, data=[str(uuid.uuid4()) for _ in range(n)], bits=n * UUID_BITS
    )


@generation("generateBlobs", "generateSignedBlobs")
def blobs(params: dict[str, Any]) -> Generated:
    n = _int_param(params, "n", 1, 100)
    size = _int_param(params, "size", 1, MAX_BLOB_BITS)
    if size % 8 != 0:
        raise ServiceError(PARAMETER_OUT_OF_RANGE, "Parameter 'size' must be divisible by 8")
    if n * size > MAX_BLOB_BITS:
        raise out_of_range("size", 1, MAX_BLOB_BITS // n)
    blob_format = _get(params, "format", "base64")
    if blob_format not in ("base64", "hex"):
        raise malformed("format")
    encode = convert.bytes_to_base64 if blob_format == "base64" else bytes.hex
    return Generated(
        echo={"n": n, "size": size, "format": blob_format},
        data=[encode(secrets.token_bytes(size // 8)) for _ in range(n)],
        bits=n * size,
    )


# ── Usage, stored results and verification ───────────────────────────


@registry.handler("getUsage")
async def get_usage(params: dict[str, Any], service: StubService) -> dict[str, Any]:
    account = service.account(params, running=False)
    return {
        "status": account.status.value,
        "creationTime": convert.format_timestamp(account.creation_time),
        "bitsLeft": account.bits_left,
        "requestsLeft": account.requests_left,
        "totalBits": account.total_bits,
        "totalRequests": account.total_requests,
    }


@registry.handler("getResult")
async def get_result(params: dict[str, Any], service: StubService) -> dict[str, Any]:
    service.account(params, running=False)
    serial_number = _int_param(params, "serialNumber", 0, 2**63 - 1)
    stored = service.stored(serial_number, params["apiKey"])
    return {"random": stored.random, "signature": convert.bytes_to_base64(stored.signature)}


@registry.handler("verifySignature")
async def verify_signature(params: dict[str, Any], service: StubService) -> dict[str, Any]:
    random = _get(params, "random")
    if not isinstance(random, dict):
        raise malformed("random")
    try:
        signature = convert.base64_to_bytes(_get(params, "signature"))
    except ValueError:
        raise malformed("signature") from None
    authenticity = service.signer.verify(random, signature)
    log.debug("signature check for serial %s: %s", random.get("serialNumber"), authenticity)
    return {"authenticity": authenticity}
