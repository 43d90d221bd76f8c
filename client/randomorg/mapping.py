"""Projection between wire DTOs and the public models.

``to_*`` functions turn parsed results into public objects.
``signed_random_to_wire`` goes the other way for signature
verification: it rebuilds the exact random object the service signed,
choosing the method-specific members from the parameter type.
"""

from __future__ import annotations

from typing import Any, Callable

from randomorg_wire import convert

from randomorg.contracts import (
    SIGNED_METHODS,
    RpcGenerationResult,
    RpcLicense,
    RpcSignedRandom,
    RpcUsage,
    ValueKind,
)
from randomorg.errors import RandomOrgParameterError, RandomOrgShapeError
from randomorg.models import (
    BlobParameters,
    DecimalFractionParameters,
    GaussianParameters,
    GenerationResult,
    IntegerParameters,
    IntegerSequenceParameters,
    Random,
    RandomLicense,
    RandomParameters,
    RandomUsage,
    SignedRandom,
    StringParameters,
    UuidParameters,
)

# Integers are always requested and echoed in base 10.
DECIMAL_BASE = 10
BLOB_FORMAT = "base64"
BITS_PER_BYTE = 8


# ── Wire → public ────────────────────────────────────────────────────


def to_usage(dto: RpcUsage) -> RandomUsage:
    return RandomUsage(
        status=dto.status,
        bits_left=dto.bits_left,
        requests_left=dto.requests_left,
        creation_time=dto.creation_time,
        total_bits=dto.total_bits,
        total_requests=dto.total_requests,
    )


def to_license(dto: RpcLicense) -> RandomLicense:
    return RandomLicense(
        type=dto.type, text=dto.text, info_url=convert.parse_url(dto.info_url)
    )


def _bool(value: Any, default: bool = True) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise TypeError("'replacement' must be a boolean")
    return value


def _per_sequence(value: Any, count: int, read: Callable[[Any], Any]) -> list[Any]:
    # The service accepts a scalar for all sequences or one value each.
    if isinstance(value, list):
        return [read(v) for v in value]
    return [read(value)] * count


def _read_parameters(kind: ValueKind, echo: dict[str, Any]) -> RandomParameters:
    if kind is ValueKind.INTEGER:
        return IntegerParameters(
            minimum=convert.json_to_int(echo["min"]),
            maximum=convert.json_to_int(echo["max"]),
            replacement=_bool(echo.get("replacement")),
        )
    if kind is ValueKind.INTEGER_SEQUENCE:
        count = convert.json_to_int(echo["n"])
        return IntegerSequenceParameters(
            minimums=_per_sequence(echo["min"], count, convert.json_to_int),
            maximums=_per_sequence(echo["max"], count, convert.json_to_int),
            replacements=_per_sequence(echo.get("replacement"), count, _bool),
        )
    if kind is ValueKind.DECIMAL_FRACTION:
        return DecimalFractionParameters(
            decimal_places=convert.json_to_int(echo["decimalPlaces"]),
            replacement=_bool(echo.get("replacement")),
        )
    if kind is ValueKind.GAUSSIAN:
        return GaussianParameters(
            mean=convert.json_to_decimal(echo["mean"]),
            standard_deviation=convert.json_to_decimal(echo["standardDeviation"]),
            significant_digits=convert.json_to_int(echo["significantDigits"]),
        )
    if kind is ValueKind.STRING:
        characters = echo["characters"]
        if not isinstance(characters, str):
            raise TypeError("'characters' must be a string")
        return StringParameters(
            length=convert.json_to_int(echo["length"]),
            characters=characters,
            replacement=_bool(echo.get("replacement")),
        )
    if kind is ValueKind.UUID:
        return UuidParameters()
    if kind is ValueKind.BLOB:
        return BlobParameters(size=convert.json_to_int(echo["size"]) // BITS_PER_BYTE)
    raise ValueError(f"unknown value kind {kind!r}")


def to_signed_random(dto: RpcSignedRandom, kind: ValueKind) -> SignedRandom[Any]:
    if dto.license is None:
        raise ValueError("signed random has no license")
    return SignedRandom(
        data=list(dto.data),
        completion_time=dto.completion_time,
        parameters=_read_parameters(kind, dto.echo),
        api_key_hash=dto.hashed_api_key,
        serial_number=dto.serial_number,
        user_data=dto.user_data,
        license=to_license(dto.license),
    )


def to_result(dto: RpcGenerationResult) -> GenerationResult[Any]:
    if isinstance(dto.random, RpcSignedRandom):
        random: Random[Any] = to_signed_random(dto.random, dto.kind)
    else:
        random = Random(data=list(dto.random.data), completion_time=dto.random.completion_time)
    return GenerationResult(
        random=random,
        bits_used=dto.bits_used,
        bits_left=dto.bits_left,
        requests_left=dto.requests_left,
        advisory_delay=dto.advisory_delay,
        signature=dto.signature,
    )


# ── Public → wire (signature verification) ──────────────────────────


def _integers(random: SignedRandom[Any]) -> tuple[ValueKind, dict[str, Any]]:
    p: IntegerParameters = random.parameters
    return ValueKind.INTEGER, {
        "n": len(random.data),
        "min": p.minimum,
        "max": p.maximum,
        "replacement": p.replacement,
        "base": DECIMAL_BASE,
    }


def _integer_sequences(random: SignedRandom[Any]) -> tuple[ValueKind, dict[str, Any]]:
    p: IntegerSequenceParameters = random.parameters
    for name in ("minimums", "maximums", "replacements"):
        if getattr(p, name) is None:
            raise RandomOrgShapeError(f"random.parameters.{name}", "value is required")
    count = len(random.data)
    if not (count == len(p.minimums) == len(p.maximums) == len(p.replacements)):
        raise RandomOrgShapeError(
            "random.parameters",
            f"minimums, maximums and replacements must each hold {count} entries, "
            "one per sequence",
        )
    if any(sequence is None for sequence in random.data):
        raise RandomOrgShapeError("random.data", "sequences must not be None")
    return ValueKind.INTEGER_SEQUENCE, {
        "n": count,
        "length": [len(sequence) for sequence in random.data],
        "min": list(p.minimums),
        "max": list(p.maximums),
        "replacement": list(p.replacements),
        "base": [DECIMAL_BASE] * count,
    }


def _decimal_fractions(random: SignedRandom[Any]) -> tuple[ValueKind, dict[str, Any]]:
    p: DecimalFractionParameters = random.parameters
    return ValueKind.DECIMAL_FRACTION, {
        "n": len(random.data),
        "decimalPlaces": p.decimal_places,
        "replacement": p.replacement,
    }


def _gaussians(random: SignedRandom[Any]) -> tuple[ValueKind, dict[str, Any]]:
    p: GaussianParameters = random.parameters
    return ValueKind.GAUSSIAN, {
        "n": len(random.data),
        "mean": convert.decimal_to_json(p.mean),
        "standardDeviation": convert.decimal_to_json(p.standard_deviation),
        "significantDigits": p.significant_digits,
    }


def _strings(random: SignedRandom[Any]) -> tuple[ValueKind, dict[str, Any]]:
    p: StringParameters = random.parameters
    if p.characters is None:
        raise RandomOrgShapeError("random.parameters.characters", "value is required")
    return ValueKind.STRING, {
        "n": len(random.data),
        "length": p.length,
        "characters": p.characters,
        "replacement": p.replacement,
    }


def _uuids(random: SignedRandom[Any]) -> tuple[ValueKind, dict[str, Any]]:
    return ValueKind.UUID, {"n": len(random.data)}


def _blobs(random: SignedRandom[Any]) -> tuple[ValueKind, dict[str, Any]]:
    p: BlobParameters = random.parameters
    return ValueKind.BLOB, {
        "n": len(random.data),
        "size": p.size * BITS_PER_BYTE,
        "format": BLOB_FORMAT,
    }


ECHO_BUILDERS: dict[type, Callable[[SignedRandom[Any]], tuple[ValueKind, dict[str, Any]]]] = {
    IntegerParameters: _integers,
    IntegerSequenceParameters: _integer_sequences,
    DecimalFractionParameters: _decimal_fractions,
    GaussianParameters: _gaussians,
    StringParameters: _strings,
    UuidParameters: _uuids,
    BlobParameters: _blobs,
}

VALUE_ENCODERS: dict[ValueKind, Callable[[Any], Any]] = {
    ValueKind.INTEGER: int,
    ValueKind.INTEGER_SEQUENCE: lambda seq: [int(v) for v in seq],
    ValueKind.DECIMAL_FRACTION: convert.decimal_to_json,
    ValueKind.GAUSSIAN: convert.decimal_to_json,
    ValueKind.STRING: str,
    ValueKind.UUID: str,
    ValueKind.BLOB: convert.bytes_to_base64,
}


def signed_random_to_wire(random: SignedRandom[Any]) -> dict[str, Any]:
    """Rebuild the random object exactly as the service produced it.

    Raises ``RandomOrgShapeError`` when a member the service signed is
    missing or the sequence parameters do not line up with the data.
    """
    if random is None:
        raise RandomOrgShapeError("random", "value is required")
    if not isinstance(random, SignedRandom):
        raise RandomOrgShapeError(
            "random", f"expected a SignedRandom, got {type(random).__name__}"
        )
    if random.data is None:
        raise RandomOrgShapeError("random.data", "value is required")
    if random.license is None or random.license.type is None:
        raise RandomOrgShapeError("random.license.type", "value is required")

    build = ECHO_BUILDERS.get(type(random.parameters))
    if build is None:
        raise RandomOrgShapeError(
            "random.parameters",
            f"unsupported parameters type {type(random.parameters).__name__}",
        )
    kind, echo = build(random)

    encode = VALUE_ENCODERS[kind]
    try:
        data = [encode(value) for value in random.data]
    except (TypeError, ValueError) as exc:
        raise RandomOrgParameterError("random.data", f"cannot encode value: {exc}") from exc

    return {
        "method": SIGNED_METHODS[kind].value,
        "hashedApiKey": convert.bytes_to_base64(random.api_key_hash),
        **echo,
        "data": data,
        "license": {
            "type": random.license.type,
            "text": random.license.text,
            "infoUrl": convert.url_to_json(random.license.info_url),
        },
        "userData": random.user_data,
        "completionTime": convert.format_timestamp(random.completion_time),
        "serialNumber": random.serial_number,
    }
