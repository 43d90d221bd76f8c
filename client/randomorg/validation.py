"""Argument checks for every RANDOM.ORG method.

Nothing here touches the network: each ``validate_*`` either returns the
normalised arguments or raises ``RandomOrgRangeError`` /
``RandomOrgShapeError``.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

from randomorg.errors import (
    RandomOrgParameterError,
    RandomOrgRangeError,
    RandomOrgShapeError,
)

# ── Service limits ───────────────────────────────────────────────────
MAX_COUNT = 10_000
MAX_UUID_COUNT = 1_000
MAX_BLOB_COUNT = 100
INTEGER_LIMIT = 1_000_000_000
MAX_SEQUENCES = 10
MAX_DECIMAL_PLACES = 20
MIN_SIGNIFICANT_DIGITS = 2
MAX_SIGNIFICANT_DIGITS = 20
GAUSSIAN_LIMIT = Decimal(1_000_000)
MAX_STRING_LENGTH = 20
MAX_CHARACTERS = 80
MAX_BLOB_BITS = 1_048_576
MAX_USER_DATA = 1_000

_API_KEY_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


# ── Primitives ───────────────────────────────────────────────────────


def _require_int(name: str, value: Any) -> int:
    if value is None:
        raise RandomOrgShapeError(name, "value is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise RandomOrgParameterError(name, f"expected an integer, got {type(value).__name__}")
    return value


def _require_bool(name: str, value: Any) -> bool:
    if value is None:
        raise RandomOrgShapeError(name, "value is required")
    if not isinstance(value, bool):
        raise RandomOrgParameterError(name, f"expected a boolean, got {type(value).__name__}")
    return value


def _require_decimal(name: str, value: Any) -> Decimal:
    if value is None:
        raise RandomOrgShapeError(name, "value is required")
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise RandomOrgParameterError(name, f"expected a number, got {type(value).__name__}")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise RandomOrgParameterError(name, "not a number") from exc
    if not number.is_finite():
        raise RandomOrgRangeError(name, value, "must be finite")
    return number


def _check_range(name: str, value: Any, low: Any, high: Any) -> None:
    if value < low or value > high:
        raise RandomOrgRangeError(name, value, f"must be within [{low}, {high}]")


def _sequence(name: str, value: Any) -> tuple[Any, ...]:
    if value is None:
        raise RandomOrgShapeError(name, "value is required")
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise RandomOrgShapeError(name, "expected a sequence")
    return tuple(value)


# ── Common arguments ─────────────────────────────────────────────────


def validate_api_key(api_key: Any) -> str:
    """The key must be a hyphenated UUID (``xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx``)."""
    if api_key is None:
        raise RandomOrgShapeError("api_key", "value is required")
    if not isinstance(api_key, str) or not _API_KEY_RE.match(api_key):
        raise RandomOrgParameterError("api_key", "must be a UUID in 8-4-4-4-12 format")
    return api_key


def validate_count(count: Any, maximum: int = MAX_COUNT) -> int:
    count = _require_int("count", count)
    _check_range("count", count, 1, maximum)
    return count


def validate_user_data(user_data: Any) -> str | None:
    if user_data is None:
        return None
    if not isinstance(user_data, str):
        raise RandomOrgParameterError("user_data", "expected a string")
    if len(user_data) > MAX_USER_DATA:
        raise RandomOrgRangeError(
            "user_data", len(user_data), f"length must not exceed {MAX_USER_DATA}"
        )
    return user_data


# ── Per method ───────────────────────────────────────────────────────


def validate_integers(
    count: Any, minimum: Any, maximum: Any, replacement: Any
) -> tuple[int, int, int, bool]:
    count = validate_count(count)
    minimum = _require_int("minimum", minimum)
    _check_range("minimum", minimum, -INTEGER_LIMIT, INTEGER_LIMIT)
    maximum = _require_int("maximum", maximum)
    _check_range("maximum", maximum, -INTEGER_LIMIT, INTEGER_LIMIT)
    return count, minimum, maximum, _require_bool("replacement", replacement)


def validate_integer_sequences(
    counts: Any, minimums: Any, maximums: Any, replacements: Any
) -> tuple[tuple[int, ...], tuple[int, ...], tuple[int, ...], tuple[bool, ...]]:
    """Check the four parallel arrays of a sequence request.

    The arrays must agree in length (at most ``MAX_SEQUENCES``), hold no
    ``None``, respect the per-element limits, and the sequence lengths
    must add up to at most ``MAX_COUNT``.
    """
    counts = _sequence("counts", counts)
    minimums = _sequence("minimums", minimums)
    maximums = _sequence("maximums", maximums)
    replacements = _sequence("replacements", replacements)

    size = len(counts)
    if not (size == len(minimums) == len(maximums) == len(replacements)):
        raise RandomOrgShapeError(
            "counts", "counts, minimums, maximums and replacements differ in length"
        )
    if size < 1 or size > MAX_SEQUENCES:
        raise RandomOrgShapeError(
            "counts", f"number of sequences must be within [1, {MAX_SEQUENCES}], got {size}"
        )

    for name, values in (("counts", counts), ("minimums", minimums),
                         ("maximums", maximums), ("replacements", replacements)):
        if any(v is None for v in values):
            raise RandomOrgShapeError(name, "elements must not be None")

    for i in range(size):
        _require_int(f"counts[{i}]", counts[i])
        _check_range(f"counts[{i}]", counts[i], 1, MAX_COUNT)
        _require_int(f"minimums[{i}]", minimums[i])
        _check_range(f"minimums[{i}]", minimums[i], -INTEGER_LIMIT, INTEGER_LIMIT)
        _require_int(f"maximums[{i}]", maximums[i])
        _check_range(f"maximums[{i}]", maximums[i], -INTEGER_LIMIT, INTEGER_LIMIT)
        _require_bool(f"replacements[{i}]", replacements[i])

    total = sum(counts)
    _check_range("counts", total, 1, MAX_COUNT)
    return counts, minimums, maximums, replacements


def validate_decimal_fractions(
    count: Any, decimal_places: Any, replacement: Any
) -> tuple[int, int, bool]:
    count = validate_count(count)
    decimal_places = _require_int("decimal_places", decimal_places)
    _check_range("decimal_places", decimal_places, 1, MAX_DECIMAL_PLACES)
    return count, decimal_places, _require_bool("replacement", replacement)


def validate_gaussians(
    count: Any, mean: Any, standard_deviation: Any, significant_digits: Any
) -> tuple[int, Decimal, Decimal, int]:
    count = validate_count(count)
    mean = _require_decimal("mean", mean)
    _check_range("mean", mean, -GAUSSIAN_LIMIT, GAUSSIAN_LIMIT)
    standard_deviation = _require_decimal("standard_deviation", standard_deviation)
    _check_range("standard_deviation", standard_deviation, -GAUSSIAN_LIMIT, GAUSSIAN_LIMIT)
    significant_digits = _require_int("significant_digits", significant_digits)
    _check_range(
        "significant_digits", significant_digits,
        MIN_SIGNIFICANT_DIGITS, MAX_SIGNIFICANT_DIGITS,
    )
    return count, mean, standard_deviation, significant_digits


def validate_strings(
    count: Any, length: Any, characters: Any, replacement: Any
) -> tuple[int, int, str, bool]:
    count = validate_count(count)
    length = _require_int("length", length)
    _check_range("length", length, 1, MAX_STRING_LENGTH)
    if characters is None:
        raise RandomOrgShapeError("characters", "value is required")
    if not isinstance(characters, str):
        raise RandomOrgParameterError("characters", "expected a string")
    if len(characters) < 1 or len(characters) > MAX_CHARACTERS:
        raise RandomOrgRangeError(
            "characters", len(characters), f"length must be within [1, {MAX_CHARACTERS}]"
        )
    return count, length, characters, _require_bool("replacement", replacement)


def validate_uuids(count: Any) -> int:
    return validate_count(count, MAX_UUID_COUNT)


def validate_blobs(count: Any, size: Any) -> tuple[int, int]:
    """``size`` is in bits: a multiple of 8, and ``count * size`` is capped too."""
    count = validate_count(count, MAX_BLOB_COUNT)
    size = _require_int("size", size)
    _check_range("size", size, 1, MAX_BLOB_BITS)
    if size % 8 != 0:
        raise RandomOrgRangeError("size", size, "must be divisible by 8")
    if count * size > MAX_BLOB_BITS:
        raise RandomOrgRangeError(
            "size", size, f"total size of all blobs must not exceed {MAX_BLOB_BITS} bits"
        )
    return count, size


def validate_serial_number(serial_number: Any) -> int:
    serial_number = _require_int("serial_number", serial_number)
    if serial_number < 0:
        raise RandomOrgRangeError("serial_number", serial_number, "must not be negative")
    return serial_number


def validate_signature(signature: Any) -> bytes:
    if signature is None:
        raise RandomOrgShapeError("signature", "value is required")
    if not isinstance(signature, (bytes, bytearray)):
        raise RandomOrgParameterError("signature", "expected bytes")
    return bytes(signature)
