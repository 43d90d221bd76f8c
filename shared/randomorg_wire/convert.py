"""Converters between RANDOM.ORG wire primitives and Python values.

Every ``parse_*`` / ``*_to_*`` reader raises ``ValueError`` on input the
service would never produce; callers translate that into their own
error type.
"""

from __future__ import annotations

import base64
import binascii
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

import httpx


class ApiKeyStatus(str, Enum):
    """The status of an API key."""

    STOPPED = "stopped"
    PAUSED = "paused"
    RUNNING = "running"


# ── Numbers ──────────────────────────────────────────────────────────


def decimal_to_json(value: Decimal | int | float) -> int | float:
    """Return the JSON number for *value*.

    Integral values become JSON integers: the service rejects ``5.0``
    where its schema expects ``5``.
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    if not value.is_finite():
        raise ValueError(f"non-finite number: {value}")
    if value % 1 == 0:
        return int(value)
    return float(value)


def json_to_decimal(value: Any) -> Decimal:
    """Read a JSON integer or float literal as a ``Decimal``."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValueError(f"expected a JSON number, got {type(value).__name__}")
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def json_to_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected a JSON integer, got {type(value).__name__}")
    return value


# ── Timestamps ───────────────────────────────────────────────────────

_TIMESTAMP_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,7}))?Z$"
)


class Timestamp(datetime):
    """A ``datetime`` that keeps the seventh fractional digit of a timestamp.

    The service writes completion times to 100 ns and signs that text;
    ``datetime`` stops at microseconds, so the last digit rides along in
    ``ticks`` (0-9) and ``format_timestamp`` writes it back.  Arithmetic
    and comparisons behave as on the plain ``datetime``.
    """

    ticks: int

    def __new__(cls, *args: Any, ticks: int = 0, **kwargs: Any) -> "Timestamp":
        if not 0 <= ticks <= 9:
            raise ValueError(f"ticks must be a single digit, got {ticks}")
        self = super().__new__(cls, *args, **kwargs)
        self.ticks = ticks
        return self


def parse_timestamp(text: Any) -> Timestamp:
    """Parse ``yyyy-MM-dd HH:mm:ss[.fffffff]Z`` into an aware UTC ``Timestamp``."""
    if not isinstance(text, str):
        raise ValueError("timestamp must be a string")
    match = _TIMESTAMP_RE.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp: {text!r}")
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction = (match.group(7) or "").ljust(7, "0")
    return Timestamp(
        year,
        month,
        day,
        hour,
        minute,
        second,
        int(fraction[:6]),
        tzinfo=timezone.utc,
        ticks=int(fraction[6]),
    )


def format_timestamp(value: datetime) -> str:
    """Format *value* the way the service writes completion times.

    Trailing zeros of the fraction are dropped, so a parsed timestamp is
    written back byte-for-byte, seventh digit included.
    """
    ticks = getattr(value, "ticks", 0)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    text = value.strftime("%Y-%m-%d %H:%M:%S")
    fraction = f"{value.microsecond:06d}{ticks}".rstrip("0")
    if fraction:
        text += "." + fraction
    return text + "Z"


# ── Durations ────────────────────────────────────────────────────────


def milliseconds_to_timedelta(value: Any) -> timedelta:
    return timedelta(milliseconds=json_to_int(value))


def timedelta_to_milliseconds(value: timedelta) -> int:
    return value // timedelta(milliseconds=1)


# ── Binary ───────────────────────────────────────────────────────────


def base64_to_bytes(text: Any) -> bytes:
    if not isinstance(text, str):
        raise ValueError("base64 data must be a string")
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 data: {exc}") from exc


def bytes_to_base64(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


# ── Enumerants and URLs ──────────────────────────────────────────────


def parse_api_key_status(text: Any) -> ApiKeyStatus:
    try:
        return ApiKeyStatus(text)
    except ValueError:
        raise ValueError(f"unknown API key status: {text!r}") from None


def parse_url(text: Any) -> httpx.URL | None:
    if text is None:
        return None
    if not isinstance(text, str):
        raise ValueError("URL must be a string")
    try:
        return httpx.URL(text)
    except httpx.InvalidURL as exc:
        raise ValueError(f"invalid URL: {text!r}") from exc


def url_to_json(value: httpx.URL | str | None) -> str | None:
    if value is None:
        return None
    return str(value)
