"""Signatures over random objects.

The real service signs with SHA-512/RSA.  The stub uses a keyed
SHAKE-256 digest of the same length over the canonical JSON of the
random object, which is enough to tell an unmodified object from a
tampered one.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import secrets
from typing import Any

SIGNATURE_SIZE = 512


def canonical_json(obj: Any) -> bytes:
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


class Signer:
    def __init__(self, key: bytes | None = None) -> None:
        self._key = key or secrets.token_bytes(32)

    def sign(self, random: dict[str, Any]) -> bytes:
        digest = hashlib.shake_256(self._key + canonical_json(random))
        return digest.digest(SIGNATURE_SIZE)

    def verify(self, random: dict[str, Any], signature: bytes) -> bool:
        return hmac.compare_digest(self.sign(random), signature)
