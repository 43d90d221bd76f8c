"""Client configuration from the environment.

Reads ``RANDOM_ORG_*`` variables, after loading ``.env`` from the
working directory when one exists::

    RANDOM_ORG_API_KEY=00000000-0000-0000-0000-000000000000
    RANDOM_ORG_ENDPOINT=https://api.random.org/json-rpc/2/invoke
    RANDOM_ORG_TIMEOUT=120
    RANDOM_ORG_PACING=true
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from randomorg.dispatcher import DEFAULT_ENDPOINT, DEFAULT_USER_AGENT
from randomorg.errors import RandomOrgParameterError, RandomOrgShapeError

DEFAULT_TIMEOUT = 120.0
ENV_PREFIX = "RANDOM_ORG_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise RandomOrgParameterError(name, f"expected a boolean, got {value!r}")


@dataclass(slots=True)
class ClientSettings:
    api_key: str
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    pacing: bool = True

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, dotenv: bool = True) -> "ClientSettings":
        """Build settings from ``{prefix}API_KEY`` and friends.

        Only the API key is required; everything else falls back to the
        defaults above.
        """
        if dotenv:
            load_dotenv(os.path.join(Path.cwd(), ".env"))

        api_key = os.getenv(f"{prefix}API_KEY")
        if not api_key:
            raise RandomOrgShapeError(f"{prefix}API_KEY", "environment variable is not set")

        timeout_raw = os.getenv(f"{prefix}TIMEOUT")
        try:
            timeout = DEFAULT_TIMEOUT if timeout_raw is None else float(timeout_raw)
        except ValueError:
            raise RandomOrgParameterError(
                f"{prefix}TIMEOUT", f"expected seconds, got {timeout_raw!r}"
            ) from None

        pacing_raw = os.getenv(f"{prefix}PACING")
        return cls(
            api_key=api_key,
            endpoint=os.getenv(f"{prefix}ENDPOINT", DEFAULT_ENDPOINT),
            timeout=timeout,
            user_agent=os.getenv(f"{prefix}USER_AGENT", DEFAULT_USER_AGENT),
            pacing=True if pacing_raw is None else _parse_bool(f"{prefix}PACING", pacing_raw),
        )
