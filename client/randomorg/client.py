"""RANDOM.ORG client — async façade over the JSON-RPC API.

* ``generate_*(…)``        → ``GenerationResult`` of plain random values
* ``generate_signed_*(…)`` → ``GenerationResult`` carrying a ``SignedRandom``
* ``get_result(serial)``   → a previously generated signed result
* ``verify_signature(…)``  → authenticity of a signed result
* ``get_usage()``          → ``RandomUsage`` of the API key

Every call validates its arguments first, performs exactly one request
and projects the response into the public models.  Nothing is retried.

Run directly for a quick demo (needs ``RANDOM_ORG_API_KEY``)::

    python -m randomorg.client
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Sequence
from uuid import UUID

import httpx
from randomorg_wire import convert

from randomorg import mapping, validation
from randomorg.contracts import RandomMethod
from randomorg.dispatcher import DEFAULT_ENDPOINT, DEFAULT_USER_AGENT, RequestDispatcher
from randomorg.errors import RandomOrgFormatError
from randomorg.models import GenerationResult, RandomUsage, SignedRandom
from randomorg.settings import DEFAULT_TIMEOUT, ClientSettings

log = logging.getLogger(__name__)


class RandomOrgClient:
    """Async client for the RANDOM.ORG JSON-RPC service.

    Parameters
    ----------
    api_key : str
        RANDOM.ORG API key (a hyphenated UUID).
    http_client : httpx.AsyncClient, optional
        Transport to use.  A client passed in is left open by ``close()``;
        when omitted, one is created and owned by this instance.
    endpoint : str
        JSON-RPC endpoint URL.
    timeout : float
        Request timeout in seconds for the owned transport.
    user_agent : str
        Value of the ``User-Agent`` header.
    pacing : bool
        Serialise calls and honour the service's advisory delay.
    """

    def __init__(
        self,
        api_key: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        pacing: bool = True,
    ) -> None:
        validation.validate_api_key(api_key)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._dispatcher = RequestDispatcher(
            api_key,
            http_client=self._client,
            endpoint=endpoint,
            user_agent=user_agent,
            pacing=pacing,
        )

    @classmethod
    def from_settings(
        cls, settings: ClientSettings, http_client: httpx.AsyncClient | None = None
    ) -> "RandomOrgClient":
        return cls(
            settings.api_key,
            http_client=http_client,
            endpoint=settings.endpoint,
            timeout=settings.timeout,
            user_agent=settings.user_agent,
            pacing=settings.pacing,
        )

    @classmethod
    def from_env(cls, prefix: str = "RANDOM_ORG_") -> "RandomOrgClient":
        return cls.from_settings(ClientSettings.from_env(prefix))

    # -- Lifecycle -----------------------------------------------------

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RandomOrgClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    @property
    def advisory_time(self) -> datetime | None:
        """Earliest UTC time the service advised for the next generation call."""
        return self._dispatcher.advisory_time

    # -- Internal helpers ----------------------------------------------

    async def _generate(
        self, method: RandomMethod, params: dict[str, Any], count: int
    ) -> GenerationResult[Any]:
        dto = await self._dispatcher.invoke(method, params)
        result = self._project(method, dto)
        if len(result.data) != count:
            raise RandomOrgFormatError(
                f"{method.value}: expected {count} values, got {len(result.data)}"
            )
        return result

    @staticmethod
    def _project(method: RandomMethod, dto: Any) -> GenerationResult[Any]:
        try:
            return mapping.to_result(dto)
        except (KeyError, TypeError, ValueError) as exc:
            raise RandomOrgFormatError(
                f"{method.value}: random object does not match its method: {exc!r}"
            ) from exc

    @staticmethod
    def _signed(params: dict[str, Any], user_data: str | None) -> dict[str, Any]:
        user_data = validation.validate_user_data(user_data)
        if user_data is not None:
            params["userData"] = user_data
        return params

    # -- Usage ---------------------------------------------------------

    async def get_usage(self) -> RandomUsage:
        """Return status and remaining quota of the API key."""
        dto = await self._dispatcher.invoke(RandomMethod.GET_USAGE, {})
        return mapping.to_usage(dto)

    # -- Plain generation ----------------------------------------------

    async def generate_integers(
        self, count: int, minimum: int, maximum: int, replacement: bool = True
    ) -> GenerationResult[int]:
        """Generate *count* integers in ``[minimum, maximum]``."""
        params = self._integer_params(count, minimum, maximum, replacement)
        return await self._generate(RandomMethod.GENERATE_INTEGERS, params, params["n"])

    async def generate_integer_sequences(
        self,
        counts: Sequence[int],
        minimums: Sequence[int],
        maximums: Sequence[int],
        replacements: Sequence[bool],
    ) -> GenerationResult[list[int]]:
        """Generate one integer sequence per entry of the parallel arrays.

        Sequence ``i`` has ``counts[i]`` values in ``[minimums[i], maximums[i]]``.
        """
        params = self._sequence_params(counts, minimums, maximums, replacements)
        result = await self._generate(
            RandomMethod.GENERATE_INTEGER_SEQUENCES, params, params["n"]
        )
        self._check_sequence_lengths(RandomMethod.GENERATE_INTEGER_SEQUENCES, result, params)
        return result

    async def generate_decimal_fractions(
        self, count: int, decimal_places: int, replacement: bool = True
    ) -> GenerationResult[Decimal]:
        """Generate decimal fractions in ``[0, 1)`` with *decimal_places* digits."""
        params = self._decimal_params(count, decimal_places, replacement)
        return await self._generate(RandomMethod.GENERATE_DECIMAL_FRACTIONS, params, count)

    async def generate_gaussians(
        self,
        count: int,
        mean: Decimal,
        standard_deviation: Decimal,
        significant_digits: int,
    ) -> GenerationResult[Decimal]:
        params = self._gaussian_params(count, mean, standard_deviation, significant_digits)
        return await self._generate(RandomMethod.GENERATE_GAUSSIANS, params, count)

    async def generate_strings(
        self, count: int, length: int, characters: str, replacement: bool = True
    ) -> GenerationResult[str]:
        params = self._string_params(count, length, characters, replacement)
        return await self._generate(RandomMethod.GENERATE_STRINGS, params, count)

    async def generate_uuids(self, count: int) -> GenerationResult[UUID]:
        """Generate version 4 UUIDs."""
        params = {"n": validation.validate_uuids(count)}
        return await self._generate(RandomMethod.GENERATE_UUIDS, params, count)

    async def generate_blobs(self, count: int, size: int) -> GenerationResult[bytes]:
        """Generate *count* blobs of *size* bits each."""
        params = self._blob_params(count, size)
        return await self._generate(RandomMethod.GENERATE_BLOBS, params, count)

    # -- Signed generation ---------------------------------------------

    async def generate_signed_integers(
        self,
        count: int,
        minimum: int,
        maximum: int,
        replacement: bool = True,
        user_data: str | None = None,
    ) -> GenerationResult[int]:
        params = self._signed(
            self._integer_params(count, minimum, maximum, replacement), user_data
        )
        return await self._generate(RandomMethod.GENERATE_SIGNED_INTEGERS, params, count)

    async def generate_signed_integer_sequences(
        self,
        counts: Sequence[int],
        minimums: Sequence[int],
        maximums: Sequence[int],
        replacements: Sequence[bool],
        user_data: str | None = None,
    ) -> GenerationResult[list[int]]:
        params = self._signed(
            self._sequence_params(counts, minimums, maximums, replacements), user_data
        )
        method = RandomMethod.GENERATE_SIGNED_INTEGER_SEQUENCES
        result = await self._generate(method, params, params["n"])
        self._check_sequence_lengths(method, result, params)
        return result

    async def generate_signed_decimal_fractions(
        self,
        count: int,
        decimal_places: int,
        replacement: bool = True,
        user_data: str | None = None,
    ) -> GenerationResult[Decimal]:
        params = self._signed(self._decimal_params(count, decimal_places, replacement), user_data)
        return await self._generate(
            RandomMethod.GENERATE_SIGNED_DECIMAL_FRACTIONS, params, count
        )

    async def generate_signed_gaussians(
        self,
        count: int,
        mean: Decimal,
        standard_deviation: Decimal,
        significant_digits: int,
        user_data: str | None = None,
    ) -> GenerationResult[Decimal]:
        params = self._signed(
            self._gaussian_params(count, mean, standard_deviation, significant_digits),
            user_data,
        )
        return await self._generate(RandomMethod.GENERATE_SIGNED_GAUSSIANS, params, count)

    async def generate_signed_strings(
        self,
        count: int,
        length: int,
        characters: str,
        replacement: bool = True,
        user_data: str | None = None,
    ) -> GenerationResult[str]:
        params = self._signed(
            self._string_params(count, length, characters, replacement), user_data
        )
        return await self._generate(RandomMethod.GENERATE_SIGNED_STRINGS, params, count)

    async def generate_signed_uuids(
        self, count: int, user_data: str | None = None
    ) -> GenerationResult[UUID]:
        params = self._signed({"n": validation.validate_uuids(count)}, user_data)
        return await self._generate(RandomMethod.GENERATE_SIGNED_UUIDS, params, count)

    async def generate_signed_blobs(
        self, count: int, size: int, user_data: str | None = None
    ) -> GenerationResult[bytes]:
        params = self._signed(self._blob_params(count, size), user_data)
        return await self._generate(RandomMethod.GENERATE_SIGNED_BLOBS, params, count)

    # -- Signed results ------------------------------------------------

    async def get_result(self, serial_number: int) -> GenerationResult[Any]:
        """Fetch a signed result generated earlier with this API key.

        Usage counters are not part of a replayed result and read as zero.
        """
        params = {"serialNumber": validation.validate_serial_number(serial_number)}
        dto = await self._dispatcher.invoke(RandomMethod.GET_RESULT, params)
        return self._project(RandomMethod.GET_RESULT, dto)

    async def verify_signature(self, random: SignedRandom[Any], signature: bytes) -> bool:
        """Ask the service whether *signature* authenticates *random*.

        *random* is rebuilt into the exact object the service signed, so it
        must carry its data, license type and, for integer sequences, one
        parameter entry per sub-sequence.
        """
        signature = validation.validate_signature(signature)
        params = {
            "random": mapping.signed_random_to_wire(random),
            "signature": convert.bytes_to_base64(signature),
        }
        dto = await self._dispatcher.invoke(RandomMethod.VERIFY_SIGNATURE, params)
        return dto.authenticity

    # -- Parameter builders --------------------------------------------

    @staticmethod
    def _integer_params(
        count: int, minimum: int, maximum: int, replacement: bool
    ) -> dict[str, Any]:
        n, lo, hi, repl = validation.validate_integers(count, minimum, maximum, replacement)
        return {"n": n, "min": lo, "max": hi, "replacement": repl}

    @staticmethod
    def _sequence_params(
        counts: Sequence[int],
        minimums: Sequence[int],
        maximums: Sequence[int],
        replacements: Sequence[bool],
    ) -> dict[str, Any]:
        lengths, lows, highs, repls = validation.validate_integer_sequences(
            counts, minimums, maximums, replacements
        )
        return {
            "n": len(lengths),
            "length": list(lengths),
            "min": list(lows),
            "max": list(highs),
            "replacement": list(repls),
            "base": [mapping.DECIMAL_BASE] * len(lengths),
        }

    @staticmethod
    def _check_sequence_lengths(
        method: RandomMethod, result: GenerationResult[list[int]], params: dict[str, Any]
    ) -> None:
        got = [len(sequence) for sequence in result.data]
        if got != params["length"]:
            raise RandomOrgFormatError(
                f"{method.value}: expected sequence lengths {params['length']}, got {got}"
            )

    @staticmethod
    def _decimal_params(count: int, decimal_places: int, replacement: bool) -> dict[str, Any]:
        n, places, repl = validation.validate_decimal_fractions(
            count, decimal_places, replacement
        )
        return {"n": n, "decimalPlaces": places, "replacement": repl}

    @staticmethod
    def _gaussian_params(
        count: int, mean: Decimal, standard_deviation: Decimal, significant_digits: int
    ) -> dict[str, Any]:
        n, mu, sigma, digits = validation.validate_gaussians(
            count, mean, standard_deviation, significant_digits
        )
        return {
            "n": n,
            "mean": convert.decimal_to_json(mu),
            "standardDeviation": convert.decimal_to_json(sigma),
            "significantDigits": digits,
        }

    @staticmethod
    def _string_params(
        count: int, length: int, characters: str, replacement: bool
    ) -> dict[str, Any]:
        n, size, chars, repl = validation.validate_strings(count, length, characters, replacement)
        return {"n": n, "length": size, "characters": chars, "replacement": repl}

    @staticmethod
    def _blob_params(count: int, size: int) -> dict[str, Any]:
        n, bits = validation.validate_blobs(count, size)
        return {"n": n, "size": bits, "format": mapping.BLOB_FORMAT}


# ── Demo entrypoint ──────────────────────────────────────────────────


async def _demo() -> None:
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    async with RandomOrgClient.from_env() as client:
        print("── usage ──")
        print(f"  {await client.get_usage()}")

        print("── integers ──")
        result = await client.generate_integers(8, 1, 256)
        print(f"  data: {result.data}  bits left: {result.bits_left}")

        print("── signed uuids ──")
        signed = await client.generate_signed_uuids(2, user_data="demo")
        print(f"  data: {signed.data}  serial: {signed.random.serial_number}")
        authentic = await client.verify_signature(signed.random, signed.signature)
        print(f"  authentic: {authentic}")


if __name__ == "__main__":
    import anyio

    anyio.run(_demo)
