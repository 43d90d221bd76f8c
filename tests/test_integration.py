"""Integration tests: the client against the in-process emulator.

Uses httpx.ASGITransport for a realistic HTTP round trip without processes.
"""

import dataclasses
from datetime import timedelta
from decimal import Decimal
from uuid import UUID

import httpx
import pytest
from randomorg import (
    ApiKeyStatus,
    BlobParameters,
    GaussianParameters,
    IntegerSequenceParameters,
    RandomOrgClient,
    RandomOrgServiceError,
    SignedRandom,
)
from randomorg_stub import INVOKE_PATH, StubService, create_app

ENDPOINT = f"http://stub.test{INVOKE_PATH}"


@pytest.fixture
def service(api_key):
    return StubService([api_key])


@pytest.fixture
async def client(service, api_key):
    transport = httpx.ASGITransport(app=create_app(service))  # type: ignore[arg-type]
    http_client = httpx.AsyncClient(transport=transport)
    async with RandomOrgClient(api_key, http_client=http_client, endpoint=ENDPOINT) as client:
        yield client
    await http_client.aclose()


# ── Plain generation ─────────────────────────────────────────────────


@pytest.mark.anyio
async def test_generate_integers(client):
    result = await client.generate_integers(10, -5, 5)
    assert len(result.data) == 10
    assert all(isinstance(v, int) and -5 <= v <= 5 for v in result.data)
    assert not result.signed
    assert result.bits_used == 40
    assert result.advisory_delay == timedelta(0)


@pytest.mark.anyio
async def test_generate_integers_without_replacement(client):
    result = await client.generate_integers(5, 1, 5, replacement=False)
    assert sorted(result.data) == [1, 2, 3, 4, 5]


@pytest.mark.anyio
async def test_generate_integer_sequences(client):
    result = await client.generate_integer_sequences([3, 1], [0, 100], [9, 100], [True, True])
    assert [len(s) for s in result.data] == [3, 1]
    assert result.data[1] == [100]


@pytest.mark.anyio
async def test_generate_decimal_fractions(client):
    result = await client.generate_decimal_fractions(8, 4)
    for value in result.data:
        assert isinstance(value, Decimal)
        assert Decimal(0) <= value < Decimal(1)
        assert value == value.quantize(Decimal("0.0001"))


@pytest.mark.anyio
async def test_generate_gaussians(client):
    result = await client.generate_gaussians(4, Decimal(0), Decimal("1.5"), 6)
    assert len(result.data) == 4
    assert all(isinstance(v, Decimal) for v in result.data)


@pytest.mark.anyio
async def test_generate_strings_uuids_and_blobs(client):
    strings = await client.generate_strings(3, 5, "abcdef")
    assert all(len(s) == 5 and set(s) <= set("abcdef") for s in strings.data)

    uuids = await client.generate_uuids(2)
    assert all(isinstance(u, UUID) and u.version == 4 for u in uuids.data)

    blobs = await client.generate_blobs(2, 128)
    assert [len(b) for b in blobs.data] == [16, 16]


# ── Usage and errors ─────────────────────────────────────────────────


@pytest.mark.anyio
async def test_usage_tracks_generation(client):
    before = await client.get_usage()
    assert before.status is ApiKeyStatus.RUNNING
    assert before.total_requests == 0

    await client.generate_uuids(1)

    after = await client.get_usage()
    assert after.requests_left == before.requests_left - 1
    assert after.bits_left == before.bits_left - 122
    assert after.total_bits == 122


@pytest.mark.anyio
async def test_service_error_surfaces_code(client, service, api_key):
    service.accounts[api_key].status = ApiKeyStatus.PAUSED
    with pytest.raises(RandomOrgServiceError) as exc_info:
        await client.generate_integers(1, 1, 6)
    assert exc_info.value.code == 401
    assert (await client.get_usage()).status is ApiKeyStatus.PAUSED


@pytest.mark.anyio
async def test_error_does_not_corrupt_connection(client, service, api_key):
    """A failed call should not break subsequent calls."""
    service.accounts[api_key].bits_left = 1
    with pytest.raises(RandomOrgServiceError):
        await client.generate_blobs(1, 64)
    service.accounts[api_key].bits_left = 1_000
    assert len((await client.generate_blobs(1, 64)).data) == 1


# ── Signed results ───────────────────────────────────────────────────


SIGNED_CALLS = [
    pytest.param(lambda c: c.generate_signed_integers(5, 1, 100, user_data="draw"), id="integers"),
    pytest.param(
        lambda c: c.generate_signed_integer_sequences([2, 3], [1, -10], [6, 10], [True, False]),
        id="integer_sequences",
    ),
    pytest.param(lambda c: c.generate_signed_decimal_fractions(3, 2), id="decimal_fractions"),
    pytest.param(
        lambda c: c.generate_signed_gaussians(3, Decimal(10), Decimal("0.5"), 4),
        id="gaussians",
    ),
    pytest.param(lambda c: c.generate_signed_strings(2, 4, "xyz", False), id="strings"),
    pytest.param(lambda c: c.generate_signed_uuids(2, user_data="batch 1"), id="uuids"),
    pytest.param(lambda c: c.generate_signed_blobs(2, 32), id="blobs"),
]


@pytest.mark.anyio
@pytest.mark.parametrize("call", SIGNED_CALLS)
async def test_signed_result_verifies(client, call):
    result = await call(client)
    assert result.signed
    assert isinstance(result.random, SignedRandom)
    assert result.random.license.type == "developer"
    assert len(result.random.api_key_hash) == 64
    assert await client.verify_signature(result.random, result.signature)


@pytest.mark.anyio
@pytest.mark.parametrize("call", SIGNED_CALLS)
async def test_tampered_result_fails_verification(client, call):
    result = await call(client)
    tampered = dataclasses.replace(result.random, user_data="someone else's draw")
    assert not await client.verify_signature(tampered, result.signature)


@pytest.mark.anyio
async def test_signed_parameters_are_read_back(client):
    sequences = await client.generate_signed_integer_sequences([1, 2], [0, 5], [3, 9], [True, False])
    assert sequences.random.parameters == IntegerSequenceParameters(
        minimums=[0, 5], maximums=[3, 9], replacements=[True, False]
    )

    gaussians = await client.generate_signed_gaussians(1, Decimal(10), Decimal("0.5"), 4)
    assert gaussians.random.parameters == GaussianParameters(
        mean=Decimal(10), standard_deviation=Decimal("0.5"), significant_digits=4
    )

    blobs = await client.generate_signed_blobs(1, 64)
    assert blobs.random.parameters == BlobParameters(size=8)


@pytest.mark.anyio
async def test_get_result_replays_signed_result(client):
    original = await client.generate_signed_integers(3, 1, 9, user_data="replay me")
    serial_number = original.random.serial_number

    replayed = await client.get_result(serial_number)
    assert replayed.data == original.data
    assert replayed.signature == original.signature
    assert replayed.random.user_data == "replay me"
    assert replayed.random.serial_number == serial_number
    assert replayed.bits_used == replayed.bits_left == replayed.requests_left == 0
    assert await client.verify_signature(replayed.random, replayed.signature)

    with pytest.raises(RandomOrgServiceError) as exc_info:
        await client.get_result(serial_number + 1)
    assert exc_info.value.code == 420
