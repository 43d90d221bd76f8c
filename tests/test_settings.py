"""Tests for environment-driven configuration."""

import os

import pytest
from randomorg import ClientSettings, RandomOrgClient
from randomorg.dispatcher import DEFAULT_ENDPOINT
from randomorg.errors import RandomOrgParameterError, RandomOrgShapeError

VARS = ("API_KEY", "ENDPOINT", "TIMEOUT", "USER_AGENT", "PACING")


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Empty ``RANDOM_ORG_*`` environment, run from a directory without ``.env``."""
    monkeypatch.chdir(tmp_path)
    for name in VARS:
        monkeypatch.delenv(f"RANDOM_ORG_{name}", raising=False)
    return monkeypatch


def test_defaults(env, api_key):
    env.setenv("RANDOM_ORG_API_KEY", api_key)
    settings = ClientSettings.from_env()
    assert settings == ClientSettings(api_key=api_key)
    assert settings.endpoint == DEFAULT_ENDPOINT
    assert settings.timeout == 120.0
    assert settings.pacing is True


def test_overrides(env, api_key):
    env.setenv("RANDOM_ORG_API_KEY", api_key)
    env.setenv("RANDOM_ORG_ENDPOINT", "http://127.0.0.1:8100/json-rpc/2/invoke")
    env.setenv("RANDOM_ORG_TIMEOUT", "5.5")
    env.setenv("RANDOM_ORG_PACING", "off")
    settings = ClientSettings.from_env()
    assert settings.endpoint == "http://127.0.0.1:8100/json-rpc/2/invoke"
    assert settings.timeout == 5.5
    assert settings.pacing is False


def test_dotenv_file(env, tmp_path, api_key):
    (tmp_path / ".env").write_text(f"RANDOM_ORG_API_KEY={api_key}\nRANDOM_ORG_PACING=0\n")
    try:
        settings = ClientSettings.from_env()
    finally:
        # load_dotenv writes straight into os.environ
        for name in VARS:
            os.environ.pop(f"RANDOM_ORG_{name}", None)
    assert settings.api_key == api_key
    assert settings.pacing is False


def test_custom_prefix(env, api_key):
    env.setenv("RNG_API_KEY", api_key)
    assert ClientSettings.from_env(prefix="RNG_").api_key == api_key


def test_missing_api_key(env):
    with pytest.raises(RandomOrgShapeError, match="RANDOM_ORG_API_KEY"):
        ClientSettings.from_env()


@pytest.mark.parametrize("name, value", [("TIMEOUT", "soon"), ("PACING", "maybe")])
def test_malformed_values(env, api_key, name, value):
    env.setenv("RANDOM_ORG_API_KEY", api_key)
    env.setenv(f"RANDOM_ORG_{name}", value)
    with pytest.raises(RandomOrgParameterError, match=f"RANDOM_ORG_{name}"):
        ClientSettings.from_env()


@pytest.mark.anyio
async def test_client_from_settings(api_key):
    settings = ClientSettings(api_key=api_key, endpoint="http://stub.test/json-rpc/2/invoke", pacing=False)
    async with RandomOrgClient.from_settings(settings) as client:
        assert client._dispatcher.endpoint == "http://stub.test/json-rpc/2/invoke"
        assert client._dispatcher.pacing is False
