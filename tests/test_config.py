"""Tests for settings, credential loading and the shared client."""

import json

import pytest

from coinify import CoinifyClient, Settings, coinify_client, get_settings
from coinify.envelope import parse_envelope


@pytest.fixture(autouse=True)
def reset_cached_state(monkeypatch):
    for name in ("COINIFY_API_KEY", "COINIFY_API_SECRET", "COINIFY_API_BASE_URL", "COINIFY_REQUEST_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(coinify_client, "_client", None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("COINIFY_API_KEY", "env-key")
    monkeypatch.setenv("COINIFY_API_SECRET", "env-secret")
    monkeypatch.setenv("COINIFY_API_BASE_URL", "https://sandbox.example")
    monkeypatch.setenv("COINIFY_REQUEST_TIMEOUT", "5")

    settings = Settings(_env_file=None)

    assert settings.has_credentials
    client = CoinifyClient.from_settings(settings)
    assert client.api_key == "env-key"
    assert client.api_base_url == "https://sandbox.example"
    assert client.timeout == 5.0


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert not settings.has_credentials
    assert settings.coinify_api_base_url == "https://api.coinify.com"
    assert settings.coinify_request_timeout == 30.0


def test_from_credentials_file(tmp_path):
    creds = tmp_path / "creds.json"
    creds.write_text(json.dumps({"api_key": "file-key", "api_secret": "file-secret"}))

    client = CoinifyClient.from_credentials(creds)

    assert client.api_key == "file-key"
    assert client.api_base_url == "https://api.coinify.com"


def test_from_credentials_file_with_base_url(tmp_path):
    creds = tmp_path / "creds.json"
    creds.write_text(json.dumps({
        "api_key": "file-key",
        "api_secret": "file-secret",
        "api_base_url": "https://sandbox.example/",
    }))
    assert CoinifyClient.from_credentials(creds).api_base_url == "https://sandbox.example"


def test_from_credentials_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        CoinifyClient.from_credentials(tmp_path / "missing.json")


def test_from_credentials_missing_secret(tmp_path):
    creds = tmp_path / "creds.json"
    creds.write_text(json.dumps({"api_key": "file-key"}))
    with pytest.raises(ValueError):
        CoinifyClient.from_credentials(creds)


def test_get_client_prefers_environment(monkeypatch):
    monkeypatch.setenv("COINIFY_API_KEY", "env-key")
    monkeypatch.setenv("COINIFY_API_SECRET", "env-secret")

    client = coinify_client.get_client()

    assert client.api_key == "env-key"
    assert coinify_client.get_client() is client


def test_get_client_falls_back_to_credentials_file(monkeypatch, tmp_path):
    creds = tmp_path / "creds.json"
    creds.write_text(json.dumps({"api_key": "file-key", "api_secret": "file-secret"}))
    monkeypatch.setattr(coinify_client, "CREDENTIALS_FILE", creds)
    monkeypatch.setattr(coinify_client, "get_settings", lambda: Settings(_env_file=None))

    assert coinify_client.get_client().api_key == "file-key"


def test_parse_envelope_keeps_unknown_fields():
    envelope = parse_envelope({"success": True, "data": {"id": 1}, "meta": {"page": 2}})
    assert envelope.success
    assert envelope.data == {"id": 1}
    assert envelope.model_extra == {"meta": {"page": 2}}


def test_parse_envelope_error():
    envelope = parse_envelope({
        "success": False,
        "error": {"code": "invoice_not_found", "message": "Invoice not found", "url": "https://docs"},
    })
    assert not envelope.success
    assert envelope.error.code == "invoice_not_found"
    assert envelope.error.url == "https://docs"


def test_parse_envelope_rejects_non_envelopes():
    assert parse_envelope(None) is None
    assert parse_envelope([1, 2]) is None
    assert parse_envelope({"data": 1}) is None


def test_from_credentials_file_not_an_object(tmp_path):
    creds = tmp_path / "creds.json"
    creds.write_text(json.dumps(["file-key", "file-secret"]))
    with pytest.raises(ValueError):
        CoinifyClient.from_credentials(creds)
