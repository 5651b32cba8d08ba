import logging

import pytest
import requests

from services.errors import RemoteLookupError
from services.providers import http as http_mod
from services.providers.http import Http
from services.providers.rapidapi import BASE, RapidApiConfig, RapidApiSpecs

CONFIG = RapidApiConfig(api_key="test-key")
TRIM_ID = 151690


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


@pytest.fixture
def calls(monkeypatch):
    """Records every outgoing GET; tests set `calls.response` (or an exception) up front."""
    class Recorder(list):
        response = FakeResponse(200, {"id": TRIM_ID, "engineHp": "115 Hp"})

    rec = Recorder()

    def fake_get(url, params=None, headers=None, timeout=None):
        rec.append({"url": url, "headers": headers, "timeout": timeout})
        if isinstance(rec.response, Exception):
            raise rec.response
        return rec.response

    monkeypatch.setattr(http_mod.requests, "get", fake_get)
    monkeypatch.setattr(http_mod.time, "sleep", lambda s: None)
    return rec


@pytest.mark.timeout(5)
def test_fetch_trim_returns_raw_payload(calls):
    payload = RapidApiSpecs(CONFIG).fetch_trim(TRIM_ID)

    assert payload == {"id": TRIM_ID, "engineHp": "115 Hp"}
    assert len(calls) == 1
    assert calls[0]["url"] == f"{BASE}/cars/trims/{TRIM_ID}"
    assert calls[0]["headers"]["x-rapidapi-key"] == "test-key"
    assert calls[0]["headers"]["x-rapidapi-host"] == "car-specs.p.rapidapi.com"
    assert calls[0]["headers"]["User-Agent"]


@pytest.mark.timeout(5)
def test_http_error_carries_status_and_upstream_message(calls):
    calls.response = FakeResponse(403, {"message": "You are not subscribed to this API."})

    with pytest.raises(RemoteLookupError) as ei:
        RapidApiSpecs(CONFIG).fetch_trim(TRIM_ID)

    assert ei.value.status == 403
    assert "not subscribed" in str(ei.value)
    assert len(calls) == 1   # no retry on 4xx


@pytest.mark.timeout(5)
def test_error_body_without_json_uses_text(calls):
    calls.response = FakeResponse(502, None, text="<html>Bad Gateway</html>")
    with pytest.raises(RemoteLookupError) as ei:
        RapidApiSpecs(CONFIG).fetch_trim(TRIM_ID)
    assert ei.value.status == 502
    assert "Bad Gateway" in str(ei.value)


@pytest.mark.timeout(5)
def test_invalid_json_is_a_remote_error(calls):
    calls.response = FakeResponse(200, None, text="not json")
    with pytest.raises(RemoteLookupError) as ei:
        RapidApiSpecs(CONFIG).fetch_trim(TRIM_ID)
    assert ei.value.status is None
    assert ei.value.errors


@pytest.mark.timeout(5)
def test_network_errors_are_retried_then_raised(calls):
    calls.response = requests.ConnectionError("connection reset")
    http = Http(max_retries=3)

    with pytest.raises(RemoteLookupError) as ei:
        RapidApiSpecs(CONFIG, http=http).fetch_trim(TRIM_ID)

    assert len(calls) == 3
    assert isinstance(ei.value.errors[0], requests.ConnectionError)


@pytest.mark.timeout(5)
def test_missing_key_fails_without_network(calls):
    with pytest.raises(RemoteLookupError, match="RAPIDAPI_KEY"):
        RapidApiSpecs(RapidApiConfig(api_key=None)).fetch_trim(TRIM_ID)
    assert calls == []


@pytest.mark.timeout(5)
def test_call_is_logged_with_method_and_endpoint(calls, caplog):
    with caplog.at_level(logging.INFO, logger="services.providers.rapidapi"):
        RapidApiSpecs(CONFIG).fetch_trim(TRIM_ID)

    rec = next(r for r in caplog.records if r.name == "services.providers.rapidapi")
    assert rec.method == "GET"
    assert rec.endpoint == f"/cars/trims/{TRIM_ID}"


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("RAPIDAPI_KEY", "abc")
    monkeypatch.setenv("RAPIDAPI_BASE_URL", "https://example.test/v2/")
    monkeypatch.setenv("RAPIDAPI_TIMEOUT", "not-a-number")
    monkeypatch.delenv("RAPIDAPI_HOST", raising=False)

    cfg = RapidApiConfig.from_env()
    assert cfg.api_key == "abc"
    assert cfg.base_url == "https://example.test/v2"
    assert cfg.host == "car-specs.p.rapidapi.com"
    assert cfg.timeout == 10
