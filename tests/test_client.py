"""
Tests for treasury/client.py — upstream fetches against a stub session.

The stub mimics the parts of ``requests.Session`` the client uses, so no
network access is required.
"""
import sys
from pathlib import Path

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from treasury.client import TreasuryClient
from treasury.errors import FetchError
from treasury.models import DataVersion, TreasuryData, TreasuryStats
from utils.config import UpstreamConfig


class _Response:
    def __init__(self, status_code=200, body=None, reason="OK", invalid_json=False):
        self.status_code = status_code
        self.reason = reason
        self._body = body
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, timeout=None):
        self.requests.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def _config():
    cfg = UpstreamConfig.from_dict({"base_url": "https://upstream.test/api",
                                    "timeout_seconds": 3.0})
    return cfg


def _client(response=None, error=None):
    session = _Session(response, error)
    return TreasuryClient(_config(), session=session), session


class TestFetchJson:
    def test_success(self):
        client, session = _client(_Response(body={"ok": True}))
        assert client.fetch_json("/treasury-stats") == {"ok": True}
        assert session.requests == [("https://upstream.test/api/treasury-stats", 3.0)]

    def test_non_2xx(self):
        client, _ = _client(_Response(status_code=502, reason="Bad Gateway"))
        with pytest.raises(FetchError) as excinfo:
            client.fetch_json("/treasury-data")
        assert excinfo.value.status == 502
        assert str(excinfo.value) == "Failed to fetch /treasury-data: Bad Gateway"

    def test_missing_reason(self):
        client, _ = _client(_Response(status_code=404, reason=""))
        with pytest.raises(FetchError, match="HTTP 404"):
            client.fetch_json("/data-version")

    def test_invalid_json(self):
        client, _ = _client(_Response(invalid_json=True))
        with pytest.raises(FetchError, match="Invalid JSON body"):
            client.fetch_json("/treasury-stats")

    def test_transport_error(self):
        client, _ = _client(error=requests.ConnectionError("connection refused"))
        with pytest.raises(FetchError) as excinfo:
            client.fetch_json("/treasury-stats")
        assert excinfo.value.status is None
        assert "connection refused" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, requests.ConnectionError)

    def test_single_attempt(self):
        client, session = _client(_Response(status_code=500, reason="Server Error"))
        with pytest.raises(FetchError):
            client.fetch_json("/treasury-stats")
        assert len(session.requests) == 1


class TestTypedLoads:
    def test_fetch_returns_raw_json(self, treasury_payload):
        client, session = _client(_Response(body=treasury_payload))
        assert client.fetch("treasury-data") == treasury_payload
        assert session.requests[0][0].endswith("/treasury-data")

    def test_treasury_data(self, treasury_payload):
        client, _ = _client(_Response(body=treasury_payload))
        data = client.get_treasury_data()
        assert isinstance(data, TreasuryData)
        assert data.trsc[0].id == "trsc-1"

    def test_treasury_stats(self, stats_payload):
        client, _ = _client(_Response(body=stats_payload))
        assert isinstance(client.get_treasury_stats(), TreasuryStats)

    def test_calendar_events(self, calendar_payload):
        client, _ = _client(_Response(body=calendar_payload))
        assert [e.id for e in client.get_calendar_events()] == ["ev-3", "ev-1", "ev-2", "ev-bad"]

    def test_data_version(self):
        client, _ = _client(_Response(body={"lastModified": 1}))
        assert client.get_data_version() == DataVersion(last_modified=1)

    def test_unknown_resource(self):
        client, _ = _client(_Response(body={}))
        with pytest.raises(KeyError):
            client.fetch("nope")


def test_default_session_carries_user_agent():
    client = TreasuryClient(_config())
    try:
        assert client.session.headers["User-Agent"] == client.config.user_agent
    finally:
        client.close()


def test_close_leaves_injected_session():
    client, session = _client(_Response(body={}))
    client.close()
    assert client.session is session
