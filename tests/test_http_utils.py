"""
Tests for HTTP session utilities — utils/http.py

Tests RetryStrategy and SessionManager without requiring network calls.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.http import DEFAULT_HEADERS, RetryStrategy, SessionManager


# ── RetryStrategy tests ──────────────────────────────────────────────────────

class TestRetryStrategy:
    def test_defaults(self):
        rs = RetryStrategy()
        assert rs.max_retries == 0
        assert rs.backoff_factor == 0.5
        assert 503 in rs.status_forcelist

    def test_custom_params(self):
        rs = RetryStrategy(max_retries=2, backoff_factor=1.0, status_forcelist=[502])
        assert rs.max_retries == 2
        assert rs.status_forcelist == [502]

    def test_get_retry_object(self):
        retry = RetryStrategy(max_retries=3, backoff_factor=0.25).get_retry_object()
        assert retry.total == 3
        assert retry.backoff_factor == 0.25
        assert retry.raise_on_status is False

    def test_retry_allowed_methods(self):
        allowed = RetryStrategy().get_retry_object().allowed_methods
        assert "GET" in allowed
        assert "POST" not in allowed


# ── SessionManager tests ─────────────────────────────────────────────────────

class TestSessionManager:
    def test_session_cached(self):
        sm = SessionManager()
        assert sm.session is sm.session
        sm.close()

    def test_default_headers(self):
        with SessionManager() as sm:
            for key, value in DEFAULT_HEADERS.items():
                assert sm.session.headers[key] == value

    def test_extra_headers_override(self):
        with SessionManager(headers={"User-Agent": "test-agent", "Accept": "text/plain"}) as sm:
            assert sm.session.headers["User-Agent"] == "test-agent"
            assert sm.session.headers["Accept"] == "text/plain"

    def test_adapter_uses_retry_strategy(self):
        with SessionManager(retry_strategy=RetryStrategy(max_retries=2)) as sm:
            adapter = sm.session.get_adapter("https://cardanotreasury.fi/api")
            assert adapter.max_retries.total == 2

    def test_close_resets_session(self):
        sm = SessionManager()
        first = sm.session
        sm.close()
        assert sm._session is None
        assert sm.session is not first
        sm.close()
