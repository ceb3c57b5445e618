"""HTTP client for the upstream treasury API.

One GET per call, no retries by default and no schema validation: the
decoded JSON is either returned as-is (:meth:`TreasuryClient.fetch`) or
wrapped in the resource's record type (:meth:`TreasuryClient.load`).
"""

import logging
import time
from typing import Any, Optional

import requests

from treasury.errors import FetchError
from treasury.models import CalendarEvent, DataVersion, TreasuryData, TreasuryStats
from treasury.resources import (
    CALENDAR_EVENTS,
    DATA_VERSION,
    TREASURY_DATA,
    TREASURY_STATS,
    get_resource,
)
from utils.config import UpstreamConfig
from utils.http import RetryStrategy, SessionManager

logger = logging.getLogger(__name__)


class TreasuryClient:
    """Fetches treasury resources from a fixed upstream origin."""

    def __init__(self, config: Optional[UpstreamConfig] = None,
                 session: Optional[requests.Session] = None):
        """Initialize the client.

        Args:
            config: Upstream settings (default: read from the environment)
            session: Pre-built session, mainly for tests. When omitted a
                     pooled session is created from *config*.
        """
        self.config = config or UpstreamConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self.timeout = self.config.timeout_seconds
        self._session_manager: Optional[SessionManager] = None
        if session is None:
            self._session_manager = SessionManager(
                retry_strategy=RetryStrategy(max_retries=self.config.max_retries),
                headers={"User-Agent": self.config.user_agent},
            )
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = self._session_manager.session
        return self._session

    def fetch_json(self, path: str) -> Any:
        """GET ``<base_url><path>`` and return the decoded JSON body.

        Raises:
            FetchError: On transport failure, non-2xx status, or a body that
                is not JSON.
        """
        url = f"{self.base_url}{path}"
        start = time.monotonic()
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("upstream request failed path=%s error=%s", path, exc)
            raise FetchError(path, str(exc) or type(exc).__name__) from exc

        status = response.status_code
        if not 200 <= status < 300:
            reason = response.reason or f"HTTP {status}"
            logger.warning("upstream returned status=%d path=%s", status, path)
            raise FetchError(path, reason, status=status)

        try:
            data = response.json()
        except ValueError as exc:
            raise FetchError(path, "Invalid JSON body", status=status) from exc

        logger.debug("fetched path=%s status=%d duration_ms=%.1f",
                     path, status, (time.monotonic() - start) * 1000)
        return data

    def fetch(self, name: str) -> Any:
        """Raw JSON for a logical resource name such as ``"treasury-data"``."""
        return self.fetch_json(get_resource(name).path)

    def load(self, name: str) -> Any:
        """Typed record(s) for a logical resource name."""
        return get_resource(name).parse(self.fetch(name))

    def get_treasury_data(self) -> TreasuryData:
        return self.load(TREASURY_DATA)

    def get_treasury_stats(self) -> TreasuryStats:
        return self.load(TREASURY_STATS)

    def get_calendar_events(self) -> tuple[CalendarEvent, ...]:
        return self.load(CALENDAR_EVENTS)

    def get_data_version(self) -> DataVersion:
        return self.load(DATA_VERSION)

    def close(self) -> None:
        """Close the pooled session (an injected session is left alone)."""
        if self._session_manager is not None:
            self._session_manager.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
