"""HTTP session utilities for the treasury explorer.

Provides reusable pieces for:
- Retry configuration (urllib3 Retry)
- Pooled ``requests`` sessions with default headers
"""

from typing import Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry as URLRetry

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    # Ask intermediaries not to serve a cached copy; freshness is owned by
    # the periodic cache.
    "Cache-Control": "no-cache",
}


class RetryStrategy:
    """Defines retry behavior for HTTP requests."""

    def __init__(self, max_retries: int = 0, backoff_factor: float = 0.5,
                 status_forcelist: Optional[List[int]] = None):
        """Initialize retry strategy.

        Args:
            max_retries: Maximum number of retry attempts (default: 0,
                         failures surface immediately to the caller)
            backoff_factor: Exponential backoff multiplier (default: 0.5)
            status_forcelist: HTTP status codes to retry on
                            (default: [429, 500, 502, 503, 504])
        """
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.status_forcelist = status_forcelist or [429, 500, 502, 503, 504]

    def get_retry_object(self) -> URLRetry:
        """Get urllib3 Retry object configured with this strategy.

        ``raise_on_status`` is off so that an exhausted retry budget hands
        the last response back instead of raising, letting the caller build
        its own error from the status.
        """
        return URLRetry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=self.status_forcelist,
            allowed_methods=["GET", "HEAD"],
            raise_on_status=False,
        )


class SessionManager:
    """Manages a pooled HTTP session with retries and default headers."""

    def __init__(self, retry_strategy: Optional[RetryStrategy] = None,
                 headers: Optional[Dict[str, str]] = None,
                 pool_connections: int = 4, pool_maxsize: int = 8):
        """Initialize session manager.

        Args:
            retry_strategy: RetryStrategy to use (default: no retries)
            headers: Extra headers merged over DEFAULT_HEADERS
            pool_connections: Number of connection pools to cache
            pool_maxsize: Maximum number of connections per pool
        """
        self.retry_strategy = retry_strategy or RetryStrategy()
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the HTTP session.

        Returns:
            requests.Session object
        """
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.headers)

            adapter = HTTPAdapter(
                max_retries=self.retry_strategy.get_retry_object(),
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize,
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
