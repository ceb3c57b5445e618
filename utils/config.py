"""Configuration management for the treasury explorer.

Settings come from environment variables with defaults, so the application
runs out of the box without any configuration file.
"""

import os as _os
from typing import Any, Dict

DEFAULT_UPSTREAM_URL = "https://cardanotreasury.fi/api"
DEFAULT_USER_AGENT = "cardano-treasury-explorer/1.0"


class Config:
    """Base configuration class for organizing application settings."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all public config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary, starting from the defaults.

        Args:
            data: Configuration overrides

        Returns:
            Config instance with values from dictionary
        """
        config = cls()
        for key, value in data.items():
            setattr(config, key, value)
        return config


class UpstreamConfig(Config):
    """Settings for talking to the upstream treasury API.

    Environment variables:
        TREASURY_API_BASE_URL: Upstream origin (default: https://cardanotreasury.fi/api)
        TREASURY_HTTP_TIMEOUT: Per-request timeout in seconds (default: 15)
        TREASURY_MAX_RETRIES: Transport-level retries (default: 0)
        TREASURY_USER_AGENT: User-Agent header sent upstream
    """

    def __init__(self) -> None:
        super().__init__()
        self.base_url = _os.getenv("TREASURY_API_BASE_URL", DEFAULT_UPSTREAM_URL).rstrip("/")
        self.timeout_seconds = float(_os.getenv("TREASURY_HTTP_TIMEOUT", "15"))
        self.max_retries = int(_os.getenv("TREASURY_MAX_RETRIES", "0"))
        self.user_agent = _os.getenv("TREASURY_USER_AGENT", DEFAULT_USER_AGENT)


class AppConfig(UpstreamConfig):
    """Application-level configuration loaded from environment variables.

    Environment variables (in addition to UpstreamConfig):
        APP_PORT: API server port (default: 8000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
    """

    def __init__(self) -> None:
        super().__init__()
        self.api_port = int(_os.getenv("APP_PORT", "8000"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
