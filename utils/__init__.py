"""Shared utilities for the treasury explorer."""

# Caching
from utils.cache import CacheEntry, CachedResource, PeriodicCache

# Configuration
from utils.config import AppConfig, Config, UpstreamConfig

# Output formatting
from utils.formatting import (
    format_ada,
    format_ada_compact,
    format_count,
    format_percent,
    truncate_middle,
)

# HTTP utilities
from utils.http import RetryStrategy, SessionManager

# String utilities
from utils.strings import optional_float, optional_int, optional_str, safe_float

__all__ = [
    # Cache
    "CacheEntry",
    "CachedResource",
    "PeriodicCache",
    # Config
    "AppConfig",
    "Config",
    "UpstreamConfig",
    # Formatting
    "format_ada",
    "format_ada_compact",
    "format_count",
    "format_percent",
    "truncate_middle",
    # HTTP
    "RetryStrategy",
    "SessionManager",
    # Strings
    "optional_float",
    "optional_int",
    "optional_str",
    "safe_float",
]
