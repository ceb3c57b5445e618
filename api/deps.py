"""
FastAPI dependencies for the shared upstream client and periodic cache.

Both objects are created once per application in ``create_app`` and stored
on ``app.state``; routes receive them through ``Depends`` so tests can swap
in fakes.
"""

from fastapi import Request

from treasury.client import TreasuryClient
from utils.cache import PeriodicCache


def get_client(request: Request) -> TreasuryClient:
    """Return the application's upstream client."""
    return request.app.state.client


def get_cache(request: Request) -> PeriodicCache:
    """Return the application's periodic cache."""
    return request.app.state.cache
