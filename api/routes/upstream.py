"""Pass-through endpoints for the four upstream resources.

Each route performs exactly one upstream GET and returns the JSON body
unchanged, with a ``Cache-Control`` header tuned to how often that resource
changes.  Any failure becomes a 500 with ``{"message", "error"}``.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import get_client
from api.models import UpstreamErrorResponse
from treasury.client import TreasuryClient
from treasury.errors import FetchError
from treasury.resources import (
    CALENDAR_EVENTS,
    DATA_VERSION,
    TREASURY_DATA,
    TREASURY_STATS,
    get_resource,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upstream"])

_ERRORS = {500: {"model": UpstreamErrorResponse, "description": "Upstream fetch failed"}}


def _proxy(client: TreasuryClient, name: str) -> JSONResponse:
    spec = get_resource(name)
    try:
        data = client.fetch(name)
    except FetchError as exc:
        logger.warning("proxy failed resource=%s error=%s", name, exc)
        return JSONResponse(
            status_code=500,
            content={"message": spec.error_message, "error": str(exc)},
        )
    except Exception as exc:
        logger.exception("proxy failed resource=%s", name)
        return JSONResponse(
            status_code=500,
            content={"message": spec.error_message, "error": str(exc) or type(exc).__name__},
        )
    return JSONResponse(content=data, headers={"Cache-Control": spec.cache_control})


@router.get(
    "/treasury-data",
    summary="Routing and project contracts",
    responses=_ERRORS,
)
def treasury_data(client: TreasuryClient = Depends(get_client)):
    """Upstream ``/treasury-data``; ``s-maxage=300, stale-while-revalidate=600``."""
    return _proxy(client, TREASURY_DATA)


@router.get(
    "/treasury-stats",
    summary="Headline treasury statistics",
    responses=_ERRORS,
)
def treasury_stats(client: TreasuryClient = Depends(get_client)):
    """Upstream ``/treasury-stats``; ``s-maxage=300, stale-while-revalidate=600``."""
    return _proxy(client, TREASURY_STATS)


@router.get(
    "/calendar-events",
    summary="Milestone calendar events",
    responses=_ERRORS,
)
def calendar_events(client: TreasuryClient = Depends(get_client)):
    """Upstream ``/calendar-events``; ``s-maxage=600, stale-while-revalidate=900``."""
    return _proxy(client, CALENDAR_EVENTS)


@router.get(
    "/data-version",
    summary="Upstream data version",
    responses=_ERRORS,
)
def data_version(client: TreasuryClient = Depends(get_client)):
    """Upstream ``/data-version``; ``s-maxage=60, stale-while-revalidate=120``."""
    return _proxy(client, DATA_VERSION)
