"""Derived dashboard views computed from cached upstream snapshots.

Every view reads the periodic cache with stale-while-revalidate semantics:
the last good snapshot is served while a refresh runs, and a failed refresh
is reported through ``stale``/``error`` instead of failing the request.
When no snapshot has ever loaded the view degrades to its empty form.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from api.deps import get_cache
from api.models import (
    CalendarOut,
    ErrorResponse,
    ContractsViewOut,
    GraphOut,
    OverviewOut,
    TimelineOut,
    TreemapOut,
)
from treasury.calendar_events import (
    UPCOMING_LIMIT,
    format_date_range,
    group_by_month,
    normalize_events,
    upcoming,
)
from treasury.contracts import describe_contract, select_contracts
from treasury.graph import build_graph
from treasury.metrics import stat_cards
from treasury.models import RoutingContract, TreasuryData
from treasury.resources import CALENDAR_EVENTS, DATA_VERSION, TREASURY_DATA, TREASURY_STATS
from treasury.timeline import bucket_timeline
from treasury.treemap import build_treemap
from utils.cache import CacheEntry, PeriodicCache
from utils.formatting import format_ada, format_ada_compact

router = APIRouter(prefix="/views", tags=["views"])

# Upper bound on waiting for a first-ever load; later reads never block.
_FIRST_LOAD_TIMEOUT = 30.0

_ERRORS = {500: {"model": ErrorResponse, "description": "Unexpected server error"}}


def _read(cache: PeriodicCache, *names: str) -> tuple[list[CacheEntry], dict[str, Any]]:
    """Read *names* and merge their freshness into one metadata dict.

    The first failing resource supplies ``error``.  A first load that is
    still running after the wait is reported as a timeout.
    """
    entries = [cache.read(name, timeout=_FIRST_LOAD_TIMEOUT) for name in names]
    errors = []
    for entry in entries:
        if entry.error is not None:
            errors.append(str(entry.error))
        elif not entry.has_value and entry.is_validating:
            errors.append(f"timed out waiting for {entry.name}")
    meta = {
        "stale": bool(errors) or any(cache.is_stale(name) for name in names),
        "error": errors[0] if errors else None,
        "is_validating": any(entry.is_validating for entry in entries),
    }
    return entries, meta


def _treasury(cache: PeriodicCache) -> tuple[TreasuryData, dict[str, Any]]:
    (entry,), meta = _read(cache, TREASURY_DATA)
    return entry.value or TreasuryData(), meta


def _trsc_row(contract: RoutingContract, focused_id: str | None) -> dict[str, Any]:
    return {
        "id": contract.id,
        "name": contract.name,
        "currency": contract.currency,
        "balance": contract.balance,
        "incoming_to_trsc": contract.incoming_to_trsc,
        "child_count": contract.display_child_count,
        "balance_display": format_ada_compact(contract.balance),
        "incoming_display": format_ada_compact(contract.incoming_to_trsc),
        "focused": contract.id == focused_id,
    }


@router.get(
    "/overview",
    summary="Headline stat cards",
    response_model=OverviewOut,
    responses=_ERRORS,
)
def overview(cache: PeriodicCache = Depends(get_cache)):
    """Four stat cards plus the upstream data version.

    Cards show placeholders until stats have loaded once.
    """
    (stats_entry, version_entry), meta = _read(cache, TREASURY_STATS, DATA_VERSION)
    stats = stats_entry.value
    version = version_entry.value
    last_updated = version.last_modified_at if version is not None else None
    return {
        "cards": stat_cards(stats),
        "stats": stats.to_dict() if stats is not None else None,
        "last_updated": last_updated.isoformat() if last_updated else None,
        **meta,
    }


@router.get(
    "/contracts",
    summary="Contract explorer",
    response_model=ContractsViewOut,
    responses=_ERRORS,
)
def contracts(
    q: str = Query("", description="Case-insensitive vendor/project substring"),
    focus: str | None = Query(None, description="TRSC id to narrow the PSSC list to"),
    cache: PeriodicCache = Depends(get_cache),
):
    """TRSC list, the PSSC rows matching *q* (and *focus*), and their totals.

    An unknown *focus* id is ignored; ``focused`` is then null.
    """
    data, meta = _treasury(cache)
    view = select_contracts(data, focused_id=focus, query=q)
    focused_id = view.selected.id if view.selected is not None else None
    totals = view.totals.to_dict()
    totals["total_budget_display"] = format_ada(view.totals.total_budget)
    totals["total_claimed_display"] = format_ada(view.totals.total_claimed)
    return {
        "query": q,
        "focused": focused_id,
        "trsc": [_trsc_row(contract, focused_id) for contract in view.trsc],
        "pssc": [describe_contract(contract) for contract in view.pssc],
        "totals": totals,
        **meta,
    }


@router.get(
    "/timeline",
    summary="Monthly incoming/outgoing ADA",
    response_model=TimelineOut,
    responses=_ERRORS,
)
def timeline(cache: PeriodicCache = Depends(get_cache)):
    data, meta = _treasury(cache)
    return {"points": [bucket.to_dict() for bucket in bucket_timeline(data.trsc)], **meta}


@router.get(
    "/graph",
    summary="Positioned TRSC/PSSC network graph",
    response_model=GraphOut,
    responses=_ERRORS,
)
def graph(cache: PeriodicCache = Depends(get_cache)):
    """Nodes carry layout coordinates; orphan PSSC form an outer ring."""
    data, meta = _treasury(cache)
    return {**build_graph(data).to_dict(), **meta}


@router.get(
    "/treemap",
    summary="TRSC → PSSC budget treemap",
    response_model=TreemapOut,
    responses=_ERRORS,
)
def treemap(cache: PeriodicCache = Depends(get_cache)):
    data, meta = _treasury(cache)
    return {"tiles": build_treemap(data.trsc, data.pssc), **meta}


@router.get(
    "/calendar",
    summary="Milestone calendar grouped by month",
    response_model=CalendarOut,
    responses=_ERRORS,
)
def calendar(
    upcoming_only: bool = Query(True, description="Only events from today (UTC) on"),
    limit: int = Query(UPCOMING_LIMIT, ge=1, le=500, description="Maximum events returned"),
    cache: PeriodicCache = Depends(get_cache),
):
    """Date-sorted events grouped under ``"Month YYYY"`` headings.

    Events whose date cannot be parsed are dropped.
    """
    (entry,), meta = _read(cache, CALENDAR_EVENTS)
    events = normalize_events(entry.value)
    shown = upcoming(events, limit=limit) if upcoming_only else events[:limit]
    return {
        "total_events": len(events),
        "shown_events": len(shown),
        "date_range": format_date_range(shown),
        "groups": [
            {"month": month, "count": len(items), "events": [event.to_dict() for event in items]}
            for month, items in group_by_month(shown)
        ],
        **meta,
    }
