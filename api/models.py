"""
Pydantic response models for the API.

Pass-through endpoints return upstream JSON verbatim and only use these
models for their documented error body.  Derived views are validated
against the models below, which also drive the OpenAPI docs.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# ── Errors ────────────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response body for unhandled failures."""
    error: str = Field(..., description="Short error category", examples=["Internal server error"])
    detail: str | None = Field(None, description="Extended error detail")
    status_code: int = Field(..., ge=400, le=599, description="HTTP status code", examples=[500])


class UpstreamErrorResponse(BaseModel):
    """Body returned by pass-through endpoints when the upstream call fails."""
    message: str = Field(..., description="What could not be loaded", examples=["Unable to load treasury data"])
    error: str = Field(..., description="Underlying error message",
                       examples=["Failed to fetch /treasury-data: Bad Gateway"])


# ── Shared view metadata ──────────────────────────────────────────────────────

class ViewMeta(BaseModel):
    """Freshness of the cached snapshot a view was computed from."""
    stale: bool = Field(False, description="Snapshot is past its refresh period or the last refresh failed")
    error: str | None = Field(None, description="Most recent refresh error, shown alongside stale data")
    is_validating: bool = Field(False, description="A background refresh is in flight")


# ── Overview ──────────────────────────────────────────────────────────────────

class StatCardOut(BaseModel):
    title: str = Field(..., examples=["Treasury Balance"])
    value: str = Field(..., examples=["1.23B ₳"])
    change: str | None = Field(None, examples=["845.10M ₳"])
    change_tone: str | None = Field(None, description="positive | neutral")
    change_label: str | None = Field(None, examples=["Remaining"])


class OverviewOut(ViewMeta):
    cards: list[StatCardOut]
    stats: dict[str, Any] | None = Field(None, description="Raw stats snapshot")
    last_updated: str | None = Field(None, description="Upstream data version as ISO-8601 UTC")


# ── Contracts explorer ────────────────────────────────────────────────────────

class RoutingContractOut(BaseModel):
    id: str
    name: str
    currency: str
    balance: float
    incoming_to_trsc: float | None = None
    child_count: int = Field(..., description="Denormalized children_count when present, else len(children)")
    balance_display: str
    incoming_display: str
    focused: bool = False


class ContractRowOut(BaseModel):
    fund_tx: str
    vendor: str
    status: int
    budget: float
    claimed: float
    progress: float = Field(..., description="claimed / budget, capped at 1")
    fund_date: str | None = None
    tx_url: str


class ContractTotalsOut(BaseModel):
    count: int
    total_budget: float
    total_claimed: float
    claimed_ratio: float
    total_budget_display: str
    total_claimed_display: str


class ContractsViewOut(ViewMeta):
    query: str
    focused: str | None = Field(None, description="Focused TRSC id, if it exists in the snapshot")
    trsc: list[RoutingContractOut]
    pssc: list[ContractRowOut]
    totals: ContractTotalsOut


# ── Timeline ──────────────────────────────────────────────────────────────────

class TimelinePointOut(BaseModel):
    month: str = Field(..., examples=["2024-03"])
    display_month: str = Field(..., examples=["Mar 2024"])
    incoming: float
    outgoing: float


class TimelineOut(ViewMeta):
    points: list[TimelinePointOut]


# ── Graph ─────────────────────────────────────────────────────────────────────

class GraphNodeOut(BaseModel):
    id: str
    x: float
    y: float
    label: str
    size: float
    color: str
    kind: str = Field(..., description="trsc | pssc | orphan")
    budget: float | None = None
    claimed: float | None = None
    progress: int | None = None
    parent: str | None = None
    highlighted: bool = False


class GraphEdgeOut(BaseModel):
    source: str
    target: str
    size: float
    weight: float
    color: str


class GraphOut(ViewMeta):
    nodes: list[GraphNodeOut]
    edges: list[GraphEdgeOut]
    counts: dict[str, int]


# ── Treemap ───────────────────────────────────────────────────────────────────

class TreemapChildOut(BaseModel):
    id: str
    name: str
    vendor: str
    value: float
    claimed: float
    status: int | str | None = None


class TreemapTileOut(BaseModel):
    id: str
    name: str
    value: float
    children: list[TreemapChildOut]


class TreemapOut(ViewMeta):
    tiles: list[TreemapTileOut]


# ── Calendar ──────────────────────────────────────────────────────────────────

class CalendarEventOut(BaseModel):
    id: str
    label: str
    date: str
    display_date: str = Field(..., examples=["March 1, 2024"])
    amount_ada: float | None = None
    vendor: str
    pssc_addr: str | None = None
    short_addr: str


class CalendarGroupOut(BaseModel):
    month: str = Field(..., examples=["March 2024"])
    count: int
    events: list[CalendarEventOut]


class CalendarOut(ViewMeta):
    total_events: int = Field(..., description="All events with a parseable date")
    shown_events: int
    date_range: str = Field(..., examples=["Mar 1 – Apr 2"])
    groups: list[CalendarGroupOut]


# ── Health ────────────────────────────────────────────────────────────────────

class HealthOut(BaseModel):
    status: str = Field(..., examples=["ok"])
    upstream: str
    resources: dict[str, dict[str, Any]]
