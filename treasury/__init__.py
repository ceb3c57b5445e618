"""Cardano treasury data access and data-shaping layer.

Modules:
- models: record shapes for upstream payloads
- client / resources: upstream fetches and per-resource refresh policy
- contracts, timeline, graph, calendar_events, treemap, metrics: pure
  transforms from snapshots to presentation-ready structures
"""

from treasury.errors import FetchError, ParseError, TreasuryError
from treasury.models import (
    CalendarEvent,
    ChildLink,
    DataVersion,
    Milestone,
    ProjectContract,
    RoutingContract,
    TreasuryData,
    TreasuryStats,
)

__all__ = [
    "FetchError",
    "ParseError",
    "TreasuryError",
    "CalendarEvent",
    "ChildLink",
    "DataVersion",
    "Milestone",
    "ProjectContract",
    "RoutingContract",
    "TreasuryData",
    "TreasuryStats",
]
