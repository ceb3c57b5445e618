"""
Pytest fixtures for the treasury explorer tests.

Provides sample upstream payloads (treasury data, stats, calendar events,
data version), a fake upstream client that serves them without network
access, and a controllable monotonic clock for cache tests.
"""

import copy
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from treasury.models import CalendarEvent, TreasuryData, TreasuryStats
from treasury.resources import (
    CALENDAR_EVENTS,
    DATA_VERSION,
    TREASURY_DATA,
    TREASURY_STATS,
    get_resource,
)

# ── Sample payloads ───────────────────────────────────────────────────────────

_TREASURY_DATA = {
    "trsc": [
        {
            "id": "trsc-1",
            "name": "Core Routing",
            "currency": "ADA",
            "balance": 5_000_000,
            "incomingToTRSC": 8_000_000,
            "children_count": 3,
            "children": [
                {"id": "tx-a", "vendor": "Authentic Labs", "budgetAda": 1_000_000,
                 "claimedAda": 250_000, "status": "active",
                 "fund_date": "2024-03-05T10:00:00Z"},
                {"id": "tx-b", "vendor": "Beta Co", "budgetAda": 500_000,
                 "fund_date": "2024-03-20T00:00:00Z"},
            ],
        },
        {
            "id": "trsc-2",
            "name": "Research",
            "balance": 1_000_000,
            "incomingToTRSC": 0,
            "children": [
                {"id": "tx-c", "balance": 200_000, "fund_date": "2024-05-01"},
                {"id": "tx-d", "fund_date": "not a date"},
            ],
        },
    ],
    "pssc": [
        {"fund_tx": "tx-a", "project": "Alpha Project", "vendor": "Authentic Labs",
         "budget": 1_000_000, "claimed": 250_000, "status": 1,
         "pssc_addr": "addr1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh",
         "fund_date": "2024-03-05"},
        {"fund_tx": "tx-b", "project": "Beta Project", "vendor": "Beta Co",
         "budget": 500_000, "claimed": 500_000, "status": 2},
        {"fund_tx": "tx-c", "project": "Gamma Research", "budget": 200_000, "claimed": 0},
        {"fund_tx": "tx-orphan", "project": "Lonely Project", "vendor": "Solo Dev",
         "budget": 50_000, "claimed": 10_000},
    ],
    "totalTreasuryADA": 1_500_000_000,
}

_TREASURY_STATS = {
    "annual_budget": 300_000_000,
    "trsc_count": 2,
    "pssc_count": 4,
    "claimed_by_vendors_ada": 760_000,
    "allocated_to_trsc_ada": 75_000_000,
    "remaining_treasury_ada": 1_200_000_000,
    "treasury_balance_ada": 1_500_000_000,
    "budget_claimed_percentage": 12.34,
}

_CALENDAR_EVENTS = [
    {"id": "ev-3", "title": "Milestone 2 for undefined", "date": "2024-04-02", "allDay": True,
     "extendedProps": {"amount_ada": 1000, "vendor": "Beta Co",
                       "pssc_addr": "addr1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh"}},
    {"id": "ev-1", "title": "Kickoff", "date": "2024-03-01T00:00:00Z",
     "extendedProps": {"amount_ada": "2,500"}},
    {"id": "ev-2", "title": "", "date": "2024-03-15"},
    {"id": "ev-bad", "title": "Broken", "date": "soon"},
]

# 2024-03-01T00:00:00Z
_DATA_VERSION = {"lastModified": 1709251200000}

SAMPLE_PAYLOADS = {
    TREASURY_DATA: _TREASURY_DATA,
    TREASURY_STATS: _TREASURY_STATS,
    CALENDAR_EVENTS: _CALENDAR_EVENTS,
    DATA_VERSION: _DATA_VERSION,
}


@pytest.fixture()
def treasury_payload():
    return copy.deepcopy(_TREASURY_DATA)


@pytest.fixture()
def treasury_data(treasury_payload):
    return TreasuryData.from_dict(treasury_payload)


@pytest.fixture()
def stats_payload():
    return copy.deepcopy(_TREASURY_STATS)


@pytest.fixture()
def treasury_stats(stats_payload):
    return TreasuryStats.from_dict(stats_payload)


@pytest.fixture()
def calendar_payload():
    return copy.deepcopy(_CALENDAR_EVENTS)


@pytest.fixture()
def calendar_events(calendar_payload):
    return CalendarEvent.list_from_json(calendar_payload)


# ── Fakes ─────────────────────────────────────────────────────────────────────


class FakeTreasuryClient:
    """Serves canned payloads by resource name; records every fetch.

    ``failures`` maps a resource name to the exception its fetch raises.
    """

    base_url = "https://upstream.test/api"

    def __init__(self, payloads=None, failures=None):
        self.payloads = copy.deepcopy(payloads if payloads is not None else SAMPLE_PAYLOADS)
        self.failures = dict(failures or {})
        self.calls: list[str] = []
        self.closed = False

    def fetch(self, name):
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]
        return copy.deepcopy(self.payloads[name])

    def load(self, name):
        return get_resource(name).parse(self.fetch(name))

    def close(self):
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def fake_client():
    return FakeTreasuryClient()


@pytest.fixture()
def make_client():
    """Factory for clients with custom payloads or failures."""
    return FakeTreasuryClient


@pytest.fixture()
def clock():
    return FakeClock()
