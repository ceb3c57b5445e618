"""
Tests for treasury/models.py — building records from upstream JSON.

Covers wire-name mapping, absent-versus-zero amounts, tolerance of
malformed payloads, and the derived properties used by the views.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from treasury.models import (
    CalendarEvent,
    ChildLink,
    DataVersion,
    ProjectContract,
    RoutingContract,
    TreasuryData,
    TreasuryStats,
)


class TestTreasuryData:
    def test_parses_sample(self, treasury_data):
        assert [c.id for c in treasury_data.trsc] == ["trsc-1", "trsc-2"]
        assert len(treasury_data.pssc) == 4
        assert treasury_data.total_treasury_ada == 1_500_000_000

    def test_wire_names(self, treasury_data):
        core = treasury_data.trsc[0]
        assert core.incoming_to_trsc == 8_000_000
        child = core.children[0]
        assert child.budget == 1_000_000
        assert child.claimed == 250_000

    def test_missing_collections_are_empty(self):
        data = TreasuryData.from_dict({})
        assert data.trsc == ()
        assert data.pssc == ()
        assert data.total_treasury_ada is None

    def test_non_mapping_payload(self):
        assert TreasuryData.from_dict(None) == TreasuryData()
        assert TreasuryData.from_dict(["unexpected"]) == TreasuryData()

    def test_non_mapping_items_skipped(self):
        data = TreasuryData.from_dict({"trsc": [None, 3, {"id": "t"}], "pssc": "nope"})
        assert [c.id for c in data.trsc] == ["t"]
        assert data.pssc == ()


class TestRoutingContract:
    def test_display_child_count_prefers_counter(self, treasury_data):
        core = treasury_data.trsc[0]
        assert len(core.children) == 2
        assert core.display_child_count == 3

    def test_display_child_count_falls_back_to_length(self, treasury_data):
        assert treasury_data.trsc[1].display_child_count == 2

    def test_child_ids(self, treasury_data):
        assert treasury_data.trsc[1].child_ids == frozenset({"tx-c", "tx-d"})

    def test_defaults(self):
        contract = RoutingContract.from_dict({"id": "x"})
        assert contract.currency == "ADA"
        assert contract.balance == 0.0
        assert contract.incoming_to_trsc is None

    def test_to_dict_includes_display_count(self, treasury_data):
        data = treasury_data.trsc[0].to_dict()
        assert data["display_child_count"] == 3
        assert data["children"][0]["id"] == "tx-a"


class TestChildLink:
    def test_outgoing_amount_prefers_budget(self):
        assert ChildLink("a", budget=10.0, balance=99.0).outgoing_amount == 10.0

    def test_outgoing_amount_falls_back_to_balance(self):
        assert ChildLink("a", balance=7.0).outgoing_amount == 7.0

    def test_outgoing_amount_zero_budget_is_present(self):
        assert ChildLink("a", budget=0.0, balance=7.0).outgoing_amount == 0.0

    def test_outgoing_amount_defaults_to_zero(self):
        assert ChildLink("a").outgoing_amount == 0.0

    def test_string_amounts(self):
        child = ChildLink.from_dict({"id": "a", "budgetAda": "1,500 ₳"})
        assert child.budget == 1500.0


class TestProjectContract:
    def test_label_prefers_vendor(self, treasury_data):
        assert treasury_data.pssc[0].label == "Authentic Labs"

    def test_label_falls_back_to_project(self, treasury_data):
        assert treasury_data.pssc[2].label == "Gamma Research"

    def test_missing_amounts_stay_none(self):
        contract = ProjectContract.from_dict({"fund_tx": "tx"})
        assert contract.budget is None
        assert contract.claimed is None
        assert contract.status == 0

    def test_milestones(self):
        contract = ProjectContract.from_dict({
            "fund_tx": "tx",
            "milestones": [{"title": "M1", "amount_ada": "100", "date": "2024-01-01"}],
        })
        assert contract.milestones[0].title == "M1"
        assert contract.milestones[0].amount_ada == 100.0


def test_stats_defaults_to_zero():
    stats = TreasuryStats.from_dict({"trsc_count": "2"})
    assert stats.trsc_count == 2
    assert stats.annual_budget == 0.0
    assert stats.to_dict()["pssc_count"] == 0


def test_calendar_event_from_dict(calendar_events):
    first = calendar_events[0]
    assert first.id == "ev-3"
    assert first.all_day is True
    assert first.extended_props["vendor"] == "Beta Co"
    assert calendar_events[2].extended_props == {}


def test_calendar_event_list_requires_list():
    assert CalendarEvent.list_from_json({"events": []}) == ()


class TestDataVersion:
    def test_last_modified_at(self):
        version = DataVersion.from_dict({"lastModified": 1709251200000})
        assert version.last_modified_at == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_missing(self):
        assert DataVersion.from_dict({}).last_modified_at is None
