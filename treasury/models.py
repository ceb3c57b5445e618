"""
Record shapes for upstream treasury payloads.

Every record is a frozen dataclass built with ``from_dict`` from the decoded
JSON.  No schema validation happens here: unknown keys are ignored, missing
optional amounts stay ``None`` so fallback chains (budget, then balance, ...)
can tell "absent" from zero, and required scalars default to zero or "".
Sequences are tuples; a refresh produces a new snapshot instead of mutating
an old one.

Wire names that differ from the attribute names:

    incomingToTRSC   -> RoutingContract.incoming_to_trsc
    undeclaredAmount -> RoutingContract.undeclared_amount
    budgetAda        -> ChildLink.budget
    claimedAda       -> ChildLink.claimed
    extendedProps    -> CalendarEvent.extended_props
    totalTreasuryADA -> TreasuryData.total_treasury_ada
    lastModified     -> DataVersion.last_modified
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from treasury.dates import from_epoch_millis
from utils.strings import optional_float, optional_int, optional_str, safe_float


def _mapping(data: Any) -> Mapping:
    return data if isinstance(data, Mapping) else {}


def _records(data: Any, factory) -> tuple:
    if not isinstance(data, (list, tuple)):
        return ()
    return tuple(factory(item) for item in data if isinstance(item, Mapping))


def _first_present(*values: float | None) -> float | None:
    for value in values:
        if value is not None:
            return value
    return None


# ── Stats ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TreasuryStats:
    """Scalar snapshot of treasury totals. Replaced wholesale on refresh."""

    annual_budget: float = 0.0
    trsc_count: int = 0
    pssc_count: int = 0
    claimed_by_vendors_ada: float = 0.0
    allocated_to_trsc_ada: float = 0.0
    remaining_treasury_ada: float = 0.0
    treasury_balance_ada: float = 0.0
    budget_claimed_percentage: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> TreasuryStats:
        data = _mapping(data)
        return cls(
            annual_budget=safe_float(data.get("annual_budget")),
            trsc_count=optional_int(data.get("trsc_count")) or 0,
            pssc_count=optional_int(data.get("pssc_count")) or 0,
            claimed_by_vendors_ada=safe_float(data.get("claimed_by_vendors_ada")),
            allocated_to_trsc_ada=safe_float(data.get("allocated_to_trsc_ada")),
            remaining_treasury_ada=safe_float(data.get("remaining_treasury_ada")),
            treasury_balance_ada=safe_float(data.get("treasury_balance_ada")),
            budget_claimed_percentage=safe_float(data.get("budget_claimed_percentage")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ── Contracts ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Milestone:
    date: str | None = None
    title: str | None = None
    amount_ada: float | None = None
    status: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Milestone:
        data = _mapping(data)
        return cls(
            date=optional_str(data.get("date")),
            title=optional_str(data.get("title")),
            amount_ada=optional_float(data.get("amount_ada")),
            status=optional_str(data.get("status")),
        )


@dataclass(frozen=True)
class ChildLink:
    """A routing contract's reference to one funded project.

    ``id`` matches a :class:`ProjectContract` ``fund_tx`` when the project
    is known upstream; the match is not guaranteed.
    """

    id: str
    vendor: str | None = None
    name: str | None = None
    budget: float | None = None
    balance: float | None = None
    claimed: float | None = None
    status: str | None = None
    milestones: tuple[Milestone, ...] = ()
    fund_date: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ChildLink:
        data = _mapping(data)
        return cls(
            id=optional_str(data.get("id")) or "",
            vendor=optional_str(data.get("vendor")),
            name=optional_str(data.get("name")),
            budget=optional_float(data.get("budgetAda")),
            balance=optional_float(data.get("balance")),
            claimed=optional_float(data.get("claimedAda")),
            status=optional_str(data.get("status")),
            milestones=_records(data.get("milestones"), Milestone.from_dict),
            fund_date=optional_str(data.get("fund_date")),
        )

    @property
    def outgoing_amount(self) -> float:
        """Budget, else balance, else 0."""
        return _first_present(self.budget, self.balance) or 0.0


@dataclass(frozen=True)
class RoutingContract:
    """Treasury routing smart contract (TRSC)."""

    id: str
    name: str = ""
    currency: str = "ADA"
    balance: float = 0.0
    incoming_to_trsc: float | None = None
    children_count: int | None = None
    undeclared_amount: float | None = None
    instance_id: str | None = None
    children: tuple[ChildLink, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> RoutingContract:
        data = _mapping(data)
        return cls(
            id=optional_str(data.get("id")) or "",
            name=optional_str(data.get("name")) or "",
            currency=optional_str(data.get("currency")) or "ADA",
            balance=safe_float(data.get("balance")),
            incoming_to_trsc=optional_float(data.get("incomingToTRSC")),
            children_count=optional_int(data.get("children_count")),
            undeclared_amount=optional_float(data.get("undeclaredAmount")),
            instance_id=optional_str(data.get("instance_id")),
            children=_records(data.get("children"), ChildLink.from_dict),
        )

    @property
    def display_child_count(self) -> int:
        """The denormalized counter when present, else the actual length.

        The two may disagree; neither is corrected.
        """
        if self.children_count is not None:
            return self.children_count
        return len(self.children)

    @property
    def child_ids(self) -> frozenset[str]:
        return frozenset(child.id for child in self.children)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["display_child_count"] = self.display_child_count
        return data


@dataclass(frozen=True)
class ProjectContract:
    """Project smart contract (PSSC), keyed by its funding transaction."""

    fund_tx: str
    id: str | None = None
    project: str | None = None
    vendor: str | None = None
    pssc_addr: str | None = None
    budget: float | None = None
    balance: float | None = None
    claimed: float | None = None
    status: int = 0
    milestones: tuple[Milestone, ...] = ()
    fund_date: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ProjectContract:
        data = _mapping(data)
        return cls(
            fund_tx=optional_str(data.get("fund_tx")) or "",
            id=optional_str(data.get("id")),
            project=optional_str(data.get("project")),
            vendor=optional_str(data.get("vendor")),
            pssc_addr=optional_str(data.get("pssc_addr")),
            budget=optional_float(data.get("budget")),
            balance=optional_float(data.get("balance")),
            claimed=optional_float(data.get("claimed")),
            status=optional_int(data.get("status")) or 0,
            milestones=_records(data.get("milestones"), Milestone.from_dict),
            fund_date=optional_str(data.get("fund_date")),
        )

    @property
    def label(self) -> str | None:
        """Vendor name, falling back to the project name."""
        return self.vendor if self.vendor is not None else self.project

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TreasuryData:
    trsc: tuple[RoutingContract, ...] = ()
    pssc: tuple[ProjectContract, ...] = ()
    total_treasury_ada: float | None = None

    @classmethod
    def from_dict(cls, data: Any) -> TreasuryData:
        data = _mapping(data)
        return cls(
            trsc=_records(data.get("trsc"), RoutingContract.from_dict),
            pssc=_records(data.get("pssc"), ProjectContract.from_dict),
            total_treasury_ada=optional_float(data.get("totalTreasuryADA")),
        )


# ── Calendar / version ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CalendarEvent:
    id: str
    title: str | None = None
    date: str | None = None
    all_day: bool = False
    extended_props: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> CalendarEvent:
        data = _mapping(data)
        return cls(
            id=optional_str(data.get("id")) or "",
            title=optional_str(data.get("title")),
            date=optional_str(data.get("date")),
            all_day=bool(data.get("allDay", False)),
            extended_props=dict(_mapping(data.get("extendedProps"))),
        )

    @classmethod
    def list_from_json(cls, data: Any) -> tuple[CalendarEvent, ...]:
        return _records(data, cls.from_dict)


@dataclass(frozen=True)
class DataVersion:
    last_modified: int | None = None   # epoch millis

    @classmethod
    def from_dict(cls, data: Any) -> DataVersion:
        return cls(last_modified=optional_int(_mapping(data).get("lastModified")))

    @property
    def last_modified_at(self) -> datetime | None:
        if not self.last_modified:
            return None
        return from_epoch_millis(self.last_modified)
