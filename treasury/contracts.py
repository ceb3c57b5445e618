"""Contract aggregation, filtering and TRSC focus selection.

Project contracts (PSSC) are linked to routing contracts (TRSC) by matching
``ChildLink.id`` against ``ProjectContract.fund_tx``.  That soft join is
built once per snapshot with :func:`index_by_fund_tx`.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from treasury.models import ProjectContract, RoutingContract, TreasuryData

CARDANOSCAN_TX_URL = "https://cardanoscan.io/transaction/{tx}"


def _amount(value: Optional[float]) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return value


@dataclass(frozen=True)
class ContractTotals:
    total_budget: float = 0.0
    total_claimed: float = 0.0
    claimed_ratio: float = 0.0
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_budget": self.total_budget,
            "total_claimed": self.total_claimed,
            "claimed_ratio": self.claimed_ratio,
            "count": self.count,
        }


@dataclass(frozen=True)
class ExplorerView:
    """What the contracts explorer shows for one focus/query combination."""

    trsc: tuple[RoutingContract, ...]
    selected: Optional[RoutingContract]
    pssc: tuple[ProjectContract, ...]
    totals: ContractTotals


def index_by_fund_tx(contracts: Iterable[ProjectContract]) -> dict[str, ProjectContract]:
    """Map ``fund_tx`` to contract. Duplicate keys: the last one wins."""
    return {contract.fund_tx: contract for contract in contracts}


def filter_by_query(contracts: Sequence[ProjectContract], query: Optional[str]) -> Sequence[ProjectContract]:
    """Case-insensitive substring match on vendor (or project).

    An empty query returns *contracts* itself, order untouched.
    """
    if not query:
        return contracts
    needle = query.lower()
    return tuple(
        contract for contract in contracts
        if needle in (contract.label or "").lower()
    )


def aggregate(contracts: Iterable[ProjectContract]) -> ContractTotals:
    """Sum budgets and claims in a single pass; missing amounts count as 0.

    ``claimed_ratio`` is 0 when the total budget is not positive.
    """
    total_budget = 0.0
    total_claimed = 0.0
    count = 0
    for contract in contracts:
        total_budget += _amount(contract.budget)
        total_claimed += _amount(contract.claimed)
        count += 1
    ratio = total_claimed / total_budget if total_budget > 0 else 0.0
    return ContractTotals(total_budget, total_claimed, ratio, count)


def resolve_selected(trsc: Sequence[RoutingContract], focused_id: Optional[str]) -> Optional[RoutingContract]:
    if not focused_id:
        return None
    return next((contract for contract in trsc if contract.id == focused_id), None)


def toggle_focus(current: Optional[str], clicked: str) -> Optional[str]:
    """Clicking the focused TRSC again clears the focus."""
    return None if current == clicked else clicked


def select_contracts(data: Optional[TreasuryData], focused_id: Optional[str] = None,
                     query: Optional[str] = None) -> ExplorerView:
    """Resolve the focused TRSC and the PSSC list to display under it.

    With a focus, the text-filtered PSSC set is narrowed to contracts whose
    ``fund_tx`` is among the focused TRSC's child ids.
    """
    data = data or TreasuryData()
    selected = resolve_selected(data.trsc, focused_id)
    filtered = filter_by_query(data.pssc, query)
    if selected is not None:
        child_ids = selected.child_ids
        filtered = tuple(contract for contract in filtered if contract.fund_tx in child_ids)
    shown = tuple(filtered)
    return ExplorerView(trsc=data.trsc, selected=selected, pssc=shown,
                        totals=aggregate(shown))


def describe_contract(contract: ProjectContract) -> dict[str, Any]:
    """Row view of one PSSC for the explorer list."""
    budget = _amount(contract.budget)
    claimed = _amount(contract.claimed)
    return {
        "fund_tx": contract.fund_tx,
        "vendor": contract.label or "Unknown vendor",
        "status": contract.status,
        "budget": budget,
        "claimed": claimed,
        "progress": min(claimed / budget, 1.0) if budget > 0 else 0.0,
        "fund_date": contract.fund_date,
        "tx_url": CARDANOSCAN_TX_URL.format(tx=contract.fund_tx),
    }
