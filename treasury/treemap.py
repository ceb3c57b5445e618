"""TRSC → PSSC budget treemap tiles.

One parent tile per routing contract sized by its balance, with one child
tile per child link.  Child amounts prefer the child's own balance, then
its budget, then the linked PSSC budget.
"""

from typing import Any, Iterable, Optional, Sequence

from treasury.contracts import index_by_fund_tx
from treasury.models import ProjectContract, RoutingContract


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def build_treemap(trsc: Sequence[RoutingContract],
                  pssc: Iterable[ProjectContract]) -> list[dict[str, Any]]:
    if not trsc:
        return []

    by_fund_tx = index_by_fund_tx(pssc)
    tiles = []
    for contract in trsc:
        children = []
        for child in contract.children:
            linked: Optional[ProjectContract] = by_fund_tx.get(child.id)
            linked_budget = linked.budget if linked else None
            name = _first(child.vendor, linked.project if linked else None, "Unknown")
            children.append({
                "id": child.id,
                "name": name,
                "vendor": name,
                "value": _first(child.balance, child.budget, linked_budget, 0.0),
                "claimed": _first(linked.claimed if linked else None, child.claimed, 0.0),
                "status": _first(linked.status if linked else None, child.status),
            })
        tiles.append({
            "id": contract.id,
            "name": contract.name,
            "value": contract.balance,
            "children": children,
        })
    return tiles
