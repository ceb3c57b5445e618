"""TRSC → PSSC relationship graph with a fixed polar layout.

Routing contracts sit on an outer ring, each one's child links on a small
ring around it, and project contracts that no child link references
(orphans) on a ring around the origin.  The output is plain data for a
graph renderer; positions depend only on input order, so identical input
always yields identical output.

Node ids are unique: the first node placed under an id wins and any later
child or orphan with the same id is skipped together with its edge.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional, Sequence

from treasury.contracts import index_by_fund_tx
from treasury.models import ProjectContract, RoutingContract, TreasuryData

TRSC_COLOR = "#4f46e5"
PSSC_COLOR = "#0ea5e9"
PSSC_UNFUNDED_COLOR = "#94a3b8"
ORPHAN_COLOR = "#38bdf8"
EDGE_COLOR = "rgba(79,70,229,0.25)"

KIND_TRSC = "trsc"
KIND_PSSC = "pssc"
KIND_ORPHAN = "orphan"


def log_size(value: float, min_size: float, max_size: float) -> float:
    """Map a monetary amount onto a visual size in ``[min_size, max_size]``.

    Non-finite and non-positive amounts map to exactly ``min_size``.
    """
    if value is None or not math.isfinite(value) or value <= 0:
        return min_size
    size = math.log10(value + 10) * (min_size / 1.4)
    return min(max_size, max(min_size, size))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class GraphNode:
    id: str
    x: float
    y: float
    label: str
    size: float
    color: str
    kind: str
    budget: Optional[float] = None
    claimed: Optional[float] = None
    progress: Optional[int] = None
    parent: Optional[str] = None
    highlighted: bool = False


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    size: float
    weight: float
    color: str = EDGE_COLOR


class Graph:
    """Insertion-ordered node/edge container that refuses duplicates."""

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._edges: dict[tuple[str, str], GraphEdge] = {}

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def add_node(self, node: GraphNode) -> bool:
        """Add *node* unless its id is taken. Returns whether it was added."""
        if node.id in self._nodes:
            return False
        self._nodes[node.id] = node
        return True

    def add_edge(self, edge: GraphEdge) -> bool:
        key = (edge.source, edge.target)
        if key in self._edges:
            return False
        self._edges[key] = edge
        return True

    def node(self, node_id: str) -> GraphNode:
        return self._nodes[node_id]

    @property
    def nodes(self) -> list[GraphNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[GraphEdge]:
        return list(self._edges.values())

    def nodes_of_kind(self, kind: str) -> list[GraphNode]:
        return [node for node in self._nodes.values() if node.kind == kind]

    def counts(self) -> dict[str, int]:
        return {
            KIND_TRSC: len(self.nodes_of_kind(KIND_TRSC)),
            KIND_PSSC: len(self.nodes_of_kind(KIND_PSSC)),
            KIND_ORPHAN: len(self.nodes_of_kind(KIND_ORPHAN)),
            "edges": len(self._edges),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [asdict(node) for node in self._nodes.values()],
            "edges": [asdict(edge) for edge in self._edges.values()],
            "counts": self.counts(),
        }


def position_trsc(trsc: Sequence[RoutingContract]) -> list[tuple[RoutingContract, float, float]]:
    """Evenly spaced points on a ring of radius ``max(12, n * 6)``."""
    if not trsc:
        return []
    count = len(trsc)
    radius = max(12, count * 6)
    positioned = []
    for index, contract in enumerate(trsc):
        angle = (2 * math.pi * index) / count
        positioned.append((contract, math.cos(angle) * radius, math.sin(angle) * radius))
    return positioned


def _child_ring(child_count: int) -> float:
    spread = 3 + min(6, child_count * 0.45)
    return 4 + spread


def _add_children(graph: Graph, contract: RoutingContract, parent_x: float, parent_y: float,
                  by_fund_tx: dict[str, ProjectContract]) -> None:
    child_count = len(contract.children) or 1
    distance = _child_ring(child_count)

    for index, child in enumerate(contract.children):
        node_id = child.id
        if not node_id or graph.has_node(node_id):
            continue

        angle = (2 * math.pi * index) / child_count
        linked = by_fund_tx.get(node_id)

        label = child.vendor
        if label is None and linked is not None:
            label = linked.project
        label = (label if label is not None else "Project").replace("Authentic ", "", 1)

        budget = child.budget
        if budget is None and linked is not None:
            budget = linked.budget
        if budget is None:
            budget = child.balance
        budget = budget or 0.0

        claimed = child.claimed
        if claimed is None and linked is not None:
            claimed = linked.claimed
        claimed = claimed or 0.0

        graph.add_node(GraphNode(
            id=node_id,
            x=parent_x + math.cos(angle) * distance,
            y=parent_y + math.sin(angle) * distance,
            label=label,
            size=log_size(max(budget, 0.0), 5, 12),
            color=PSSC_UNFUNDED_COLOR if budget == 0 else PSSC_COLOR,
            kind=KIND_PSSC,
            budget=budget,
            claimed=claimed,
            progress=_round_half_up(claimed / budget * 100) if budget > 0 else 0,
            parent=contract.id,
        ))
        graph.add_edge(GraphEdge(
            source=contract.id,
            target=node_id,
            size=0.8 + min(2.5, log_size(budget, 0, 4) / 4),
            weight=budget,
        ))


def _add_orphans(graph: Graph, pssc: Iterable[ProjectContract]) -> None:
    orphans = [contract for contract in pssc if not graph.has_node(contract.fund_tx)]
    count = len(orphans)
    for index, contract in enumerate(orphans):
        node_id = contract.fund_tx
        if not node_id or graph.has_node(node_id):
            continue
        angle = (2 * math.pi * index) / count
        distance = 6 + index * 0.4
        budget = contract.budget or 0.0
        graph.add_node(GraphNode(
            id=node_id,
            x=math.cos(angle) * distance,
            y=math.sin(angle) * distance,
            label=contract.project if contract.project is not None else "Unknown project",
            size=log_size(budget, 4, 10),
            color=ORPHAN_COLOR,
            kind=KIND_ORPHAN,
            budget=budget,
            claimed=contract.claimed or 0.0,
        ))


def build_graph(data: Optional[TreasuryData]) -> Graph:
    """Build the positioned TRSC/PSSC graph for one treasury snapshot."""
    graph = Graph()
    if data is None:
        return graph

    positioned = position_trsc(data.trsc)
    by_fund_tx = index_by_fund_tx(data.pssc)

    for index, (contract, x, y) in enumerate(positioned):
        if not contract.id or graph.has_node(contract.id):
            continue
        amount = max(contract.balance, contract.incoming_to_trsc or 0.0, 0.0)
        graph.add_node(GraphNode(
            id=contract.id,
            x=x,
            y=y,
            label=contract.name,
            size=log_size(amount, 12, 18),
            color=TRSC_COLOR,
            kind=KIND_TRSC,
            budget=amount,
            highlighted=index == 0,
        ))

    for contract, x, y in positioned:
        _add_children(graph, contract, x, y, by_fund_tx)

    _add_orphans(graph, data.pssc)
    return graph
