# citegraph/analysis/kcore.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set, Tuple

from citegraph.graph.projection import sorted_adjacency, undirected_projection
from citegraph.graph.store import GraphStore

Edge = Tuple[str, str]


@dataclass
class KCoreResult:
    """
    The k-core of the visible subgraph.

    `nodes` is sorted by id. `edges` holds each undirected edge once as
    (u, v) with u <= v, sorted. A self-citation shows up as (u, u).
    """
    k: int
    nodes: List[str] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)


class KCoreEngine:
    def __init__(self, store: GraphStore) -> None:
        self._store = store

    def compute(self, k: int) -> KCoreResult:
        """
        Maximal subgraph of the undirected visible projection in which every
        node keeps at least `k` neighbours.

        Peeling removes every node whose degree among the remaining nodes is
        below `k`, all at once, and repeats until a round removes nothing.
        The fixpoint does not depend on removal order.

        A self-citation counts once toward its paper's degree.

        `k < 1` or an empty overlay gives an empty result.
        """
        result = KCoreResult(k=k)

        visible = self._store.visible_nodes()
        if k < 1 or not visible:
            return result

        adjacency = sorted_adjacency(undirected_projection(self._store, visible))
        remaining: Set[str] = set(adjacency)

        while True:
            to_remove = [
                node
                for node in remaining
                if sum(1 for nbr in adjacency[node] if nbr in remaining) < k
            ]
            if not to_remove:
                break
            remaining.difference_update(to_remove)

        result.nodes = sorted(remaining)

        seen: Set[frozenset] = set()
        for u in result.nodes:
            for v in adjacency[u]:
                if v not in remaining:
                    continue
                key = frozenset((u, v))
                if key in seen:
                    continue
                seen.add(key)
                result.edges.append((u, v) if u < v else (v, u))

        result.edges.sort()
        return result
