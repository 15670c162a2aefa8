# citegraph/analysis/betweenness.py

"""
Betweenness centrality over the visible subgraph (Brandes, 2001).

Citation direction is discarded: the metric is computed on the undirected
projection of the induced subgraph, so it measures how often a paper lies
on a shortest path between two other visible papers, not citation flow.

For every source `s` a BFS yields
  - dist[w]:  shortest-path length from s to w,
  - sigma[w]: number of distinct shortest s-w paths,
  - preds[w]: neighbours of w that sit one step closer to s.
Nodes are then popped in non-increasing distance order and each one pushes
its dependency back to its predecessors:

    delta[v] += sigma[v] / sigma[w] * (1 + delta[w])

Summing over every source counts each unordered pair twice, hence the final
division by 2. Complexity is O(V * E) on the projection.

Scores are raw pair counts (no 1/((n-1)(n-2)) scaling), i.e. the same
numbers as `networkx.betweenness_centrality(G, normalized=False)`.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Mapping, Tuple

from citegraph.graph.projection import sorted_adjacency, undirected_projection
from citegraph.graph.store import GraphStore


def _single_source_dependencies(
    source: str,
    adjacency: Mapping[str, List[str]],
) -> Dict[str, float]:
    """
    Run one BFS from `source` and return the accumulated dependency of
    every node reached (source excluded).
    """
    preds: Dict[str, List[str]] = {source: []}
    sigma: Dict[str, int] = {source: 1}
    dist: Dict[str, int] = {source: 0}
    order: List[str] = []

    queue = deque([source])
    while queue:
        v = queue.popleft()
        order.append(v)
        for w in adjacency[v]:
            if w not in dist:
                dist[w] = dist[v] + 1
                sigma[w] = 0
                preds[w] = []
                queue.append(w)
            if dist[w] == dist[v] + 1:
                sigma[w] += sigma[v]
                preds[w].append(v)

    delta: Dict[str, float] = dict.fromkeys(order, 0.0)
    # BFS order reversed is non-increasing in distance.
    for w in reversed(order):
        coeff = (1.0 + delta[w]) / sigma[w]
        for v in preds[w]:
            delta[v] += sigma[v] * coeff

    del delta[source]
    return delta


class BetweennessEngine:
    """Stateless calculator bound to a store's current overlay."""

    def __init__(self, store: GraphStore) -> None:
        self._store = store

    def compute(self) -> Dict[str, float]:
        """
        Betweenness score for every visible node.

        With fewer than two visible nodes every score is 0.0.
        """
        visible = sorted(self._store.visible_nodes())
        betweenness: Dict[str, float] = dict.fromkeys(visible, 0.0)
        if len(visible) < 2:
            return betweenness

        adjacency = sorted_adjacency(undirected_projection(self._store, visible))

        for source in visible:
            for w, dep in _single_source_dependencies(source, adjacency).items():
                betweenness[w] += dep

        for node in visible:
            betweenness[node] /= 2.0

        return betweenness


def top_scores(scores: Mapping[str, float], n: int = 10) -> List[Tuple[str, float]]:
    """Highest scores first; equal scores are ordered by id."""
    ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
    return ranked[: max(n, 0)]
