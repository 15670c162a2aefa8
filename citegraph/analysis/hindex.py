# citegraph/analysis/hindex.py

"""
Hirsch index of a single paper, computed over the papers that cite it.

Scope policy:
  - The citing set is first restricted to the visible overlay.
  - If that leaves nothing, the citing set is re-derived from the whole
    graph. This keeps a freshly selected paper from reporting h = 0 before
    any of its citing papers have been explored. The price is that the two
    cases use different scopes; the fallback only triggers on an empty
    visible citing set, never on a partial one.
  - Each citing paper's citation count is its global in-degree (whole
    corpus), regardless of the overlay.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from citegraph.graph.store import GraphStore
from citegraph.models.paper import Paper


@dataclass
class HIndexResult:
    paper_id: str
    paper: Optional[Paper] = None
    h_index: int = 0
    # Citing papers, highest citation count first.
    h_core: List[str] = field(default_factory=list)
    h_core_citations: List[int] = field(default_factory=list)
    h_median: float = 0.0


def hirsch_index(counts_desc: Sequence[int]) -> int:
    """Largest h such that the h-th count (1-indexed, descending) is >= h."""
    h = 0
    for rank, count in enumerate(counts_desc, start=1):
        if count >= rank:
            h = rank
        else:
            break
    return h


def median(values: Sequence[int]) -> float:
    """Median of a list of counts; 0.0 for an empty list."""
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2.0
    return float(ordered[mid])


class HIndexEngine:
    def __init__(self, store: GraphStore) -> None:
        self._store = store

    def citing_counts(self, paper_id: str) -> List[Tuple[str, int]]:
        """
        (citing id, global citation count) pairs in ranking order: count
        descending, then id ascending.
        """
        all_citing = self._store.citing_papers(paper_id)
        visible = self._store.visible_nodes()

        citing = all_citing & visible
        if not citing:
            citing = all_citing

        counts = [(cid, self._store.global_in_degree(cid)) for cid in citing]
        counts.sort(key=lambda item: (-item[1], item[0]))
        return counts

    def compute(self, paper_id: str) -> HIndexResult:
        result = HIndexResult(paper_id=paper_id, paper=self._store.get_paper(paper_id))
        if result.paper is None:
            return result

        counts = self.citing_counts(paper_id)
        if not counts:
            return result

        h = hirsch_index([count for _, count in counts])
        core = counts[:h]

        result.h_index = h
        result.h_core = [cid for cid, _ in core]
        result.h_core_citations = [count for _, count in core]
        result.h_median = median(result.h_core_citations)
        return result
