# citegraph/graph/store.py

"""
In-memory citation graph plus the "visible" overlay used to scope analytics.

The full graph is a `networkx.DiGraph` whose edges run from a citing paper to
the paper it references. Each node carries its `Paper` under the `paper`
attribute. `DiGraph` keeps successor and predecessor maps, so neighbour
lookups are O(1) in both directions.

The graph is rebuilt wholesale by `load()` and treated as immutable
afterwards. The visible overlay is the only mutable state. This class does
not lock anything: callers that share a store across threads must serialize
mutation and analytics themselves (see `citegraph.service`).

Every place where iteration order is observable (short-id lookup, the
"most cited" aggregates, search results) walks nodes in ascending id order,
so ties always resolve to the lexicographically smallest id.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

import networkx as nx

from citegraph.models.paper import Paper

logger = logging.getLogger(__name__)

PAPER_ATTR = "paper"

PaperCount = Tuple[Optional[Paper], int]


class GraphStore:
    def __init__(self) -> None:
        self._graph: nx.DiGraph = nx.DiGraph()
        self._sorted_ids: List[str] = []
        self._visible: Set[str] = set()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def load(self, papers: Iterable[Paper]) -> None:
        """
        Replace the whole graph from a list of papers.

        - All nodes are added first, so forward references resolve.
        - A reference to an id that is not in the corpus is dropped.
        - If two records share an id, the later one supplies the metadata
          and the references of all of them are kept.
        - The visible overlay is kept, minus ids that no longer exist in the
          new corpus. Call `clear_visible()` to drop it entirely.
        """
        records = list(papers)
        by_id = {paper.id: paper for paper in records}

        G = nx.DiGraph()
        for paper_id, paper in by_id.items():
            G.add_node(paper_id, **{PAPER_ATTR: paper})

        dropped = 0
        for paper in records:
            for ref_id in paper.referenced_works:
                if ref_id in by_id:
                    G.add_edge(paper.id, ref_id)
                else:
                    dropped += 1

        # Single assignment so readers never observe a half-built graph.
        self._graph, self._sorted_ids = G, sorted(by_id)
        self._visible.intersection_update(by_id)

        logger.info(
            "Loaded citation graph: %d papers, %d citation edges (%d dangling references dropped)",
            G.number_of_nodes(),
            G.number_of_edges(),
            dropped,
        )

    # ------------------------------------------------------------------
    # Visible overlay
    # ------------------------------------------------------------------

    def add_visible(self, paper_id: str) -> bool:
        """
        Add one id to the overlay. Unknown ids are ignored.

        Returns True only if the id was not visible before.
        """
        if paper_id not in self._graph or paper_id in self._visible:
            return False
        self._visible.add(paper_id)
        return True

    def add_visible_many(self, paper_ids: Iterable[str]) -> int:
        """Add several ids; returns how many were newly added."""
        return sum(1 for paper_id in paper_ids if self.add_visible(paper_id))

    def clear_visible(self) -> None:
        self._visible.clear()

    def visible_nodes(self) -> FrozenSet[str]:
        """Snapshot of the overlay; mutating the store later does not affect it."""
        return frozenset(self._visible)

    def is_visible(self, paper_id: str) -> bool:
        return paper_id in self._visible

    def visible_papers(self) -> List[Paper]:
        return [self._paper(paper_id) for paper_id in sorted(self._visible)]

    # ------------------------------------------------------------------
    # Node / edge queries (full graph)
    # ------------------------------------------------------------------

    @property
    def graph(self) -> nx.DiGraph:
        """Read-only view of the full directed graph."""
        return self._graph.copy(as_view=True)

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    @property
    def visible_node_count(self) -> int:
        return len(self._visible)

    @property
    def visible_edge_count(self) -> int:
        """Directed citation edges whose endpoints are both visible."""
        return sum(self.visible_out_degree(paper_id) for paper_id in self._visible)

    def has_node(self, paper_id: str) -> bool:
        return paper_id in self._graph

    def referenced_papers(self, paper_id: str) -> Set[str]:
        """Ids this paper cites (out-neighbours), ignoring the overlay."""
        if paper_id not in self._graph:
            return set()
        return set(self._graph.successors(paper_id))

    def citing_papers(self, paper_id: str) -> Set[str]:
        """Ids of papers citing this one (in-neighbours), ignoring the overlay."""
        if paper_id not in self._graph:
            return set()
        return set(self._graph.predecessors(paper_id))

    def visible_in_degree(self, paper_id: str) -> int:
        if paper_id not in self._graph:
            return 0
        return sum(1 for src in self._graph.predecessors(paper_id) if src in self._visible)

    def visible_out_degree(self, paper_id: str) -> int:
        if paper_id not in self._graph:
            return 0
        return sum(1 for dst in self._graph.successors(paper_id) if dst in self._visible)

    def global_in_degree(self, paper_id: str) -> int:
        if paper_id not in self._graph:
            return 0
        return self._graph.in_degree(paper_id)

    def global_out_degree(self, paper_id: str) -> int:
        if paper_id not in self._graph:
            return 0
        return self._graph.out_degree(paper_id)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _paper(self, paper_id: str) -> Paper:
        return self._graph.nodes[paper_id][PAPER_ATTR]

    def get_paper(self, paper_id: str) -> Optional[Paper]:
        if paper_id not in self._graph:
            return None
        return self._paper(paper_id)

    def find_by_short_id(self, short_id: str) -> Optional[Paper]:
        """
        Case-insensitive exact match on `Paper.short_id`.

        Several papers can share a short id (different id prefixes); the
        first one in ascending id order wins.
        """
        wanted = short_id.casefold()
        for paper_id in self._sorted_ids:
            paper = self._paper(paper_id)
            if paper.short_id.casefold() == wanted:
                return paper
        return None

    def resolve(self, id_or_short_id: str) -> Optional[Paper]:
        """Exact id first, then short id."""
        return self.get_paper(id_or_short_id) or self.find_by_short_id(id_or_short_id)

    def all_papers(self) -> List[Paper]:
        return [self._paper(paper_id) for paper_id in self._sorted_ids]

    def search(self, query: str, limit: int = 20) -> List[Paper]:
        """
        Substring search over short id, title and author names.

        Matching is case-insensitive; results come in ascending id order.
        """
        q = query.casefold()
        hits: List[Paper] = []
        if limit <= 0:
            return hits

        for paper in self.all_papers():
            if (
                q in paper.short_id.casefold()
                or q in paper.title.casefold()
                or q in paper.authors_text.casefold()
            ):
                hits.append(paper)
                if len(hits) >= limit:
                    break
        return hits

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def _max_by(self, candidates: Iterable[str], count_fn) -> PaperCount:
        # Strict '>' over ascending ids keeps the smallest id on ties.
        best: Optional[Paper] = None
        best_count = 0
        for paper_id in sorted(candidates):
            count = count_fn(paper_id)
            if count > best_count:
                best, best_count = self._paper(paper_id), count
        return best, best_count

    def most_cited_visible(self) -> PaperCount:
        return self._max_by(self._visible, self.visible_in_degree)

    def most_referencing_visible(self) -> PaperCount:
        return self._max_by(self._visible, self.visible_out_degree)

    def global_max_cited(self) -> PaperCount:
        return self._max_by(self._sorted_ids, self.global_in_degree)

    def global_max_referencing(self) -> PaperCount:
        return self._max_by(self._sorted_ids, self.global_out_degree)
