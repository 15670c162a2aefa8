# citegraph/service.py

"""
AnalyticsService: the one object a transport layer talks to.

It owns a GraphStore, the three engines bound to it, the interactive session
state (what was just added, what is selected, the last betweenness / k-core
result used for colouring) and a re-entrant lock. Every overlay mutation and
every analytics pass runs under that lock, so concurrent request handlers
can never mutate the overlay while a BFS or a peeling pass walks it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from citegraph.analysis.betweenness import BetweennessEngine
from citegraph.analysis.hindex import HIndexEngine, HIndexResult
from citegraph.analysis.kcore import KCoreEngine, KCoreResult
from citegraph.config.settings import Settings, get_settings
from citegraph.errors import AnalysisTooLargeError
from citegraph.export.views import (
    GlobalStatsView,
    GraphView,
    StatsView,
    build_global_stats_view,
    build_graph_view,
    build_stats_view,
)
from citegraph.graph.store import GraphStore
from citegraph.models.paper import Paper

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    last_betweenness: Optional[Dict[str, float]] = None
    last_kcore: Optional[FrozenSet[str]] = None
    newly_added: Set[str] = field(default_factory=set)
    selected_id: Optional[str] = None

    def reset(self) -> None:
        self.last_betweenness = None
        self.last_kcore = None
        self.newly_added = set()
        self.selected_id = None


class AnalyticsService:
    def __init__(
        self,
        store: Optional[GraphStore] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.store = store if store is not None else GraphStore()
        self.settings = settings if settings is not None else get_settings()
        self.session = SessionState()

        self._lock = threading.RLock()
        self._betweenness = BetweennessEngine(self.store)
        self._kcore = KCoreEngine(self.store)
        self._hindex = HIndexEngine(self.store)

    # ------------------------------------------------------------------
    # Graph lifecycle
    # ------------------------------------------------------------------

    def load(self, papers: Iterable[Paper]) -> None:
        """Replace the corpus and start a fresh session."""
        with self._lock:
            self.store.load(papers)
            self.store.clear_visible()
            self.session.reset()

    def clear(self) -> None:
        with self._lock:
            self.store.clear_visible()
            self.session.reset()
        logger.info("Visible graph cleared")

    # ------------------------------------------------------------------
    # Overlay mutation
    # ------------------------------------------------------------------

    def select(self, id_or_short_id: str) -> Optional[Paper]:
        """
        Make a paper visible and mark it as the newly added node.

        Accepts a full id or a short id; returns None for unknown papers.
        """
        with self._lock:
            paper = self.store.resolve(id_or_short_id)
            if paper is None:
                return None

            self.session.newly_added = {paper.id}
            self.store.add_visible(paper.id)

        logger.info("Selected paper %s", paper.short_id)
        return paper

    def add_visible(self, paper_ids: Iterable[str]) -> int:
        with self._lock:
            return self.store.add_visible_many(paper_ids)

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def h_index(self, id_or_short_id: str) -> Optional[Tuple[HIndexResult, int]]:
        """
        Compute the h-index of a paper and import its h-core into the
        overlay.

        Returns (result, number of h-core papers that became visible), or
        None for an unknown paper.
        """
        with self._lock:
            paper = self.store.resolve(id_or_short_id)
            if paper is None:
                return None

            result = self._hindex.compute(paper.id)
            self.session.selected_id = paper.id

            added = {cid for cid in result.h_core if self.store.add_visible(cid)}
            self.session.newly_added = added

        logger.info(
            "H-index (%s): %d, h-core: %d papers, h-median: %.1f",
            paper.short_id,
            result.h_index,
            len(result.h_core),
            result.h_median,
        )
        return result, len(added)

    def betweenness(self) -> Dict[str, float]:
        limit = self.settings.MAX_VISIBLE_FOR_BETWEENNESS
        with self._lock:
            size = self.store.visible_node_count
            if limit is not None and size > limit:
                raise AnalysisTooLargeError("betweenness", size, limit)

            scores = self._betweenness.compute()
            self.session.last_betweenness = scores
            self.session.last_kcore = None

        logger.info("Betweenness centrality computed for %d papers", len(scores))
        return dict(scores)

    def k_core(self, k: int) -> KCoreResult:
        with self._lock:
            result = self._kcore.compute(k)
            self.session.last_kcore = frozenset(result.nodes)
            self.session.last_betweenness = None

        logger.info(
            "K-core (k=%d): %d papers, %d edges",
            k,
            result.node_count,
            result.edge_count,
        )
        return result

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def search(self, query: str) -> List[Paper]:
        query = (query or "").strip()
        if len(query) < self.settings.SEARCH_MIN_QUERY_LENGTH:
            return []
        return self.store.search(query, limit=self.settings.SEARCH_LIMIT)

    def graph_view(self) -> GraphView:
        with self._lock:
            return build_graph_view(
                self.store,
                newly_added=frozenset(self.session.newly_added),
                betweenness=self.session.last_betweenness,
                kcore_nodes=self.session.last_kcore,
                selected_id=self.session.selected_id,
            )

    def stats(self) -> StatsView:
        with self._lock:
            return build_stats_view(self.store)

    def global_stats(self) -> GlobalStatsView:
        with self._lock:
            return build_global_stats_view(self.store)
