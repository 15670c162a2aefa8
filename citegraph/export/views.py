# citegraph/export/views.py

"""
Presentation views: plain pydantic models a frontend can render directly.

Nothing here computes metrics. The builders only read the store and the
results produced by the analytics engines, and attach display attributes
(labels, tooltips, colours, sizes).
"""

from __future__ import annotations

from typing import AbstractSet, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from citegraph.analysis.betweenness import top_scores
from citegraph.analysis.hindex import HIndexResult
from citegraph.analysis.kcore import KCoreResult
from citegraph.graph.store import GraphStore
from citegraph.models.paper import Paper

# Node colours
SELECTED_COLOR = "#E74C3C"
KCORE_COLOR = "#9B59B6"
NEW_COLOR = "#F39C12"
DEFAULT_COLOR = "#95A5A6"

# Edge colours
NEW_EDGE_COLOR = "#E67E22"

BASE_NODE_SIZE = 15
NODE_SIZE_RANGE = 25


# ---------------------------------------------------------------------------
# View models
# ---------------------------------------------------------------------------


class NodeView(BaseModel):
    id: str
    label: str
    title: str = Field(..., description="Tooltip text.")
    color: str
    size: int


class EdgeView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(..., alias="from")
    target: str = Field(..., alias="to")
    color: str
    arrows: str = "to"
    width: float


class GraphView(BaseModel):
    nodes: List[NodeView] = Field(default_factory=list)
    edges: List[EdgeView] = Field(default_factory=list)


class StatsView(BaseModel):
    total_nodes: int
    total_edges: int
    visible_nodes: int
    visible_edges: int
    total_given: int
    total_received: int
    max_cited_id: str = "-"
    max_cited_count: int = 0
    max_cited_title: str = ""
    max_ref_id: str = "-"
    max_ref_count: int = 0
    max_ref_title: str = ""


class GlobalStatsView(BaseModel):
    global_max_cited_id: str = ""
    global_max_cited_count: int = 0
    global_max_cited_title: str = ""
    global_max_ref_id: str = ""
    global_max_ref_count: int = 0
    global_max_ref_title: str = ""


class SelectView(BaseModel):
    success: bool = True
    id: str
    short_id: str


class HCoreEntry(BaseModel):
    short_id: str
    title: str
    citations: int


class HIndexView(BaseModel):
    paper_id: str
    paper_title: str
    h_index: int
    h_median: float
    h_core_count: int
    h_core_nodes: List[HCoreEntry] = Field(default_factory=list)
    new_nodes_added: int = 0


class ScoreEntry(BaseModel):
    id: str
    score: float


class BetweennessView(BaseModel):
    success: bool = True
    node_count: int
    top: List[ScoreEntry] = Field(default_factory=list)


class KCoreView(BaseModel):
    success: bool = True
    k: int
    node_count: int
    edge_count: int
    nodes: List[str] = Field(default_factory=list)


class SearchHit(BaseModel):
    id: str
    short_id: str
    title: str
    year: int


class SearchView(BaseModel):
    results: List[SearchHit] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _tooltip(store: GraphStore, paper: Paper) -> str:
    return "\n".join(
        [
            f"ID: {paper.short_id}",
            f"Authors: {paper.authors_text}",
            paper.short_title,
            f"Year: {paper.year}",
            f"Citations: {store.visible_in_degree(paper.id)}",
            f"References: {store.visible_out_degree(paper.id)}",
        ]
    )


def _node_color(
    paper_id: str,
    selected_id: Optional[str],
    kcore_nodes: Optional[AbstractSet[str]],
    newly_added: AbstractSet[str],
) -> str:
    if selected_id is not None and paper_id == selected_id:
        return SELECTED_COLOR
    if kcore_nodes is not None and paper_id in kcore_nodes:
        return KCORE_COLOR
    if paper_id in newly_added:
        return NEW_COLOR
    return DEFAULT_COLOR


def node_size(score: Optional[float], max_score: float) -> int:
    """Scale a node by its betweenness relative to the current maximum."""
    if score is None or max_score <= 0:
        return BASE_NODE_SIZE
    return BASE_NODE_SIZE + int(NODE_SIZE_RANGE * (score / max_score))


def build_graph_view(
    store: GraphStore,
    *,
    newly_added: AbstractSet[str] = frozenset(),
    betweenness: Optional[Mapping[str, float]] = None,
    kcore_nodes: Optional[AbstractSet[str]] = None,
    selected_id: Optional[str] = None,
) -> GraphView:
    view = GraphView()
    visible = store.visible_nodes()
    scores = betweenness or {}
    max_score = max(scores.values(), default=0.0)

    for paper in store.visible_papers():
        view.nodes.append(
            NodeView(
                id=paper.id,
                label=f"[{store.visible_in_degree(paper.id)}]\n{paper.short_id}",
                title=_tooltip(store, paper),
                color=_node_color(paper.id, selected_id, kcore_nodes, newly_added),
                size=node_size(scores.get(paper.id), max_score),
            )
        )

    for src in sorted(visible):
        for dst in sorted(store.referenced_papers(src)):
            if dst not in visible:
                continue

            if kcore_nodes is not None and src in kcore_nodes and dst in kcore_nodes:
                color, width = KCORE_COLOR, 2.0
            elif src in newly_added or dst in newly_added:
                color, width = NEW_EDGE_COLOR, 1.5
            else:
                color, width = DEFAULT_COLOR, 1.0

            view.edges.append(EdgeView(source=src, target=dst, color=color, width=width))

    return view


def build_stats_view(store: GraphStore) -> StatsView:
    visible = store.visible_nodes()
    stats = StatsView(
        total_nodes=store.node_count,
        total_edges=store.edge_count,
        visible_nodes=len(visible),
        visible_edges=store.visible_edge_count,
        total_given=sum(store.visible_out_degree(pid) for pid in visible),
        total_received=sum(store.visible_in_degree(pid) for pid in visible),
    )

    most_cited, cited_count = store.most_cited_visible()
    if most_cited is not None:
        stats.max_cited_id = most_cited.short_id
        stats.max_cited_count = cited_count
        stats.max_cited_title = most_cited.short_title

    most_ref, ref_count = store.most_referencing_visible()
    if most_ref is not None:
        stats.max_ref_id = most_ref.short_id
        stats.max_ref_count = ref_count
        stats.max_ref_title = most_ref.short_title

    return stats


def build_global_stats_view(store: GraphStore) -> GlobalStatsView:
    view = GlobalStatsView()

    cited, cited_count = store.global_max_cited()
    if cited is not None:
        view.global_max_cited_id = cited.short_id
        view.global_max_cited_count = cited_count
        view.global_max_cited_title = cited.short_title

    ref, ref_count = store.global_max_referencing()
    if ref is not None:
        view.global_max_ref_id = ref.short_id
        view.global_max_ref_count = ref_count
        view.global_max_ref_title = ref.short_title

    return view


def build_hindex_view(store: GraphStore, result: HIndexResult, new_nodes_added: int = 0) -> HIndexView:
    paper = result.paper
    entries = []
    for core_id, citations in zip(result.h_core, result.h_core_citations):
        core_paper = store.get_paper(core_id)
        entries.append(
            HCoreEntry(
                short_id=core_paper.short_id if core_paper else "",
                title=core_paper.short_title if core_paper else "",
                citations=citations,
            )
        )

    return HIndexView(
        paper_id=paper.short_id if paper else result.paper_id,
        paper_title=paper.short_title if paper else "",
        h_index=result.h_index,
        h_median=result.h_median,
        h_core_count=len(result.h_core),
        h_core_nodes=entries,
        new_nodes_added=new_nodes_added,
    )


def build_betweenness_view(
    store: GraphStore,
    scores: Mapping[str, float],
    top_n: int = 10,
) -> BetweennessView:
    top = []
    for paper_id, score in top_scores(scores, top_n):
        paper = store.get_paper(paper_id)
        top.append(ScoreEntry(id=paper.short_id if paper else paper_id, score=round(score, 4)))
    return BetweennessView(node_count=len(scores), top=top)


def build_kcore_view(store: GraphStore, result: KCoreResult) -> KCoreView:
    short_ids = []
    for paper_id in result.nodes:
        paper = store.get_paper(paper_id)
        short_ids.append(paper.short_id if paper else paper_id)
    return KCoreView(
        k=result.k,
        node_count=result.node_count,
        edge_count=result.edge_count,
        nodes=short_ids,
    )


def build_search_view(papers: List[Paper]) -> SearchView:
    return SearchView(
        results=[
            SearchHit(id=p.id, short_id=p.short_id, title=p.short_title, year=p.year)
            for p in papers
        ]
    )
