# tests/test_kcore.py

import networkx as nx
import pytest

from citegraph.analysis.kcore import KCoreEngine
from citegraph.graph.projection import undirected_projection


def _degree_within(store, nodes, node):
    H = undirected_projection(store, nodes)
    return H.degree(node)


def test_two_connected_nodes_give_one_undirected_edge(build_store):
    store = build_store({"A": ["B"], "B": []}, visible="all")

    result = KCoreEngine(store).compute(1)

    assert result.nodes == ["A", "B"]
    assert result.edges == [("A", "B")]
    assert result.node_count == 2
    assert result.edge_count == 1


def test_mutual_citation_is_still_one_edge(build_store):
    store = build_store({"A": ["B"], "B": ["A"]}, visible="all")

    result = KCoreEngine(store).compute(1)

    assert result.edges == [("A", "B")]


def test_k_below_one_or_empty_overlay_is_empty(build_store):
    store = build_store({"A": ["B"], "B": []})
    engine = KCoreEngine(store)

    empty = engine.compute(1)
    assert empty.nodes == [] and empty.edges == []

    store.add_visible_many(["A", "B"])
    for k in (0, -3):
        result = engine.compute(k)
        assert result.k == k
        assert result.nodes == []
        assert result.edges == []


def test_peeling_cascades_to_fixpoint(build_store):
    # Triangle A-B-C with a tail C-D-E: the tail peels away for k=2.
    store = build_store(
        {"A": ["B", "C"], "B": ["C"], "C": ["D"], "D": ["E"], "E": []},
        visible="all",
    )

    result = KCoreEngine(store).compute(2)

    assert result.nodes == ["A", "B", "C"]
    assert result.edges == [("A", "B"), ("A", "C"), ("B", "C")]


def test_k_larger_than_any_degree_gives_empty_core(build_store):
    store = build_store({"A": ["B", "C"], "B": ["C"], "C": []}, visible="all")

    assert KCoreEngine(store).compute(3).nodes == []


def test_invisible_nodes_do_not_support_the_core(build_store):
    store = build_store({"A": ["B", "C"], "B": ["C"], "C": []}, visible=["A", "B"])

    result = KCoreEngine(store).compute(2)
    assert result.nodes == []

    result = KCoreEngine(store).compute(1)
    assert result.nodes == ["A", "B"]


@pytest.mark.parametrize("seed,k", [(2, 1), (2, 2), (5, 3), (11, 2)])
def test_matches_networkx_k_core_and_is_a_fixpoint(build_store, seed, k):
    D = nx.gnp_random_graph(25, 0.15, seed=seed, directed=True)
    citations = {f"N{n:02d}": [f"N{m:02d}" for m in D.successors(n)] for n in D.nodes}
    visible = sorted(citations)[:20]
    store = build_store(citations, visible=visible)

    result = KCoreEngine(store).compute(k)

    expected = nx.k_core(undirected_projection(store), k)
    assert set(result.nodes) == set(expected.nodes)
    assert len(result.edges) == expected.number_of_edges()

    core = set(result.nodes)
    for node in core:
        assert _degree_within(store, core, node) >= k

    # Edges are unique unordered pairs.
    assert len({frozenset(e) for e in result.edges}) == len(result.edges)
    assert all(u < v for u, v in result.edges)


def test_self_citation_counts_once_toward_degree(build_store):
    store = build_store({"A": ["A"], "B": []}, visible="all")
    engine = KCoreEngine(store)

    result = engine.compute(1)
    assert result.nodes == ["A"]
    assert result.edges == [("A", "A")]

    assert engine.compute(2).nodes == []


def test_self_loop_alone_does_not_hold_a_paper_in_a_2_core(build_store):
    # A starts with degree 2 (itself and B), but C peels first and the
    # cascade through B leaves A with only its self-loop.
    store = build_store({"A": ["A", "B"], "B": ["C"], "C": ["B"]}, visible="all")

    result = KCoreEngine(store).compute(2)

    assert result.nodes == []

    result = KCoreEngine(store).compute(1)
    assert result.nodes == ["A", "B", "C"]
    assert result.edges == [("A", "A"), ("A", "B"), ("B", "C")]
