# citegraph/graph/projection.py

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import networkx as nx

from citegraph.graph.store import GraphStore


def undirected_projection(
    store: GraphStore,
    nodes: Optional[Iterable[str]] = None,
) -> nx.Graph:
    """
    Build the undirected view of the induced citation subgraph.

    - `nodes` defaults to the store's visible overlay; ids unknown to the
      store are ignored.
    - Every member node is present, including isolated ones.
    - A citation u -> v with both endpoints in the set becomes the single
      undirected edge {u, v}; direction is discarded.
    - A self-citation becomes a self-loop, so the paper is listed once
      among its own neighbours.

    The store itself is never modified. Nodes are inserted in ascending id
    order.
    """
    if nodes is None:
        members = store.visible_nodes()
    else:
        members = frozenset(n for n in nodes if store.has_node(n))

    H = nx.Graph()
    ordered = sorted(members)
    H.add_nodes_from(ordered)

    for u in ordered:
        for v in sorted(store.referenced_papers(u)):
            if v in members:
                H.add_edge(u, v)

    return H


def sorted_adjacency(H: nx.Graph) -> Dict[str, List[str]]:
    """Neighbour lists in ascending id order, keyed in ascending id order."""
    return {n: sorted(H.adj[n]) for n in sorted(H.nodes)}
