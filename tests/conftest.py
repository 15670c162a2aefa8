# tests/conftest.py

from typing import Dict, Iterable, List, Optional

import pytest

from citegraph.graph.store import GraphStore
from citegraph.models.paper import Paper


def make_papers(citations: Dict[str, Iterable[str]]) -> List[Paper]:
    """
    Build papers from {id: [referenced ids]}. Ids that only appear as
    references are not created, so they stay dangling.
    """
    return [
        Paper(id=pid, title=f"Paper {pid}", referenced_works=tuple(refs))
        for pid, refs in citations.items()
    ]


@pytest.fixture
def build_store():
    """
    Factory fixture: build_store({"A": ["B"], "B": []}, visible=["A", "B"]).

    visible="all" makes every paper visible.
    """

    def _build(citations: Dict[str, Iterable[str]], visible: Optional[Iterable[str]] = None) -> GraphStore:
        store = GraphStore()
        store.load(make_papers(citations))
        if visible == "all":
            store.add_visible_many(citations.keys())
        elif visible is not None:
            store.add_visible_many(visible)
        return store

    return _build
