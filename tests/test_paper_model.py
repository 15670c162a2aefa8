# tests/test_paper_model.py

import dataclasses

import pytest

from citegraph.models.paper import Paper, UNKNOWN_AUTHORS


def test_short_id_takes_suffix_after_last_slash():
    p = Paper(id="https://openalex.org/W2741809807")
    assert p.short_id == "W2741809807"


def test_short_id_without_slash_is_full_id():
    p = Paper(id="W42")
    assert p.short_id == "W42"


def test_authors_text_joins_or_uses_placeholder():
    assert Paper(id="a", authors=("Ada", "Grace")).authors_text == "Ada, Grace"
    assert Paper(id="b").authors_text == UNKNOWN_AUTHORS


def test_short_title_truncates_beyond_80_chars():
    exactly_80 = "x" * 80
    assert Paper(id="a", title=exactly_80).short_title == exactly_80

    long_title = "y" * 81
    short = Paper(id="b", title=long_title).short_title
    assert short == "y" * 77 + "..."
    assert len(short) == 80


def test_paper_is_immutable():
    p = Paper(id="a", title="T")
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.title = "changed"  # type: ignore[misc]
