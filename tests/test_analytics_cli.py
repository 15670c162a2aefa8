# tests/test_analytics_cli.py

import json
from pathlib import Path

from typer.testing import CliRunner

from citegraph.cli.main import app as cli_app

runner = CliRunner()


def _write_corpus(tmp_path: Path) -> Path:
    # T is cited by P1 and P2; P1 by X1, X2, P2; P2 by X1, X2.
    records = [
        {"id": "https://openalex.org/T", "title": "Target paper", "year": 2001},
        {
            "id": "https://openalex.org/P1",
            "title": "First citing paper",
            "year": 2005,
            "referenced_works": ["https://openalex.org/T"],
        },
        {
            "id": "https://openalex.org/P2",
            "title": "Second citing paper",
            "year": 2007,
            "referenced_works": ["https://openalex.org/T", "https://openalex.org/P1"],
        },
        {
            "id": "https://openalex.org/X1",
            "title": "Survey one",
            "referenced_works": ["https://openalex.org/P1", "https://openalex.org/P2"],
        },
        {
            "id": "https://openalex.org/X2",
            "title": "Survey two",
            "referencedWorks": ["https://openalex.org/P1", "https://openalex.org/P2"],
        },
    ]
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def test_cli_stats(tmp_path):
    path = _write_corpus(tmp_path)

    result = runner.invoke(cli_app, ["analyze", "stats", "--data-file", str(path)])

    assert result.exit_code == 0
    out = result.stdout
    assert "Papers" in out
    assert "Citation edges" in out
    assert "P1 (3)" in out
    assert "P2 (2)" in out


def test_cli_h_index_uses_global_fallback(tmp_path):
    path = _write_corpus(tmp_path)

    result = runner.invoke(cli_app, ["analyze", "h-index", "T", "--data-file", str(path)])

    assert result.exit_code == 0
    out = result.stdout
    assert "T: h-index=2, h-median=2.5" in out
    assert "P1" in out
    assert "P2" in out


def test_cli_h_index_restricted_to_visible(tmp_path):
    path = _write_corpus(tmp_path)

    result = runner.invoke(
        cli_app,
        ["analyze", "h-index", "T", "--visible", "P2", "--data-file", str(path)],
    )

    assert result.exit_code == 0
    assert "T: h-index=1, h-median=2" in result.stdout


def test_cli_h_index_unknown_paper(tmp_path):
    path = _write_corpus(tmp_path)

    result = runner.invoke(cli_app, ["analyze", "h-index", "W404", "--data-file", str(path)])

    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_cli_betweenness(tmp_path):
    path = _write_corpus(tmp_path)

    result = runner.invoke(
        cli_app,
        ["analyze", "betweenness", "--top", "3", "--data-file", str(path)],
    )

    assert result.exit_code == 0
    out = result.stdout
    assert "Betweenness over 5 papers" in out
    assert "Score" in out


def test_cli_k_core(tmp_path):
    path = _write_corpus(tmp_path)

    result = runner.invoke(cli_app, ["analyze", "k-core", "2", "--data-file", str(path)])

    assert result.exit_code == 0
    out = result.stdout
    assert "2-core: 5 papers, 7 edges" in out
    for short_id in ("P1", "P2", "T", "X1", "X2"):
        assert short_id in out


def test_cli_k_core_empty(tmp_path):
    path = _write_corpus(tmp_path)

    result = runner.invoke(cli_app, ["analyze", "k-core", "5", "--data-file", str(path)])

    assert result.exit_code == 0
    assert "5-core: 0 papers, 0 edges" in result.stdout
    assert "(empty)" in result.stdout


def test_cli_search(tmp_path):
    path = _write_corpus(tmp_path)

    result = runner.invoke(cli_app, ["analyze", "search", "survey", "--data-file", str(path)])

    assert result.exit_code == 0
    assert "X1" in result.stdout
    assert "X2" in result.stdout

    result = runner.invoke(cli_app, ["analyze", "search", "zzz", "--data-file", str(path)])
    assert result.exit_code == 0
    assert "No matches" in result.stdout


def test_cli_missing_corpus_exits_with_error(tmp_path):
    result = runner.invoke(
        cli_app,
        ["analyze", "stats", "--data-file", str(tmp_path / "missing.json")],
    )

    assert result.exit_code == 1
    assert "Could not load corpus" in result.stdout
