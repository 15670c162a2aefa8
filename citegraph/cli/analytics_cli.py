from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from citegraph.analysis.betweenness import top_scores
from citegraph.errors import AnalysisTooLargeError, CorpusLoadError
from citegraph.ingest.loader import find_data_file, load_papers
from citegraph.service import AnalyticsService

app = typer.Typer(
    help="Run citation analytics over a JSON corpus from the command line."
)

console = Console()

DATA_FILE_HELP = (
    "Path to the JSON corpus. "
    "If omitted, CITEGRAPH_DATA_FILE or ./data.json is used."
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load_service(data_file: Optional[Path]) -> AnalyticsService:
    """
    Load the corpus into a fresh service, or exit with code 1.
    """
    try:
        path = find_data_file(data_file)
        papers = load_papers(path)
    except CorpusLoadError as exc:
        console.print(f"[red]Could not load corpus:[/red] {exc}")
        raise typer.Exit(code=1)

    service = AnalyticsService()
    service.load(papers)
    return service


def _apply_visible(service: AnalyticsService, visible: Optional[List[str]], default_all: bool) -> None:
    """
    Populate the overlay from --visible ids (full or short ids).

    With no ids and `default_all`, every paper becomes visible.
    """
    if visible:
        for raw in visible:
            if service.select(raw) is None:
                console.print(f"[yellow]Ignoring unknown paper '{raw}'.[/yellow]")
    elif default_all:
        service.add_visible(p.id for p in service.store.all_papers())


def _short(service: AnalyticsService, paper_id: str) -> str:
    paper = service.store.get_paper(paper_id)
    return paper.short_id if paper else paper_id


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("stats")
def stats(
    data_file: Optional[Path] = typer.Option(None, "--data-file", "-f", help=DATA_FILE_HELP),
) -> None:
    """
    Corpus size plus the most cited / most referencing papers.
    """
    service = load_service(data_file)
    store = service.store
    view = service.global_stats()

    tbl = Table(show_header=True, header_style="bold")
    tbl.add_column("Metric")
    tbl.add_column("Value", justify="right")

    tbl.add_row("Papers", str(store.node_count))
    tbl.add_row("Citation edges", str(store.edge_count))
    tbl.add_row(
        "Most cited",
        f"{view.global_max_cited_id or '-'} ({view.global_max_cited_count})",
    )
    tbl.add_row(
        "Most referencing",
        f"{view.global_max_ref_id or '-'} ({view.global_max_ref_count})",
    )

    console.print(tbl)


@app.command("search")
def search(
    query: str = typer.Argument(..., help="Text to match against short id, title and authors."),
    data_file: Optional[Path] = typer.Option(None, "--data-file", "-f", help=DATA_FILE_HELP),
) -> None:
    """
    Search papers by substring.
    """
    service = load_service(data_file)
    hits = service.search(query)

    if not hits:
        console.print(f"[yellow]No matches for '{query}'.[/yellow]")
        return

    tbl = Table(show_header=True, header_style="bold")
    tbl.add_column("Short id")
    tbl.add_column("Year", justify="right")
    tbl.add_column("Title")

    for paper in hits:
        tbl.add_row(paper.short_id, str(paper.year), paper.short_title)

    console.print(tbl)


@app.command("h-index")
def h_index(
    paper_id: str = typer.Argument(..., help="Full or short id of the paper."),
    visible: Optional[List[str]] = typer.Option(
        None,
        "--visible",
        "-v",
        help="Papers to make visible first (repeatable). Citing papers outside "
        "this set are ignored unless none of them is visible.",
    ),
    data_file: Optional[Path] = typer.Option(None, "--data-file", "-f", help=DATA_FILE_HELP),
) -> None:
    """
    H-index, h-core and h-median of a single paper.
    """
    service = load_service(data_file)
    _apply_visible(service, visible, default_all=False)

    outcome = service.h_index(paper_id)
    if outcome is None:
        console.print(f"[red]Paper '{paper_id}' not found.[/red]")
        raise typer.Exit(code=1)

    result, _ = outcome
    console.print(
        f"[bold]{result.paper.short_id}[/bold]: h-index={result.h_index}, "
        f"h-median={result.h_median:g}"
    )

    if not result.h_core:
        console.print("  (empty h-core)")
        return

    tbl = Table(show_header=True, header_style="bold")
    tbl.add_column("Rank", justify="right")
    tbl.add_column("Citing paper")
    tbl.add_column("Citations", justify="right")

    for rank, (core_id, count) in enumerate(zip(result.h_core, result.h_core_citations), start=1):
        tbl.add_row(str(rank), _short(service, core_id), str(count))

    console.print(tbl)


@app.command("betweenness")
def betweenness(
    visible: Optional[List[str]] = typer.Option(
        None,
        "--visible",
        "-v",
        help="Papers to analyse (repeatable). Defaults to the whole corpus.",
    ),
    top: int = typer.Option(10, "--top", "-n", min=1, help="How many papers to list."),
    data_file: Optional[Path] = typer.Option(None, "--data-file", "-f", help=DATA_FILE_HELP),
) -> None:
    """
    Betweenness centrality over the visible papers.
    """
    service = load_service(data_file)
    _apply_visible(service, visible, default_all=True)

    try:
        scores = service.betweenness()
    except AnalysisTooLargeError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]Betweenness over {len(scores)} papers:[/bold]")

    tbl = Table(show_header=True, header_style="bold")
    tbl.add_column("Paper")
    tbl.add_column("Score", justify="right")

    for paper_id, score in top_scores(scores, top):
        tbl.add_row(_short(service, paper_id), f"{score:.4f}")

    console.print(tbl)


@app.command("k-core")
def k_core(
    k: int = typer.Argument(..., help="Minimum degree inside the core."),
    visible: Optional[List[str]] = typer.Option(
        None,
        "--visible",
        "-v",
        help="Papers to analyse (repeatable). Defaults to the whole corpus.",
    ),
    data_file: Optional[Path] = typer.Option(None, "--data-file", "-f", help=DATA_FILE_HELP),
) -> None:
    """
    K-core of the visible papers (citations treated as undirected).
    """
    service = load_service(data_file)
    _apply_visible(service, visible, default_all=True)

    result = service.k_core(k)
    console.print(
        f"[bold]{k}-core:[/bold] {result.node_count} papers, {result.edge_count} edges"
    )

    if not result.nodes:
        console.print("  (empty)")
        return

    for paper_id in result.nodes:
        console.print(f"  • {_short(service, paper_id)}")
