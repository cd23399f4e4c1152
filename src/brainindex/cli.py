"""Command line interface for the brain index."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from brainindex.config import AppConfig
from brainindex.errors import EmptyQuery, UnknownCategory
from brainindex.models import CATEGORIES
from brainindex.service import BrainIndexService


console = Console()
app = typer.Typer(help="Brain Index - keyword search over the brain corpus")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_service(root: Path | None) -> BrainIndexService:
    config = AppConfig(root=root if root is not None else AppConfig().root)
    return BrainIndexService(config, base_dir=Path.cwd())


def _print_full_scan(results: dict) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Category")
    table.add_column("Record")
    table.add_column("Source")

    for category, records in results.items():
        for record in records:
            label = record.get("name") or record.get("title") or record.get("id") or ""
            table.add_row(category, str(label)[:80], Path(record["_source"]).name)

    console.print(table)


@app.command()
def rebuild(
    root: Path = typer.Option(None, "--root", help="Corpus root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rebuild the index from the corpus."""
    _setup_logging(verbose)
    service = _build_service(root)

    console.print(f"Indexing [bold]{service.root}[/bold]...")
    stats = service.rebuild()
    console.print(
        f"Indexed: {stats.indexed_files}/{stats.total_files} files, "
        f"keywords: {stats.unique_keywords}, elapsed: {stats.elapsed_ms}ms"
    )


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Restrict to one category"),
    root: Path = typer.Option(None, "--root", help="Corpus root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Indexed keyword search, falling back to a full scan on no hits."""
    _setup_logging(verbose)
    if not query.strip():
        raise typer.BadParameter("Empty query")

    service = _build_service(root)
    try:
        outcome = service.search_indexed(query, category)
    except UnknownCategory as exc:
        raise typer.BadParameter(str(exc)) from exc

    if not outcome["keywords"]:
        console.print("[yellow]No keywords extracted from query.[/yellow]")
    elif outcome["results"]:
        console.print(f"Keywords: {', '.join(outcome['keywords'])}")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Relevance")
        table.add_column("Matches")
        table.add_column("Category")
        table.add_column("File")
        for result in outcome["results"]:
            table.add_row(
                f"{result['relevance']:.1f}%",
                str(result["matches"]),
                result["category"],
                result["file"],
            )
        console.print(table)
        return

    console.print("[yellow]No indexed matches, scanning files...[/yellow]")
    results = service.search_full(query.strip())
    if not any(results.values()):
        console.print("[yellow]No matches found.[/yellow]")
        return
    _print_full_scan(results)


@app.command()
def scan(
    query: str = typer.Argument(..., help="Substring to look for"),
    limit: int = typer.Option(20, help="Maximum records per category"),
    root: Path = typer.Option(None, "--root", help="Corpus root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Full-text scan of the corpus without the index."""
    _setup_logging(verbose)
    service = _build_service(root)
    try:
        results = service.search_full(query, {category: limit for category in CATEGORIES})
    except EmptyQuery as exc:
        raise typer.BadParameter(str(exc)) from exc

    if not any(results.values()):
        console.print("[yellow]No matches found.[/yellow]")
        return
    _print_full_scan(results)


@app.command()
def stats(
    root: Path = typer.Option(None, "--root", help="Corpus root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Build the index and show per-category statistics."""
    _setup_logging(verbose)
    service = _build_service(root)
    service.rebuild()
    index_stats = service.get_stats()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Category")
    table.add_column("Files")
    table.add_column("Keywords")
    table.add_column("Records")
    for category, data in index_stats["categories"].items():
        table.add_row(category, str(data["files"]), str(data["keywords"]), str(data["total_records"]))
    console.print(table)


@app.command()
def fresh(
    max_age_ms: int = typer.Option(AppConfig().max_age_ms, "--max-age-ms", help="Allowed staleness in ms"),
    root: Path = typer.Option(None, "--root", help="Corpus root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Report whether the corpus directories changed recently."""
    _setup_logging(verbose)
    service = _build_service(root)
    report = service.freshness.check(max_age_ms)

    for category, age in report.ages.items():
        if age.error is not None:
            console.print(f"{category}: [red]{age.error}[/red]")
        else:
            state = "fresh" if age.is_fresh else "[yellow]stale[/yellow]"
            console.print(f"{category}: {state} (modified {age.dir_modified_ms}ms ago)")
    console.print(f"Fresh: {report.fresh}")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    root: Path = typer.Option(None, "--root", help="Corpus root directory"),
) -> None:
    """Start the HTTP search API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    from brainindex.web.app import create_app

    service = _build_service(root)
    if not service.root.exists():
        console.print("[yellow]Warning: corpus root not found, searches will be empty.[/yellow]")

    console.print(f"Starting brain search API on http://{host}:{port} (corpus: {service.root})")
    uvicorn.run(
        create_app(service),
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
