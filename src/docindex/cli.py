"""Command line interface for docindex."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from docindex.config import AppConfig
from docindex.errors import EmptyQueryError, NotFoundError, ValidationError
from docindex.index.search import Searcher
from docindex.ingestion.corpus_loader import load_records
from docindex.utils.text import normalize_whitespace


console = Console()
app = typer.Typer(help="docindex - keyword search over documentation search indexes")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_searcher(corpus: Path | None, config: AppConfig) -> Searcher:
    if corpus is not None:
        config.corpus_path = corpus
    resolved = config.resolve_corpus_path(Path.cwd())
    if not resolved.exists():
        raise typer.BadParameter(f"Corpus not found: {resolved}")

    try:
        return Searcher.from_records(
            load_records(resolved),
            min_token_length=config.min_token_length,
            idf_floor=config.idf_floor,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    corpus: Path = typer.Option(None, "--corpus", "-c", help="Corpus file (.js or .json)"),
    limit: int = typer.Option(AppConfig().top_k, help="Number of results to display"),
    category: Optional[str] = typer.Option(None, help="Only show documents of this category"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Run a keyword query against a corpus."""
    _setup_logging(verbose)
    searcher = _load_searcher(corpus, AppConfig())

    try:
        results = searcher.search(query, limit, category=category)
    except EmptyQueryError:
        console.print("[red]Query has no searchable terms.[/red]")
        raise typer.Exit(code=1)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("Location")
    table.add_column("Title")
    table.add_column("Category")

    for result in results:
        table.add_row(
            f"{result.score:.4f}",
            escape(result.location),
            escape(result.title),
            escape(result.document.category),
        )

    console.print(table)


@app.command()
def stats(
    corpus: Path = typer.Option(None, "--corpus", "-c", help="Corpus file (.js or .json)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Summarize a corpus and its index."""
    _setup_logging(verbose)
    searcher = _load_searcher(corpus, AppConfig())
    index_stats = searcher.index.stats

    console.print(
        f"Documents: {index_stats.documents}, terms: {index_stats.terms}, "
        f"postings: {index_stats.postings}"
    )
    categories = searcher.store.categories()
    if categories:
        console.print(f"Categories: {escape(', '.join(name or '-' for name in categories))}")


@app.command()
def show(
    doc_id: int = typer.Argument(..., help="Document id (position in the corpus)"),
    corpus: Path = typer.Option(None, "--corpus", "-c", help="Corpus file (.js or .json)"),
) -> None:
    """Print a single document."""
    searcher = _load_searcher(corpus, AppConfig())
    try:
        document = searcher.store.get(doc_id)
    except NotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]{escape(document.title or document.location)}[/bold]")
    console.print(f"Location: {escape(document.location)}")
    if document.page:
        console.print(f"Page: {escape(document.page)}")
    console.print(f"Category: {escape(document.category)}")
    if document.text:
        console.print(normalize_whitespace(document.text), markup=False)
