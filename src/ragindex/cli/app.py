# src/ragindex/cli/app.py
"""Command-line interface for ragindex.

This module provides a thin Typer wrapper around the commands layer.
Each command:
1. Parses args (via Typer)
2. Creates progress callbacks (for Rich display)
3. Calls commands module functions
4. Renders results with Rich
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ragindex import __version__
from ragindex.commands import (
    ProgressUpdate,
    index,
    reindex,
    reset,
    search,
    status,
)
from ragindex.commands.base import ConfirmRequest, IndexResult
from ragindex.config import load_env_file

app = typer.Typer(
    name="ragindex",
    help="ragindex - chunk, embed and search your content.",
    no_args_is_help=True,
)
console = Console()


@dataclass
class CLIState:
    """Options given before the command name."""

    config_path: str | None = None
    data_dir: str | None = None


def configure_logging(verbose: bool = False) -> None:
    """Route library log records to a Rich handler on stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    logger = logging.getLogger("ragindex")
    logger.handlers = [handler]
    logger.setLevel(level)
    logger.propagate = False
    # LiteLLM is chatty at INFO
    logging.getLogger("LiteLLM").setLevel(logging.DEBUG if verbose else logging.WARNING)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"ragindex {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: ragindex.yaml, searched upwards)",
    ),
    data_dir: str = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: from config)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging.",
    ),
) -> None:
    """ragindex - chunk, embed and search your content."""
    load_env_file()
    configure_logging(verbose)
    ctx.obj = CLIState(config_path=config_file, data_dir=data_dir)


def _state(ctx: typer.Context) -> CLIState:
    return ctx.obj if isinstance(ctx.obj, CLIState) else CLIState()


def _fail(message: str | None, plain: bool = False) -> None:
    if plain:
        console.print(f"Error: {message}")
    else:
        console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


@app.command(name="index")
def index_cmd(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File or directory to index"),
    reset_first: bool = typer.Option(
        False,
        "--reset",
        help="Empty the collection before indexing (full re-index)",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
) -> None:
    """Index a file or directory into the collection."""
    state = _state(ctx)
    show_progress = not plain and console.is_terminal

    if show_progress:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.fields[stage]:>10}", justify="right"),
            BarColumn(bar_width=20),
            TextColumn("{task.description}", style="dim"),
            console=console,
        ) as progress:
            task = progress.add_task("", total=None, stage="Loading")

            def on_progress(update: ProgressUpdate) -> None:
                progress.update(
                    task,
                    stage=update.stage.value,
                    total=update.total or None,
                    completed=update.current,
                    description=update.message or "",
                )

            result = index.index(
                path,
                data_dir=state.data_dir,
                config_path=state.config_path,
                reset=reset_first,
                on_progress=on_progress,
            )
    else:
        result = index.index(
            path,
            data_dir=state.data_dir,
            config_path=state.config_path,
            reset=reset_first,
        )

    _render_index_result(result, plain)


def _render_index_result(result: IndexResult, plain: bool) -> None:
    if not result.success:
        _fail(result.error, plain)

    summary = (
        f"Indexed {result.documents_indexed} documents "
        f"({result.total_chunks} chunks) into {result.backend}"
    )
    if plain:
        console.print(summary)
        for failure in result.failures:
            console.print(f"Failed {failure.source_id}: {failure.error}")
    else:
        console.print(f"[green]{summary}[/green]")
        for failure in result.failures:
            console.print(f"[yellow]Failed {failure.source_id}: {failure.error}[/yellow]")

    if result.documents_failed > 0:
        raise typer.Exit(1)


@app.command(name="search")
def search_cmd(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query"),
    k: int = typer.Option(
        None,
        "--k",
        "-k",
        help="Number of results to return",
    ),
    threshold: float = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Minimum similarity (exclusive)",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
) -> None:
    """Search the collection for chunks similar to a query."""
    state = _state(ctx)
    result = search.search(
        query,
        data_dir=state.data_dir,
        config_path=state.config_path,
        k=k,
        threshold=threshold,
    )

    if not result.success:
        _fail(result.error, plain)

    if not result.results:
        console.print("No results found." if plain else "[dim]No results found.[/dim]")
        raise typer.Exit(0)

    if plain:
        for i, hit in enumerate(result.results, 1):
            console.print(f"{i}. [{hit.similarity:.3f}] {hit.chunk_id}")
            console.print(f"   {hit.content}")
        console.print(f"Backend: {result.backend}")
        return

    table = Table(title=f"Results for: {result.query}")
    table.add_column("#", style="dim", width=3)
    table.add_column("Similarity", style="green", justify="right")
    table.add_column("Source", style="cyan")
    table.add_column("Chunk", overflow="fold")

    for i, hit in enumerate(result.results, 1):
        preview = hit.content if len(hit.content) <= 200 else hit.content[:200] + "..."
        table.add_row(str(i), f"{hit.similarity:.3f}", f"{hit.source_id}#{hit.chunk_index}", preview)

    console.print(table)
    console.print(f"[dim]Served by {result.backend}[/dim]")


@app.command(name="reindex")
def reindex_cmd(
    ctx: typer.Context,
    source_id: str = typer.Argument(..., help="Source to re-index (file name without extension)"),
    content_dir: str = typer.Option(
        None,
        "--content-dir",
        help="Directory holding the content files (default: from config)",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
) -> None:
    """Replace the chunks of a single source."""
    state = _state(ctx)
    result = reindex.reindex(
        source_id,
        data_dir=state.data_dir,
        config_path=state.config_path,
        content_dir=content_dir,
    )

    if not result.success:
        _fail(result.error, plain)

    message = f"Re-indexed {result.source_id} ({result.chunks} chunks)"
    console.print(message if plain else f"[green]{message}[/green]")


@app.command(name="reset")
def reset_cmd(
    ctx: typer.Context,
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
) -> None:
    """Delete every chunk in the collection."""
    state = _state(ctx)

    def cli_confirm(request: ConfirmRequest) -> bool:
        """CLI confirmation callback using typer.confirm."""
        if request.details:
            console.print(request.details if plain else f"[yellow]{request.details}[/yellow]")
        return typer.confirm(request.message)

    result = reset.reset(
        data_dir=state.data_dir,
        config_path=state.config_path,
        on_confirm=None if yes else cli_confirm,
    )

    if not result.success:
        # Handle cancellation gracefully (exit 0, not error)
        if result.error == "Cancelled.":
            console.print("Cancelled.")
            raise typer.Exit(0)
        _fail(result.error, plain)

    message = f"Deleted {result.records_deleted} chunks"
    console.print(message if plain else f"[green]{message}[/green]")


@app.command(name="status")
def status_cmd(
    ctx: typer.Context,
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
) -> None:
    """Show backend health and collection statistics."""
    state = _state(ctx)
    result = status.status(data_dir=state.data_dir, config_path=state.config_path)

    if not result.success:
        _fail(result.error, plain)

    if plain:
        console.print("Collection Status:")
        console.print(f"  Backend: {result.backend}")
        console.print(f"  Connected: {'yes' if result.connected else 'no'}")
        console.print(f"  State: {result.state}")
        console.print(f"  Sources: {len(result.sources)}")
        console.print(f"  Chunks: {result.total_chunks}")
        return

    table = Table(title="Collection Status")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("Backend", result.backend)
    table.add_row("Connected", "yes" if result.connected else "no")
    table.add_row("State", result.state)
    table.add_row("Sources", str(len(result.sources)))
    table.add_row("Chunks", str(result.total_chunks))
    console.print(table)

    if result.sources:
        console.print(f"[dim]{', '.join(result.sources)}[/dim]")
