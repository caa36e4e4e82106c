"""
Command-line interface for DebateRAG.

Commands:
    serve   - Start the FastAPI server
    ask     - Ask a single question about the debate history
    debates - List stored debates
    version - Show version information
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="debaterag",
    help="Question answering over stored debate transcripts",
    add_completion=False,
)
console = Console()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind (default API_HOST)"),
    port: Optional[int] = typer.Option(None, help="Port to bind (default API_PORT)"),
    reload: bool = typer.Option(False, help="Enable auto-reload"),
) -> None:
    """Start the FastAPI server."""
    import uvicorn

    from debaterag.config import settings

    host = host or settings.api_host
    port = port or settings.api_port

    console.print(f"[green]Starting DebateRAG server on {host}:{port}[/green]")

    uvicorn.run(
        "debaterag.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question to ask"),
    client_id: Optional[str] = typer.Option(None, "--client-id", "-c", help="Only use this client's debates"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
    save_index: Optional[str] = typer.Option(
        None,
        "--save-index",
        help="Save the FAISS index built for this question to PATH",
    ),
) -> None:
    """Run a single question through the pipeline."""
    import asyncio

    from debaterag.config import configure_logging
    from debaterag.errors import DebateRagError
    from debaterag.graph.state import PipelineStage
    from debaterag.graph.workflow import run_question
    from debaterag.retrieval.indexer import FAISSIndex
    from debaterag.retrieval.resources import get_pipeline_dependencies

    configure_logging("DEBUG" if verbose else None)

    console.print(f"[blue]Question:[/blue] {question}\n")

    try:
        with console.status("[bold green]Processing..."):
            deps = get_pipeline_dependencies()
            if save_index:
                deps.vector_store = "faiss"
            result = asyncio.run(run_question(question, client_id, deps))
    except DebateRagError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    if result.stage == PipelineStage.FAILED:
        console.print(f"[red]Failed while {result.failed_stage.value if result.failed_stage else 'running'}: {result.error}[/red]")
        raise typer.Exit(1)

    if result.stage == PipelineStage.EMPTY_HISTORY:
        console.print(f"[yellow]{result.reply}[/yellow]")
    else:
        console.print("[green]Answer:[/green]")
        console.print(result.reply)
    console.print()

    if save_index and isinstance(result.index, FAISSIndex):
        result.index.save(save_index)
        console.print(f"[green]Saved index to {save_index}.{{index,json}}[/green]\n")
    elif save_index:
        console.print("[yellow]No index was built for this question; nothing saved.[/yellow]\n")

    if verbose:
        table = Table(title="Metadata")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Latency", f"{result.processing_time_ms:.0f}ms")
        table.add_row("Final Stage", result.stage.value)
        table.add_row("Vector Store", deps.vector_store)
        table.add_row("Chunks Indexed", str(result.chunk_count))
        table.add_row("Chunks Retrieved", str(result.retrieved_count))
        for node_name, elapsed in result.node_timings.items():
            table.add_row(f"  {node_name}", f"{elapsed:.0f}ms")

        console.print(table)


@app.command()
def debates(
    client_id: Optional[str] = typer.Option(None, "--client-id", "-c", help="Only list this client's debates"),
) -> None:
    """List stored debates, newest first."""
    from debaterag.errors import DebateRagError
    from debaterag.retrieval.resources import get_debate_store

    try:
        store = get_debate_store()
        summaries = store.list_summaries(client_id)
    except DebateRagError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    if not summaries:
        console.print("[yellow]No debates stored.[/yellow]")
        return

    table = Table(title=f"Debates ({len(summaries)})")
    table.add_column("ID", style="dim")
    table.add_column("Created", style="cyan")
    table.add_column("Client", style="magenta")
    table.add_column("Role")
    table.add_column("Topic", style="green")

    for summary in summaries:
        table.add_row(
            summary.id,
            summary.created_at.strftime("%Y-%m-%d %H:%M"),
            summary.client_id,
            summary.user_role,
            summary.topic,
        )

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from debaterag import __version__

    console.print(f"DebateRAG v{__version__}")


if __name__ == "__main__":
    app()
