"""CLI interface for the Knowledge Assistant."""

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ....composition import Container, build_container
from ....config import get_settings, setup_logging
from ....core.domain import DocumentUpload, QueryResult
from ....core.services.validation import validate_batch, validate_question
from ...common.exception_handler import format_exception_json

T = TypeVar("T")

SUPPORTED_SUFFIXES = {".txt", ".md", ".json"}

app = typer.Typer(
    name="knowledge-assistant",
    help="Enterprise knowledge assistant - answers questions from your knowledge base",
    add_completion=False,
)

console = Console()


def handle_cli_error(exc: Exception, debug: bool = False) -> None:
    """Display an error in CLI format.

    In debug mode, shows full JSON error details.
    In normal mode, shows a user-friendly message with error code.
    """
    error_data = format_exception_json(exc, include_trace=debug)

    if debug:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, default=str),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
        return

    error = error_data["error"]
    console.print(f"\n[red]Error [{error.get('code', 'UNKNOWN')}]:[/] {error['message']}")
    console.print(f"[dim]Type: {error['type']}[/]")
    location = error_data.get("location")
    if location:
        console.print(
            f"[dim]Location: {location.get('file', '?')}:{location.get('line', '?')} "
            f"in {location.get('method', '?')}[/]"
        )
    console.print("[dim]Set DEBUG=true for full details[/]")


def run_with_container(action: Callable[[Container], Awaitable[T]]) -> T:
    """Build a container, run ``action`` with it and close it.

    Any failure is reported and ends the command with exit code 1.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file, settings.log_json)

    async def runner() -> T:
        container = build_container(settings)
        try:
            return await action(container)
        finally:
            await container.aclose()

    try:
        return asyncio.run(runner())
    except Exception as exc:
        handle_cli_error(exc, debug=settings.debug)
        raise typer.Exit(1) from exc


def print_result(result: QueryResult, show_sources: bool = True) -> None:
    console.print(Panel(Markdown(result.answer), title="[bold blue]Answer[/]", border_style="blue"))
    console.print(
        f"[dim]Confidence: {result.confidence:.2f} | "
        f"{result.processing_time_ms}ms | {len(result.sources)} sources[/]"
    )
    if show_sources and result.sources:
        console.print("[dim]Sources:[/]")
        for position, source in enumerate(result.sources, start=1):
            console.print(f"  [dim][{position}] {source.title} ({source.score:.2f})[/]")


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question to answer from the knowledge base"),
    sources: bool = typer.Option(True, "--sources/--no-sources", help="List the sources used"),
) -> None:
    """Ask a single question and get an answer."""
    try:
        clean = validate_question(question)
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1) from exc

    async def action(container: Container) -> QueryResult:
        with console.status("[bold green]Thinking...[/]"):
            return await container.query_service.answer(clean)

    print_result(run_with_container(action), show_sources=sources)


@app.command()
def batch(
    questions_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Text file with one question per line"
    ),
) -> None:
    """Answer up to 10 questions from a file, concurrently."""
    lines = [line.strip() for line in questions_file.read_text(encoding="utf-8").splitlines()]
    try:
        questions = validate_batch([line for line in lines if line])
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1) from exc

    async def action(container: Container) -> list[QueryResult]:
        with console.status(f"[bold green]Answering {len(questions)} questions...[/]"):
            return await container.query_service.answer_batch(questions)

    results = run_with_container(action)
    for question, result in zip(questions, results):
        console.print(f"\n[bold cyan]Q:[/] {question}")
        print_result(result, show_sources=False)


def load_uploads(path: Path, category: str | None = None) -> list[DocumentUpload]:
    """Read documents from a file or directory.

    ``.txt`` and ``.md`` files become one document titled by the file name;
    ``.json`` files hold one document object or a list of them.
    """
    files = sorted(path.rglob("*")) if path.is_dir() else [path]
    uploads: list[DocumentUpload] = []

    for file in files:
        if file.suffix.lower() not in SUPPORTED_SUFFIXES or not file.is_file():
            continue
        text = file.read_text(encoding="utf-8-sig")
        if file.suffix.lower() == ".json":
            data: Any = json.loads(text)
            for item in data if isinstance(data, list) else [data]:
                uploads.append(
                    DocumentUpload(
                        title=item.get("title", ""),
                        content=item.get("content", ""),
                        category=item.get("category", category),
                        tags=list(item.get("tags") or []),
                        author=item.get("author"),
                        source=item.get("source") or file.name,
                    )
                )
        else:
            uploads.append(
                DocumentUpload(title=file.stem, content=text, category=category, source=file.name)
            )
    return uploads


@app.command()
def ingest(
    path: Path = typer.Argument(..., exists=True, help="File or directory (.txt, .md, .json)"),
    category: str | None = typer.Option(None, "--category", "-c", help="Category for all documents"),
) -> None:
    """Add documents to the knowledge base."""
    uploads = load_uploads(path, category)
    if not uploads:
        console.print(f"[yellow]No .txt, .md or .json documents found in {path}[/]")
        raise typer.Exit(1)

    async def action(container: Container):
        with console.status(f"[bold green]Indexing {len(uploads)} documents...[/]"):
            return await container.ingestion_service.index_documents(uploads)

    outcomes = run_with_container(action)

    table = Table(title="Ingestion results")
    table.add_column("Title", style="cyan")
    table.add_column("Result")
    table.add_column("Document ID", style="dim")
    for outcome in outcomes:
        result = "[green]indexed[/]" if outcome.success else f"[red]{outcome.error}[/]"
        table.add_row(outcome.title, result, outcome.doc_id or "")
    console.print(table)

    failed = sum(1 for o in outcomes if not o.success)
    console.print(f"[bold]{len(outcomes) - failed} indexed, {failed} failed[/]")
    if failed:
        raise typer.Exit(1)


@app.command()
def documents(
    limit: int = typer.Option(100, "--limit", "-n", help="Maximum points to scan"),
) -> None:
    """List documents in the knowledge base."""

    async def action(container: Container):
        return await container.ingestion_service.list_documents(limit=limit)

    summaries = run_with_container(action)
    if not summaries:
        console.print("[yellow]The knowledge base is empty.[/]")
        return

    table = Table(title=f"Documents ({len(summaries)})")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Category")
    table.add_column("Author")
    table.add_column("Uploaded")
    for s in summaries:
        table.add_row(s.doc_id, s.title, s.category or "", s.author or "", s.uploaded_at or "")
    console.print(table)


@app.command()
def delete(
    doc_id: str = typer.Argument(..., help="Document ID to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a document and all of its chunks."""
    if not yes and not typer.confirm(f"Delete document {doc_id}?"):
        raise typer.Abort()

    async def action(container: Container) -> None:
        await container.ingestion_service.delete_document(doc_id)

    run_with_container(action)
    console.print(f"[green]Deleted document {doc_id}[/]")


@app.command()
def stats() -> None:
    """Show knowledge base statistics and configured backends."""

    async def action(container: Container) -> dict[str, Any]:
        return await container.ingestion_service.stats()

    data = run_with_container(action)

    console.print("[bold]Knowledge Assistant Status[/]\n")
    console.print(f"Collection: [cyan]{data['collection']}[/] ({data.get('status', 'unknown')})")
    console.print(f"Indexed points: [bold]{data.get('count', 0)}[/]")
    for name, backend in data.get("backends", {}).items():
        console.print(f"  {name}: {backend}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind"),
    port: int = typer.Option(8000, help="Port to listen on"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Start the HTTP API server."""
    import uvicorn

    console.print(f"[bold green]Starting Knowledge Assistant API on {host}:{port}[/]")
    uvicorn.run(
        "knowledge_assistant.adapters.inbound.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
