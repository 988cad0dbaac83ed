"""newsdesk CLI application using Typer.

Commands:
- ``run``: resolve a batch topic file and write the results file, then
  offer to run again
- ``search``: resolve a single topic
- ``db``: create the cache tables or show what is cached
- ``serve``: run the HTTP API
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from newsdesk.batch import read_batch_file, run_batch, write_results_file
from newsdesk.config import configure_logging, get_settings
from newsdesk.exceptions import NewsdeskError
from newsdesk.infrastructure import Infrastructure
from newsdesk.storage import (
    SqlResultStore,
    create_session_maker,
    create_store_engine,
    create_tables,
)

app = typer.Typer(
    name="newsdesk",
    help="newsdesk - cached topic search over NewsAPI",
    no_args_is_help=True,
)
console = Console()


db_app = typer.Typer(
    name="db",
    help="Result store utilities",
    no_args_is_help=True,
)
app.add_typer(db_app)


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    configure_logging(get_settings().log_level)


def _resolve_input(input_file: Path) -> Path:
    """Accept a path or a bare name inside the configured input directory."""
    if input_file.exists():
        return input_file
    candidate = get_settings().input_dir / input_file
    if candidate.exists():
        return candidate
    console.print(f"[red]Input file not found:[/red] {input_file}")
    raise typer.Exit(code=1)


@app.command("run")
def run(
    input_file: Path = typer.Argument(
        ..., help="Topic file: topic,days,max_items per line"
    ),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Directory for the results file"
    ),
    once: bool = typer.Option(False, "--once", help="Do not prompt to run again"),
) -> None:
    """Resolve every topic of INPUT_FILE and write Outputs_<name>.txt."""
    settings = get_settings()
    input_path = _resolve_input(input_file)
    target_dir = output_dir or settings.output_dir

    with Infrastructure.create(settings) as infra:
        while True:
            try:
                entries = read_batch_file(input_path)
            except OSError as exc:
                console.print(f"[red]Error reading input file:[/red] {exc}")
                raise typer.Exit(code=1) from exc

            outcomes = run_batch(
                infra.dispatcher, entries, timeout=settings.task_timeout_seconds
            )
            try:
                out_path = write_results_file(outcomes, input_path, target_dir)
            except OSError as exc:
                console.print(f"[red]Error writing output file:[/red] {exc}")
                raise typer.Exit(code=1) from exc

            failed = sum(1 for outcome in outcomes if not outcome.result.ok)
            console.print(
                f"[green]Execution completed.[/green] Results stored in "
                f"[bold]{out_path}[/bold] ({len(outcomes)} topics, {failed} failed)"
            )

            if once:
                break
            answer = console.input(
                "Press Enter to run again, or type 'exit' to quit: "
            )
            if answer.strip().lower() == "exit":
                console.print("Exiting program")
                break


@app.command("search")
def search(
    topic: str = typer.Argument(..., help="Topic to search for"),
    days: int = typer.Option(7, "--days", "-d", help="Recency window in days"),
    max_items: int = typer.Option(5, "--max-items", "-n", help="Maximum results"),
) -> None:
    """Resolve a single topic and print the results."""
    settings = get_settings()
    with Infrastructure.create(settings) as infra:
        try:
            result = infra.dispatcher.search(
                topic, days, max_items, timeout=settings.task_timeout_seconds
            )
        except NewsdeskError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=2) from exc

    if result.error is not None:
        console.print(f'Results for "{topic}" [red](error: {result.error})[/red]')
        raise typer.Exit(code=1)

    label = result.provenance.label if result.provenance else "?"
    console.print(f'Results for "{topic}" [cyan](Fetched from: {label})[/cyan]:')
    if not result.items:
        console.print("- No results found")
    for item in result.items:
        console.print(f"- {item.title} [dim]({item.url})[/dim]")


@db_app.command("init")
def db_init() -> None:
    """Create the cache tables (idempotent)."""
    settings = get_settings()
    engine = create_store_engine(
        settings.database_path, echo=settings.database_echo
    )
    create_tables(engine)
    engine.dispose()
    console.print(f"[green]Result store ready:[/green] {settings.database_path}")


@db_app.command("stats")
def db_stats() -> None:
    """Show how many records are cached per topic."""
    settings = get_settings()
    engine = create_store_engine(
        settings.database_path, echo=settings.database_echo
    )
    create_tables(engine)
    store = SqlResultStore(create_session_maker(engine))

    table = Table(title=f"Cached records ({settings.database_path})")
    table.add_column("Topic")
    table.add_column("Records", justify="right")
    table.add_column("Max days", justify="right")
    table.add_column("Max items", justify="right")
    try:
        topics = store.topics()
        for topic, count in topics.items():
            coverage = store.max_covered_scope(topic)
            table.add_row(
                topic, str(count), str(coverage.days), str(coverage.max_items)
            )
    except NewsdeskError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    finally:
        engine.dispose()
    console.print(table)
    console.print(f"Total: {sum(topics.values())} records")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "newsdesk.api.app:create_default_app",
        host=host,
        port=port,
        factory=True,
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
