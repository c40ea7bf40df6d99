"""CLI for talk migrations."""

from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from talk_migration.config import load_settings
from talk_migration.discovery.speaker import BatchDiscoverer
from talk_migration.normalizers.urls import is_http_url
from talk_migration.pipeline import MigrationOrchestrator

# Load environment variables (override=True to beat shell env vars)
load_dotenv(override=True)

app = typer.Typer(
    name="talk-migration",
    help="Migrate conference talks from a hosted presentation platform into site records",
    add_completion=False,
)
console = Console()


def _orchestrator() -> MigrationOrchestrator:
    try:
        settings = load_settings()
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return MigrationOrchestrator(settings)


@app.command()
def migrate(
    url: str = typer.Argument(..., help="Talk URL, or a speaker index URL with --speaker"),
    speaker: bool = typer.Option(False, "--speaker", "-s", help="Discover and migrate all talks on a speaker page"),
    skip_tests: bool = typer.Option(False, "--skip-tests", help="Do not run the site's migration tests afterwards"),
):
    """Migrate one talk (or every talk of a speaker)."""
    if not is_http_url(url):
        console.print(f"[red]Error: URL must start with http:// or https://, got {url!r}[/red]")
        raise typer.Exit(1)

    orchestrator = _orchestrator()
    try:
        if speaker:
            report = BatchDiscoverer(orchestrator).migrate_all(url, skip_tests=skip_tests)
            ok = report.ok
        else:
            result = orchestrator.migrate(url, skip_tests=skip_tests)
            ok = result.ok
    finally:
        orchestrator.close()

    raise typer.Exit(0 if ok else 1)


@app.command()
def verify(
    path: Path = typer.Argument(..., help="Record file to check against its source page"),
):
    """Check that a migrated record kept every resource of its source page."""
    if not path.exists():
        console.print(f"[red]Error: {path} does not exist[/red]")
        raise typer.Exit(1)

    orchestrator = _orchestrator()
    try:
        check = orchestrator.verify(path)
    finally:
        orchestrator.close()

    if check.ok:
        console.print(f"[green]✓ {path.name} matches its source[/green]")
        raise typer.Exit(0)

    console.print(f"[red]✗ {path.name} failed verification:[/red]")
    for i, error in enumerate(check.errors, 1):
        console.print(f"[red]  {i}. {error}[/red]")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
