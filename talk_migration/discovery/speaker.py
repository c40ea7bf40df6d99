"""Speaker-level batch migration.

Harvest every talk URL from a speaker's index page, then migrate them one by
one, sequentially, with a short pause in between. One talk failing never stops
the batch; every outcome lands in the ``BatchReport`` ledger.
"""

import time
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urljoin, urldefrag

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from talk_migration.extractors.platforms import PageParser, get_parser
from talk_migration.hooks import run_migration_tests
from talk_migration.models.results import MigrationResult
from talk_migration.normalizers.urls import normalize_url
from talk_migration.pipeline import MigrationOrchestrator

console = Console()


@dataclass
class BatchReport:
    """Per-URL ledger of a batch run."""

    discovered: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # already migrated
    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, list[str]] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def record(self, result: MigrationResult) -> None:
        if result.ok:
            self.succeeded.append(result.url)
            self.warnings.extend(result.warnings)
        else:
            self.failed[result.url] = list(result.errors)


class BatchDiscoverer:
    """Find a speaker's talks and drive the orchestrator once per talk."""

    def __init__(
        self,
        orchestrator: MigrationOrchestrator,
        parser: Optional[PageParser] = None,
        pause: Optional[float] = None,
    ):
        self.orchestrator = orchestrator
        self.parser = parser
        self.pause = orchestrator.settings.batch_pause if pause is None else pause

    def harvest(self, index_url: str) -> list[str]:
        """Every talk link on the index page, absolute, deduplicated, in page order."""
        parser = self.parser or get_parser(index_url)
        doc = self.orchestrator.fetcher.fetch(index_url)

        urls: list[str] = []
        seen: set[str] = set()
        for anchor in doc.select("a[href]"):
            url, _fragment = urldefrag(urljoin(doc.url, anchor["href"].strip()))
            if not parser.is_talk_link(url, index_url):
                continue
            key = normalize_url(url)
            if key in seen:
                continue
            seen.add(key)
            urls.append(url)
        return urls

    def discover(self, index_url: str, report: Optional[BatchReport] = None) -> list[str]:
        """Talk URLs on the speaker index that have not been migrated yet."""
        console.print(f"[cyan]Discovering talks on[/cyan] {index_url}")
        candidates = self.harvest(index_url)

        pending: list[str] = []
        for url in candidates:
            if self.orchestrator.store.already_migrated(url):
                if report is not None:
                    report.skipped.append(url)
                continue
            pending.append(url)

        console.print(
            f"[green]Found {len(candidates)} talks[/green] "
            f"[dim]({len(candidates) - len(pending)} already migrated, {len(pending)} to go)[/dim]"
        )
        if report is not None:
            report.discovered = candidates
        return pending

    def migrate_all(self, index_url: str, skip_tests: bool = False) -> BatchReport:
        """Discover and migrate. Tests run once after the batch, not per talk."""
        report = BatchReport()
        urls = self.discover(index_url, report)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            console=console,
        ) as progress:
            task = progress.add_task("Migrating talks...", total=len(urls))

            for i, url in enumerate(urls):
                if i > 0 and self.pause > 0:
                    time.sleep(self.pause)
                try:
                    result = self.orchestrator.migrate(url, skip_tests=True)
                except Exception as e:
                    console.print(f"[red]Error migrating {url}: {e}[/red]")
                    report.failed[url] = [f"exception:{type(e).__name__}: {e}"]
                else:
                    report.record(result)
                progress.advance(task)

        if report.succeeded and not skip_tests:
            warning = run_migration_tests(self.orchestrator.settings)
            if warning:
                report.warnings.append(warning)

        print_batch_report(report)
        return report


def print_batch_report(report: BatchReport) -> None:
    table = Table(title=f"Batch Migration ({len(report.discovered)} talks found)")
    table.add_column("Talk", style="cyan", max_width=60)
    table.add_column("Result")
    table.add_column("Detail", style="dim", max_width=60)

    for url in report.skipped:
        table.add_row(url, "[dim]skipped[/dim]", "already migrated")
    for url in report.succeeded:
        table.add_row(url, "[green]migrated[/green]", "")
    for url, errors in report.failed.items():
        table.add_row(url, "[red]failed[/red]", errors[0] if errors else "")

    console.print(table)
    console.print(
        f"[bold]Migrated: {len(report.succeeded)} | Failed: {len(report.failed)} "
        f"| Skipped: {len(report.skipped)}[/bold]"
    )
    for warning in report.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")
