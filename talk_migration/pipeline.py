"""Single-talk migration: the orchestrated pipeline and its verdict.

Stages run strictly in order and each one is a precondition for the next:

    check existing -> fetch -> metadata -> resources -> PDF -> video
    -> assemble and write draft -> provenance -> record check -> commit
    -> [site build] -> [migration tests]

Any fatal error stops the run and is appended to the result's error list.
The build and test hooks only ever add warnings.
"""

from collections import Counter
from pathlib import Path
from typing import Optional

from rich.console import Console

from talk_migration.acquisition.pdf import PdfAcquirer
from talk_migration.acquisition.storage import GoogleDriveStorage, StorageProvider
from talk_migration.config import MigrationSettings
from talk_migration.errors import MigrationError, ProvenanceError, ValidationError
from talk_migration.extractors.fetch import PageFetcher
from talk_migration.extractors.metadata import MetadataExtractor
from talk_migration.extractors.platforms import PageParser, get_parser
from talk_migration.extractors.resources import ResourceExtractor
from talk_migration.extractors.video import VideoResolver
from talk_migration.hooks import run_migration_tests, run_site_build
from talk_migration.models.results import MigrationResult, ValidationResult
from talk_migration.models.talk import TalkDraft, TalkRecord
from talk_migration.records.assembler import ContentAssembler
from talk_migration.records.reader import RecordParseError, read_record
from talk_migration.records.store import RecordStore
from talk_migration.validators.provenance import ResourceProvenanceValidator
from talk_migration.validators.record import RecordValidator
from talk_migration.validators.similarity import verify_against_source

console = Console()


class MigrationOrchestrator:
    """Migrate one talk page into one record file."""

    def __init__(
        self,
        settings: MigrationSettings,
        fetcher: Optional[PageFetcher] = None,
        storage: Optional[StorageProvider] = None,
        store: Optional[RecordStore] = None,
        parser: Optional[PageParser] = None,
    ):
        self.settings = settings
        self.fetcher = fetcher or PageFetcher(
            timeout=settings.http_timeout,
            max_redirects=settings.max_redirects,
        )
        self.storage = storage or GoogleDriveStorage(settings.resolve(settings.google_credentials))
        self.store = store or RecordStore(settings.talks_path)
        self.parser = parser
        self.assembler = ContentAssembler()

    def migrate(self, url: str, skip_tests: bool = False) -> MigrationResult:
        result = MigrationResult(url=url)
        console.print(f"\n[bold cyan]Migrating[/bold cyan] {url}")

        existing = self.store.find_by_source(url)
        if existing is not None:
            console.print(f"[green]Already migrated:[/green] {existing.name}")
            result.ok = True
            result.already_migrated = True
            result.record_path = existing
            return result

        try:
            record, path = self._run_stages(url)
        except ValidationError as e:
            result.errors.append(str(e))
            result.errors.extend(e.details)
            print_failure(result)
            return result
        except MigrationError as e:
            result.errors.append(str(e))
            print_failure(result)
            return result

        result.ok = True
        result.record = record
        result.record_path = path

        if self.settings.build_command:
            warning = run_site_build(self.settings)
            if warning:
                result.warnings.append(warning)
        if not skip_tests:
            warning = run_migration_tests(self.settings)
            if warning:
                result.warnings.append(warning)

        print_summary(result)
        return result

    def _run_stages(self, url: str) -> tuple[TalkRecord, Path]:
        parser = self.parser or get_parser(url)

        console.print("[cyan]Fetching page...[/cyan]")
        doc = self.fetcher.fetch(url)

        draft = TalkDraft(source_url=url)

        console.print("[cyan]Extracting metadata...[/cyan]")
        metadata = MetadataExtractor(parser).extract(doc, source_url=url)
        draft = draft.with_metadata(metadata)

        console.print("[cyan]Extracting resources...[/cyan]")
        draft = draft.with_resources(ResourceExtractor(parser).extract(doc))

        console.print("[cyan]Looking for slides PDF...[/cyan]")
        acquirer = PdfAcquirer(
            self.fetcher,
            self.storage,
            pdf_dir=self.settings.pdf_path,
            thumbnails_dir=self.settings.thumbnails_path,
            parser=parser,
            storage_folder_name=self.settings.drive_folder_name,
        )
        pdf = acquirer.acquire(doc, metadata)
        if pdf.found:
            draft = draft.with_slides(pdf.slides, pdf.thumbnail_path)

        console.print("[cyan]Resolving video...[/cyan]")
        video, _status = VideoResolver(self.fetcher, parser).resolve(doc)
        draft = draft.with_video(video)

        try:
            record = draft.to_record()
        except ValueError as e:
            raise ValidationError(f"Could not assemble record for {url}: {e}") from e

        filename, content = self.assembler.assemble(record)
        draft_path = self.store.write_draft(filename, content)
        console.print(f"[dim]  Draft written to {draft_path}[/dim]")

        committed = False
        try:
            provenance = ResourceProvenanceValidator(parser.policy).validate(record.resources)
            if not provenance.ok:
                raise ProvenanceError(provenance.errors[0])

            check = RecordValidator().validate(content, record.resources)
            if not check.ok:
                raise ValidationError(
                    f"Record {filename} failed {len(check.errors)} structural check(s)",
                    details=check.errors,
                )

            final = self.store.commit(draft_path)
            committed = True
        finally:
            if not committed:
                self.store.discard(draft_path, keep=self.settings.keep_rejected)

        return record, final

    def verify(self, record_path: Path) -> ValidationResult:
        """Re-check a migrated record against its (live) source page."""
        try:
            parsed = read_record(record_path)
        except (OSError, UnicodeDecodeError, RecordParseError) as e:
            return ValidationResult.failure(f"Cannot read record {record_path}: {e}")

        if not parsed.source_url:
            return ValidationResult.failure(f"Record {record_path.name} has no source URL")

        parser = self.parser or get_parser(parsed.source_url)
        provenance = ResourceProvenanceValidator(parser.policy).validate(parsed.resources)
        if not provenance.ok:
            return provenance

        try:
            doc = self.fetcher.fetch(parsed.source_url)
        except MigrationError as e:
            return ValidationResult.failure(str(e))

        source_resources = ResourceExtractor(parser).extract(doc)
        return verify_against_source(parsed, source_resources, policy=parser.policy)

    def close(self) -> None:
        self.fetcher.close()


def print_summary(result: MigrationResult) -> None:
    """Success summary: file, resource counts by type, video and PDF status."""
    if result.already_migrated:
        return
    record = result.record
    console.print(f"\n[bold green]Migration complete:[/bold green] {result.record_path}")
    if record is not None:
        counts = Counter(r.type for r in record.resources)
        console.print(f"  Resources: {len(record.resources)} {dict(counts)}")
        console.print(f"  Slides: {record.slides.url if record.slides else '[dim]none[/dim]'}")
        console.print(f"  Video: {record.video.url if record.video else '[yellow]pending[/yellow]'}")
        console.print(f"  Status: {record.status}")
    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")


def print_failure(result: MigrationResult) -> None:
    console.print(f"\n[bold red]Migration failed:[/bold red] {result.url}")
    for i, error in enumerate(result.errors, 1):
        console.print(f"[red]  {i}. {error}[/red]")
