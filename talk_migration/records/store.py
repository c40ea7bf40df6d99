"""The on-disk record directory: idempotency lookups and atomic writes."""

import os
from pathlib import Path
from typing import Iterator, Optional

from rich.console import Console

from talk_migration.errors import ValidationError
from talk_migration.normalizers.urls import same_source
from talk_migration.records.reader import RecordParseError, read_record

console = Console()

DRAFT_SUFFIX = ".draft"


class RecordStore:
    """Talk records under one directory (``_talks`` in the site)."""

    def __init__(self, talks_dir: Path):
        self.talks_dir = talks_dir

    def iter_record_paths(self) -> Iterator[Path]:
        if not self.talks_dir.exists():
            return iter(())
        return iter(sorted(self.talks_dir.glob("*.md")))

    def find_by_source(self, source_url: str) -> Optional[Path]:
        """Path of the record migrated from ``source_url``, if any.

        Unreadable records are skipped; one bad file never aborts the scan.
        """
        for path in self.iter_record_paths():
            try:
                parsed = read_record(path)
            except (OSError, UnicodeDecodeError, RecordParseError) as e:
                console.print(f"[yellow]Skipping unreadable record {path.name}: {e}[/yellow]")
                continue
            if same_source(parsed.source_url, source_url):
                return path
        return None

    def already_migrated(self, source_url: str) -> bool:
        return self.find_by_source(source_url) is not None

    def path_for(self, filename: str) -> Path:
        return self.talks_dir / filename

    def write_draft(self, filename: str, content: str) -> Path:
        """Write ``content`` next to its final location, as ``<filename>.draft``."""
        final = self.path_for(filename)
        if final.exists():
            raise ValidationError(
                f"Record file already exists: {final} (refusing to overwrite)"
            )
        self.talks_dir.mkdir(parents=True, exist_ok=True)
        draft = final.with_name(final.name + DRAFT_SUFFIX)
        draft.write_text(content, encoding="utf-8")
        return draft

    def commit(self, draft: Path) -> Path:
        """Atomically move an accepted draft to its final name."""
        final = draft.with_name(draft.name[: -len(DRAFT_SUFFIX)])
        os.replace(draft, final)
        return final

    def discard(self, draft: Path, keep: bool = False) -> None:
        if keep:
            console.print(f"[yellow]Rejected draft kept for inspection: {draft}[/yellow]")
            return
        draft.unlink(missing_ok=True)
