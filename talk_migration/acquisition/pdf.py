"""Slide-deck acquisition: find the PDF, re-host it, fetch the preview image."""

from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel
from rich.console import Console

from talk_migration.acquisition.storage import StorageProvider, resolve_upload_folder
from talk_migration.errors import AcquisitionError, FetchError, StorageConfigurationError
from talk_migration.extractors.fetch import Document, PageFetcher
from talk_migration.extractors.platforms import PageParser, get_parser
from talk_migration.models.talk import Resource, TalkMetadata
from talk_migration.normalizers.slugs import talk_stem, thumbnail_filename

console = Console()

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".gif")
SLIDES_DESCRIPTION = "Complete slide deck (PDF)"


class PdfOutcome(BaseModel):
    """Result of the PDF stage. ``slides`` is None when the talk has no deck."""

    slides: Optional[Resource] = None
    source_pdf_url: Optional[str] = None
    local_pdf_path: Optional[Path] = None
    thumbnail_path: Optional[Path] = None
    storage_file_id: Optional[str] = None
    storage_thumbnail_link: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.slides is not None


class PdfAcquirer:
    """Download the talk's slide deck, upload it to storage, grab a thumbnail.

    Once a deck is detected it is mandatory: every failure from here on is fatal.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        storage: StorageProvider,
        pdf_dir: Path,
        thumbnails_dir: Path,
        parser: Optional[PageParser] = None,
        storage_folder_name: Optional[str] = None,
    ):
        self.fetcher = fetcher
        self.storage = storage
        self.pdf_dir = pdf_dir
        self.thumbnails_dir = thumbnails_dir
        self.parser = parser
        self.storage_folder_name = storage_folder_name

    def acquire(self, doc: Document, metadata: TalkMetadata) -> PdfOutcome:
        parser = self.parser or get_parser(doc.url)
        candidates = parser.pdf_candidates(doc)

        if not candidates:
            if parser.policy.slides_embedded(doc):
                raise AcquisitionError(
                    f"Slides are embedded on {doc.url} but cannot be downloaded. "
                    f"Manual fix required: enable download for this presentation's "
                    f"slide deck on the source platform, then re-run the migration."
                )
            console.print("[yellow]No PDF found[/yellow]")
            return PdfOutcome()

        pdf_url = candidates[0]
        console.print(f"[cyan]Found PDF:[/cyan] {pdf_url}")

        stem = talk_stem(metadata.date, metadata.conference, metadata.title)
        local_pdf = self._download_pdf(pdf_url, self.pdf_dir / f"{stem}.pdf")
        file_id, view_url, drive_thumbnail = self._upload(local_pdf)
        thumbnail = self._download_thumbnail(doc, parser, stem)

        slides = Resource(
            url=view_url,
            title=f"{metadata.title} - Slides",
            type="slides",
            description=SLIDES_DESCRIPTION,
        )
        console.print(f"[green]PDF re-hosted:[/green] {view_url}")

        return PdfOutcome(
            slides=slides,
            source_pdf_url=pdf_url,
            local_pdf_path=local_pdf,
            thumbnail_path=thumbnail,
            storage_file_id=file_id,
            storage_thumbnail_link=drive_thumbnail,
        )

    def _download_pdf(self, pdf_url: str, dest: Path) -> Path:
        try:
            self.fetcher.download(pdf_url, dest)
        except FetchError as e:
            raise AcquisitionError(f"Failed to download PDF from {pdf_url}: {e}") from e
        if dest.stat().st_size == 0:
            dest.unlink()
            raise AcquisitionError(f"Downloaded PDF from {pdf_url} is empty")
        return dest

    def _upload(self, local_pdf: Path) -> tuple[str, str, Optional[str]]:
        try:
            folder = resolve_upload_folder(self.storage, self.storage_folder_name)
            stored = self.storage.upload(local_pdf, folder.id)
            self.storage.set_public_read_permission(stored.id)
            metadata = self.storage.get_metadata(stored.id)
        except StorageConfigurationError:
            raise
        except AcquisitionError as e:
            raise AcquisitionError(
                f"Failed to upload PDF {local_pdf.name} to storage "
                f"(required for slides): {e}"
            ) from e
        except OSError as e:
            raise AcquisitionError(f"Failed to read {local_pdf} for upload: {e}") from e

        if metadata.mime_type and metadata.mime_type != "application/pdf":
            console.print(f"[yellow]Stored file {stored.id} reports type {metadata.mime_type}[/yellow]")
        return stored.id, stored.web_view_url, metadata.thumbnail_link

    def _download_thumbnail(self, doc: Document, parser: PageParser, stem: str) -> Path:
        image_url = parser.og_image(doc)
        if not image_url:
            raise AcquisitionError(
                f"No og:image preview on {doc.url}; a real slide thumbnail is required"
            )
        if not parser.policy.thumbnail_allowed(image_url):
            raise AcquisitionError(
                f"Thumbnail {image_url} is not served from the source platform's "
                f"slide-deck CDN; refusing an untrusted preview image"
            )

        suffix = Path(urlparse(image_url).path).suffix.lower()
        extension = suffix if suffix in IMAGE_EXTENSIONS else ".png"
        dest = self.thumbnails_dir / thumbnail_filename(stem, extension)

        try:
            content_type = self.fetcher.download(image_url, dest)
        except FetchError as e:
            raise AcquisitionError(f"Failed to download thumbnail {image_url}: {e}") from e

        if dest.stat().st_size == 0 or (content_type and not content_type.startswith("image/")):
            dest.unlink()
            raise AcquisitionError(
                f"Thumbnail {image_url} is not a valid image "
                f"(content type {content_type or 'unknown'})"
            )

        console.print(f"[dim]  Thumbnail saved to {dest}[/dim]")
        return dest
