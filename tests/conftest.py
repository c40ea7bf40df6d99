"""Shared test fixtures and configuration."""

from pathlib import Path
from typing import Optional, Union

import httpx
import pytest

from talk_migration.acquisition.storage import StorageFolder, StoredFile, StoredFileMetadata
from talk_migration.config import MigrationSettings
from talk_migration.errors import AcquisitionError
from talk_migration.extractors.fetch import PageFetcher
from talk_migration.records.store import RecordStore

TALK_URL = "https://speaking.jbaru.ch/PjlHKD/robocoders-judgment-day"
PDF_URL = "https://on.notist.cloud/pdf/deck-robocoders.pdf"
OG_IMAGE_URL = "https://on.notist.cloud/slides/deck-robocoders/large.png"
DRIVE_VIEW_URL = "https://drive.google.com/file/d/XYZ/view"
YOUTUBE_ID = "dQw4w9WgXcQ"


def talk_page(
    title: str = "Robocoders: Judgment Day",
    datetime_attr: Optional[str] = "2025-06-11",
    conference: Optional[str] = "Devoxx Poland 2025",
    location: str = "Kraków, Poland",
    abstract: str = (
        "AI coding assistants write more of our code every day. In this talk we look "
        "at what happens when the robots also start reviewing it."
    ),
    resources: Optional[list[tuple[str, str]]] = None,
    pdf_link: Optional[str] = None,
    embedded_slides: bool = False,
    og_image: Optional[str] = OG_IMAGE_URL,
    video_html: str = "",
) -> str:
    """HTML shaped like a Notist presentation page."""
    parts = ["<html><head><title>talk</title>"]
    if og_image:
        parts.append(f'<meta property="og:image" content="{og_image}">')
    parts.append("</head><body>")
    parts.append(f'<div class="presentation-header"><h1><a href="#">{title}</a></h1></div>')
    if datetime_attr is not None:
        parts.append(f'<time datetime="{datetime_attr}">June 11, 2025</time>')
    if conference is not None:
        parts.append(
            f'<p class="subhead">A presentation at <a href="#">{conference}</a> '
            f"in June 2025 in {location} by Baruch Sadogursky</p>"
        )
    parts.append(f'<div id="description"><p>{abstract}</p></div>')
    if embedded_slides:
        parts.append(
            '<div id="slides"><img src="https://on.notist.cloud/slides/deck-robocoders/1.png"></div>'
        )
    if pdf_link:
        parts.append(f'<a href="{pdf_link}" download>Download PDF</a>')
    if video_html:
        parts.append(f'<div id="video">{video_html}</div>')
    if resources is not None:
        items = "".join(
            f'<li><h3><a href="{url}">{text}</a></h3></li>' for text, url in resources
        )
        parts.append(f'<div id="resources"><ul class="resource-list">{items}</ul></div>')
    parts.append("</body></html>")
    return "\n".join(parts)


Route = Union[str, bytes, tuple]


def mock_transport(routes: dict[str, Route]) -> httpx.MockTransport:
    """Serve ``routes``: url -> body, or (status, body[, headers]).

    Unknown URLs get a 404. ``calls`` on the transport records requested URLs.
    """
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        calls.append(url)
        route = routes.get(url)
        if route is None:
            return httpx.Response(404, text="not found")
        if not isinstance(route, tuple):
            route = (200, route)
        status, body = route[0], route[1]
        headers = route[2] if len(route) > 2 else {}
        if isinstance(body, bytes):
            return httpx.Response(status, content=body, headers=headers)
        headers = {"content-type": "text/html; charset=utf-8", **headers}
        return httpx.Response(status, text=body, headers=headers)

    transport = httpx.MockTransport(handler)
    transport.calls = calls
    return transport


def make_fetcher(routes: dict[str, Route], max_redirects: int = 10) -> PageFetcher:
    client = httpx.Client(transport=mock_transport(routes), follow_redirects=False)
    return PageFetcher(client=client, max_redirects=max_redirects)


class FakeStorage:
    """In-memory storage provider."""

    def __init__(
        self,
        folders: Optional[list[StorageFolder]] = None,
        view_url: str = DRIVE_VIEW_URL,
        fail_upload: bool = False,
    ):
        self.folders = [StorageFolder(id="root-1", name="Talks")] if folders is None else folders
        self.subfolders = {("root-1", "pdfs"): StorageFolder(id="pdfs-1", name="pdfs")}
        self.view_url = view_url
        self.fail_upload = fail_upload
        self.uploads: list[tuple[Path, str]] = []
        self.public: list[str] = []

    def upload(self, local_path: Path, parent_folder: str) -> StoredFile:
        if self.fail_upload:
            raise AcquisitionError("Google Drive upload failed: quota exceeded")
        self.uploads.append((local_path, parent_folder))
        return StoredFile(id="XYZ", web_view_url=self.view_url)

    def set_public_read_permission(self, file_id: str) -> None:
        self.public.append(file_id)

    def get_metadata(self, file_id: str) -> StoredFileMetadata:
        return StoredFileMetadata(thumbnail_link=None, mime_type="application/pdf")

    def list_accessible_root_folders(self) -> list[StorageFolder]:
        return list(self.folders)

    def find_subfolder(self, parent_id: str, name: str) -> Optional[StorageFolder]:
        return self.subfolders.get((parent_id, name))


@pytest.fixture
def settings(tmp_path: Path) -> MigrationSettings:
    """Settings rooted in a temporary site, with hooks and pauses disabled."""
    return MigrationSettings(
        site_root=tmp_path,
        batch_pause=0,
        test_command="",
        build_command="",
    )


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def store(settings: MigrationSettings) -> RecordStore:
    return RecordStore(settings.talks_path)
