"""Video resolution: direct YouTube links or indirect (embed page) references."""

import re
from typing import Optional

from rich.console import Console

from talk_migration.errors import FetchError
from talk_migration.extractors.fetch import Document, PageFetcher
from talk_migration.extractors.platforms import PageParser, get_parser
from talk_migration.models.talk import Resource, TalkStatus

console = Console()

YOUTUBE_PATTERNS = [
    re.compile(r"youtube\.com/watch\?v=([A-Za-z0-9_-]{11})"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube(?:-nocookie)?\.com/embed/([A-Za-z0-9_-]{11})"),
]
VIMEO_PATTERNS = [
    re.compile(r"player\.vimeo\.com/video/(\d+)"),
    re.compile(r"vimeo\.com/(\d+)"),
]

VIDEO_TITLE = "Full Presentation Video"
VIDEO_DESCRIPTION = "Complete video recording"


def youtube_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def find_youtube_url(text: str) -> Optional[str]:
    """Earliest YouTube reference in ``text``, as a canonical watch URL."""
    earliest: Optional[re.Match] = None
    for pattern in YOUTUBE_PATTERNS:
        match = pattern.search(text)
        if match and (earliest is None or match.start() < earliest.start()):
            earliest = match
    return youtube_url(earliest.group(1)) if earliest else None


def find_vimeo_url(text: str) -> Optional[str]:
    for pattern in VIMEO_PATTERNS:
        match = pattern.search(text)
        if match:
            return f"https://vimeo.com/{match.group(1)}"
    return None


def find_video_url(text: str) -> Optional[str]:
    return find_youtube_url(text) or find_vimeo_url(text)


def video_resource(url: str) -> Resource:
    return Resource(url=url, title=VIDEO_TITLE, type="video", description=VIDEO_DESCRIPTION)


class VideoResolver:
    """Find the talk's recording. Absence is a valid outcome (``video-pending``)."""

    def __init__(self, fetcher: PageFetcher, parser: Optional[PageParser] = None):
        self.fetcher = fetcher
        self.parser = parser

    def resolve_embed(self, embed_url: str) -> str:
        """Mine an intermediary embed page for the real video URL.

        Falls back to the embed URL itself if the page cannot be fetched or
        does not mention a known video platform.
        """
        try:
            embed_page = self.fetcher.fetch_text(embed_url)
        except FetchError as e:
            console.print(f"[yellow]Could not fetch video embed {embed_url}: {e}[/yellow]")
            return embed_url

        found = find_video_url(embed_page)
        if found:
            console.print(f"[dim]  Embed {embed_url} → {found}[/dim]")
            return found

        console.print(f"[yellow]No video platform URL inside embed {embed_url}, keeping embed[/yellow]")
        return embed_url

    def resolve(self, doc: Document, page_text: Optional[str] = None) -> tuple[Optional[Resource], TalkStatus]:
        parser = self.parser or get_parser(doc.url)
        page_text = doc.html if page_text is None else page_text

        url: Optional[str] = None

        embed_src = parser.embed_iframe_src(doc)
        if embed_src:
            url = self.resolve_embed(embed_src)

        if url is None:
            url = find_youtube_url(page_text)

        if url is None:
            embeds = parser.embed_urls_in_text(page_text)
            if embeds:
                url = self.resolve_embed(embeds[0])

        if url is None:
            console.print("[yellow]No video found, status: video-pending[/yellow]")
            return None, "video-pending"

        console.print(f"[green]Video found:[/green] {url}")
        return video_resource(url), "completed"
