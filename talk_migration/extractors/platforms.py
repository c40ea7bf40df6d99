"""Source-platform adapters.

All knowledge of a hosting platform's markup lives here: selectors, URL shapes,
the hosts we trust, and the platform-specific policy predicates. A markup change
on the source site means touching one adapter, not the pipeline.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Optional
from urllib.parse import urljoin, urlparse

from bs4 import Tag

from talk_migration.extractors.fetch import Document
from talk_migration.models.talk import UNKNOWN_SPEAKER
from talk_migration.normalizers.urls import host_matches

# Speakers known by the custom domain their Notist profile is served from
KNOWN_SPEAKER_HOSTS = {
    "speaking.jbaru.ch": "Baruch Sadogursky",
}

NOTIST_PDF_PATTERN = re.compile(r"https?://on\.notist\.cloud/pdf/[^\"'\s<>]+\.pdf")
NOTIST_EMBED_PATTERN = re.compile(r"(?:https?:)?//notist\.ninja/embed/[A-Za-z0-9_-]+")
NOTIST_SLIDE_IMAGE_PATTERN = re.compile(r"notist\.cloud/slides/", re.I)


def _slides_embedded_notist(doc: Document) -> bool:
    """Slide images are rendered on the page (a deck viewer or slide images)."""
    if doc.select_one("#slides, .slide-deck, .deck-embed, [data-slide]"):
        return True
    for img in doc.select("img[src], img[data-src]"):
        src = img.get("src") or img.get("data-src") or ""
        if NOTIST_SLIDE_IMAGE_PATTERN.search(src):
            return True
    return False


def _thumbnail_prefix_check(prefix: str) -> Callable[[str], bool]:
    def check(url: str) -> bool:
        return url.startswith(prefix)
    return check


@dataclass(frozen=True)
class SourcePolicy:
    """Trust rules for one source platform.

    The two predicates are deliberately callables: they encode assumptions about
    a single platform and are swapped per adapter (or in tests).
    """

    scraped_hosts: tuple[str, ...]
    storage_hosts: tuple[str, ...] = ("drive.google.com", "docs.google.com")
    video_hosts: tuple[str, ...] = ("youtube.com", "youtu.be", "vimeo.com")
    embed_hosts: tuple[str, ...] = ()
    slides_embedded: Callable[[Document], bool] = lambda doc: False
    thumbnail_allowed: Callable[[str], bool] = lambda url: False

    def is_scraped_platform(self, url: str) -> bool:
        return host_matches(url, self.scraped_hosts)

    def is_storage(self, url: str) -> bool:
        return host_matches(url, self.storage_hosts)

    def is_video_platform(self, url: str) -> bool:
        return host_matches(url, self.video_hosts)

    def is_embed(self, url: str) -> bool:
        return host_matches(url, self.embed_hosts)


NOTIST_THUMBNAIL_PREFIX = "https://on.notist.cloud/slides/"

NOTIST_POLICY = SourcePolicy(
    scraped_hosts=("noti.st", "notist.cloud", "speaking.jbaru.ch"),
    embed_hosts=("notist.ninja",),
    slides_embedded=_slides_embedded_notist,
    thumbnail_allowed=_thumbnail_prefix_check(NOTIST_THUMBNAIL_PREFIX),
)


@dataclass
class PageParser:
    """Narrow interface between the pipeline and one platform's markup."""

    name: str
    policy: SourcePolicy
    title_selectors: tuple[str, ...] = ()
    datetime_selector: str = "time[datetime]"
    subhead_selector: str = ".subhead"
    description_selectors: tuple[str, ...] = ()
    resources_selector: str = "#resources"
    resource_anchor_selector: str = ".resource-list li h3 a"
    video_container_selector: str = "#video"
    embed_pattern: re.Pattern = NOTIST_EMBED_PATTERN
    pdf_pattern: Optional[re.Pattern] = None
    # "/PjlHKD/robocoders-judgment-day" on custom domains, "/jbaruch/PjlHKD/..." on noti.st
    talk_path_pattern: re.Pattern = re.compile(r"^(?:/[\w.-]+)?/[A-Za-z0-9]{6}/[\w-]+/?$")
    non_talk_path_pattern: re.Pattern = re.compile(r"/videos/|/(about|contact|speaking)/?$", re.I)
    hosts: tuple[str, ...] = field(default_factory=tuple)

    def matches(self, url: str) -> bool:
        return host_matches(url, self.hosts)

    # -- metadata ---------------------------------------------------------

    def title(self, doc: Document) -> Optional[str]:
        for selector in self.title_selectors:
            elem = doc.select_one(selector)
            if elem:
                text = elem.get_text(" ", strip=True)
                if text:
                    return text
        return None

    def datetime_attr(self, doc: Document) -> Optional[str]:
        elem = doc.select_one(self.datetime_selector)
        if elem is None:
            return None
        return (elem.get("datetime") or "").strip() or None

    def subhead(self, doc: Document) -> Optional[Tag]:
        return doc.select_one(self.subhead_selector)

    def conference(self, doc: Document) -> Optional[str]:
        subhead = self.subhead(doc)
        if subhead is None:
            return None
        anchor = subhead.select_one("a")
        if anchor is None:
            return None
        return anchor.get_text(" ", strip=True) or None

    def subhead_text(self, doc: Document) -> str:
        subhead = self.subhead(doc)
        return subhead.get_text(" ", strip=True) if subhead else ""

    def description_container(self, doc: Document) -> Optional[Tag]:
        for selector in self.description_selectors:
            elem = doc.select_one(selector)
            if elem:
                return elem
        return None

    def speaker_for(self, url: str) -> str:
        """Coarse speaker guess from the talk URL, never from page content."""
        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
        if host in KNOWN_SPEAKER_HOSTS:
            return KNOWN_SPEAKER_HOSTS[host]
        if host in ("noti.st", "www.noti.st"):
            handle = parsed.path.strip("/").split("/")[0]
            if handle:
                return handle
        return UNKNOWN_SPEAKER

    # -- resources & media --------------------------------------------------

    def resource_anchors(self, doc: Document) -> Optional[list[Tag]]:
        """Anchors of the resource list, or None if the page has no resource section."""
        container = doc.select_one(self.resources_selector)
        if container is None:
            return None
        return container.select(self.resource_anchor_selector)

    def embed_iframe_src(self, doc: Document) -> Optional[str]:
        container = doc.select_one(self.video_container_selector)
        if container is None:
            return None
        for iframe in container.select("iframe[src]"):
            src = iframe["src"].strip()
            if self.embed_pattern.search(src):
                return urljoin(doc.url, src)
        return None

    def embed_urls_in_text(self, text: str) -> list[str]:
        return [m if m.startswith("http") else f"https:{m}" for m in self.embed_pattern.findall(text)]

    def pdf_candidates(self, doc: Document) -> list[str]:
        """Downloadable slide-deck URLs, best first.

        1. explicit ``download`` links, 2. ``.pdf`` links outside the resource
        list, 3. the platform's PDF URL shape anywhere in the raw page.
        """
        candidates: list[str] = []

        for anchor in doc.select("a[download][href]"):
            candidates.append(urljoin(doc.url, anchor["href"].strip()))

        resources = doc.select_one(self.resources_selector)
        listed = set()
        if resources is not None:
            listed = {urljoin(doc.url, a["href"].strip()) for a in resources.select("a[href]")}

        for anchor in doc.select("a[href]"):
            href = anchor["href"].strip()
            if not href.lower().split("?")[0].endswith(".pdf"):
                continue
            if resources is not None and any(p is resources for p in anchor.parents):
                continue
            candidates.append(urljoin(doc.url, href))

        if self.pdf_pattern is not None:
            candidates.extend(m for m in self.pdf_pattern.findall(doc.html) if m not in listed)

        return list(dict.fromkeys(c for c in candidates if c.startswith(("http://", "https://"))))

    def og_image(self, doc: Document) -> Optional[str]:
        meta = doc.select_one('meta[property="og:image"]')
        if meta is None:
            return None
        return (meta.get("content") or "").strip() or None

    # -- discovery ----------------------------------------------------------

    def is_talk_link(self, url: str, index_url: str) -> bool:
        parsed = urlparse(url)
        index = urlparse(index_url)
        if parsed.hostname != index.hostname:
            return False
        if url.rstrip("/") == index_url.rstrip("/"):
            return False
        if self.non_talk_path_pattern.search(parsed.path):
            return False
        return bool(self.talk_path_pattern.match(parsed.path))


NOTIST = PageParser(
    name="notist",
    policy=NOTIST_POLICY,
    title_selectors=(".presentation-header h1 a", ".presentation-header h1"),
    description_selectors=("#description", ".presentation-description", ".description"),
    pdf_pattern=NOTIST_PDF_PATTERN,
    hosts=("noti.st", "speaking.jbaru.ch"),
)

PARSERS = [NOTIST]


def get_parser(url: str) -> PageParser:
    """Adapter for ``url``'s platform. Notist also serves speakers' custom domains."""
    for parser in PARSERS:
        if parser.matches(url):
            return parser
    return NOTIST
