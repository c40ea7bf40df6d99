"""Synchronous HTTP fetcher with bounded redirect following.

Redirects are followed by hand (``follow_redirects=False``) so that the hop
count is capped and a redirect without ``Location`` is reported as such.
"""

import random
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from rich.console import Console

from talk_migration.errors import FetchError

console = Console()

# Realistic Firefox User-Agents (2025-2026)
USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:134.0) Gecko/20100101 Firefox/134.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14.7; rv:134.0) Gecko/20100101 Firefox/134.0",
    "Mozilla/5.0 (X11; Linux x86_64; rv:134.0) Gecko/20100101 Firefox/134.0",
    "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:133.0) Gecko/20100101 Firefox/133.0",
]

REDIRECT_STATUSES = {301, 302, 303, 307, 308}
DEFAULT_MAX_REDIRECTS = 10
DEFAULT_TIMEOUT = 30.0


class Document:
    """A fetched and parsed HTML page."""

    def __init__(self, url: str, html: str, soup: BeautifulSoup, status: int = 200):
        self.url = url  # final URL, after redirects
        self.html = html  # raw markup, for pattern searches
        self.soup = soup
        self.status = status

    @property
    def text(self) -> str:
        """Visible text of the page."""
        return self.soup.get_text(" ", strip=True)

    def select_one(self, selector: str):
        return self.soup.select_one(selector)

    def select(self, selector: str):
        return self.soup.select(selector)


def parse_html(url: str, html: str, status: int = 200) -> Document:
    """Parse markup into a Document. Raises FetchError on unusable bodies."""
    if not html or not html.strip():
        raise FetchError(url, "empty response body", status=None)
    try:
        soup = BeautifulSoup(html, "lxml")
    except (ParserRejectedMarkup, ValueError, TypeError) as e:
        raise FetchError(url, f"failed to parse HTML: {e}") from e
    return Document(url, html, soup, status)


class PageFetcher:
    """GET pages and files, following at most ``max_redirects`` redirects."""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
    ):
        self.max_redirects = max_redirects
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            follow_redirects=False,
            headers={
                "User-Agent": random.choice(USER_AGENTS),
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.9",
            },
        )

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "PageFetcher":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def get(self, url: str) -> httpx.Response:
        """GET ``url``, following redirects by hand. Returns the terminal 2xx response."""
        current = url
        for _ in range(self.max_redirects + 1):
            try:
                response = self.client.get(current, follow_redirects=False)
            except httpx.TimeoutException as e:
                raise FetchError(current, "timeout") from e
            except httpx.HTTPError as e:
                raise FetchError(current, f"connection error ({type(e).__name__}: {e})") from e

            if response.status_code in REDIRECT_STATUSES:
                location = response.headers.get("location")
                if not location:
                    raise FetchError(
                        current,
                        "redirect without Location header",
                        status=response.status_code,
                    )
                current = urljoin(current, location)
                continue

            if not 200 <= response.status_code < 300:
                raise FetchError(current, "unexpected status", status=response.status_code)

            return response

        raise FetchError(url, f"too many redirects (more than {self.max_redirects})")

    def fetch(self, url: str) -> Document:
        """Fetch and parse an HTML page."""
        response = self.get(url)
        return parse_html(str(response.url), response.text, response.status_code)

    def fetch_text(self, url: str) -> str:
        """Fetch a page's raw body without parsing it."""
        return self.get(url).text

    def download(self, url: str, dest: Path) -> str:
        """Download ``url`` to ``dest`` (parents created). Returns the content type."""
        response = self.get(url)
        dest.parent.mkdir(parents=True, exist_ok=True)
        with open(dest, "wb") as f:
            f.write(response.content)
        console.print(f"[dim]Downloaded {url} → {dest} ({len(response.content)} bytes)[/dim]")
        return response.headers.get("content-type", "")
