"""URL normalization and resource classification."""

import re
from typing import Iterable, Optional
from urllib.parse import urlparse

from talk_migration.models.talk import ResourceType


def normalize_url(url: Optional[str]) -> Optional[str]:
    """Canonicalize a URL for equality checks (never for network calls).

    https → http, surrounding whitespace trimmed, one trailing slash removed.
    Empty or None input comes back unchanged.
    """
    if not url:
        return url
    normalized = url.strip()
    normalized = re.sub(r"^https://", "http://", normalized)
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def same_source(url_a: Optional[str], url_b: Optional[str]) -> bool:
    """True if two URLs point at the same page after normalization."""
    if not url_a or not url_b:
        return False
    return normalize_url(url_a) == normalize_url(url_b)


def classify_resource(url: str) -> ResourceType:
    """Classify a resource URL. First match wins."""
    if "github.com" in url:
        return "code"
    if "docs.google.com/presentation" in url:
        return "slides"
    if re.search(r"drive\.google\.com.*\.pdf", url):
        return "slides"
    if "youtube.com" in url or "youtu.be" in url:
        return "video"
    return "link"


def host_of(url: str) -> str:
    """Lower-cased host of a URL, '' if it has none."""
    try:
        return (urlparse(url.strip()).hostname or "").lower()
    except ValueError:
        return ""


def host_matches(url: str, hosts: Iterable[str]) -> bool:
    """True if the URL's host is one of ``hosts`` or a subdomain of one."""
    host = host_of(url)
    if not host:
        return False
    return any(host == h or host.endswith("." + h) for h in hosts)


def is_http_url(url: Optional[str]) -> bool:
    return bool(url) and url.startswith(("http://", "https://"))
