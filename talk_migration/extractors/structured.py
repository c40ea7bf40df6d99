"""Structured data (Schema.org JSON-LD) helpers used as metadata fallbacks."""

import json
import re
from datetime import date, datetime
from typing import Any, Iterable, Optional

from bs4 import BeautifulSoup

DATE_FORMATS = [
    "%B %d, %Y",      # January 15, 2026
    "%b %d, %Y",      # Jan 15, 2026
    "%d %B %Y",       # 15 January 2026
    "%d %b %Y",       # 15 Jan 2026
    "%Y/%m/%d",       # 2026/01/15
]

PUBLISH_DATE_KEYS = ("datePublished", "dateCreated", "startDate")


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """Parse an ISO datetime or a common human date format. None if unparsable."""
    if not date_str:
        return None

    date_str = date_str.strip()

    iso = re.match(r"^(\d{4}-\d{2}-\d{2})", date_str)
    if iso:
        try:
            return date.fromisoformat(iso.group(1))
        except ValueError:
            return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return None


def extract_json_ld(soup: BeautifulSoup) -> list[dict]:
    """All JSON-LD objects on the page, ``@graph`` containers flattened."""
    blocks: list[dict] = []

    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except (json.JSONDecodeError, TypeError):
            continue
        items = data if isinstance(data, list) else [data]
        for item in items:
            if not isinstance(item, dict):
                continue
            blocks.append(item)
            graph = item.get("@graph")
            if isinstance(graph, list):
                blocks.extend(g for g in graph if isinstance(g, dict))

    return blocks


def _name_of(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        name = value.get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()
    if isinstance(value, list):
        for item in value:
            name = _name_of(item)
            if name:
                return name
    return None


def find_publish_date(blocks: Iterable[dict]) -> Optional[date]:
    """First parsable publish-date field across all blocks."""
    for block in blocks:
        for key in PUBLISH_DATE_KEYS:
            parsed = parse_date(block.get(key)) if isinstance(block.get(key), str) else None
            if parsed:
                return parsed
    return None


def find_publication_name(blocks: Iterable[dict]) -> Optional[str]:
    """Name of the event the presentation was given at."""
    for block in blocks:
        for key in ("publication", "isPartOf"):
            name = _name_of(block.get(key))
            if name:
                return name
    return None


def find_location(blocks: Iterable[dict]) -> Optional[str]:
    """"City, Country" from a location/contentLocation address, or the place name."""
    for block in blocks:
        for key in ("location", "contentLocation"):
            location = block.get(key)
            if isinstance(location, list):
                location = location[0] if location else None
            if isinstance(location, str) and location.strip():
                return location.strip()
            if not isinstance(location, dict):
                continue
            address = location.get("address")
            if isinstance(address, dict):
                parts = [
                    _name_of(address.get("addressLocality")),
                    _name_of(address.get("addressCountry")),
                ]
                joined = ", ".join(p for p in parts if p)
                if joined:
                    return joined
            elif isinstance(address, str) and address.strip():
                return address.strip()
            name = _name_of(location)
            if name:
                return name
    return None
