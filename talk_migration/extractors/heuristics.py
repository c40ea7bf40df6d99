"""Text heuristics for the fields without a dedicated selector."""

import re
from typing import Optional

from bs4 import Tag

from talk_migration.extractors.fetch import Document

MONTHS = (
    "January|February|March|April|May|June|July|August|September|October|November|December"
)

# "A presentation at Devoxx Poland in June 2025 in Kraków, Poland by Baruch Sadogursky"
SUBHEAD_LOCATION_PATTERN = re.compile(
    rf"\bin\s+(?:{MONTHS})\s+\d{{4}}\s+in\s+(.+?)\s+by\b",
    re.I,
)

MIN_CONTAINER_ABSTRACT_LENGTH = 200
MIN_PARAGRAPH_ABSTRACT_LENGTH = 100


def location_from_subhead(subhead_text: str) -> Optional[str]:
    match = SUBHEAD_LOCATION_PATTERN.search(subhead_text or "")
    if not match:
        return None
    location = re.sub(r"\s+", " ", match.group(1)).strip(" ,.")
    return location or None


def abstract_from_container(container: Optional[Tag]) -> str:
    """Paragraphs of the description container, blank-line separated.

    Without paragraphs, the container's whole text counts only if it is long
    enough to be more than a one-line context sentence.
    """
    if container is None:
        return ""
    paragraphs = [
        p.get_text(" ", strip=True)
        for p in container.find_all("p")
    ]
    paragraphs = [p for p in paragraphs if p]
    if paragraphs:
        return "\n\n".join(paragraphs)
    text = container.get_text(" ", strip=True)
    if len(text) > MIN_CONTAINER_ABSTRACT_LENGTH:
        return text
    return ""


def abstract_from_paragraphs(doc: Document) -> str:
    """First substantial paragraph anywhere on the page."""
    for p in doc.select("p"):
        text = p.get_text(" ", strip=True)
        if len(text) > MIN_PARAGRAPH_ABSTRACT_LENGTH:
            return text
    return ""
