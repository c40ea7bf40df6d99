"""Compact, deterministic filenames for talk records.

``2025-06-11-devoxx-poland-robocoders-judgment.md``: date, up to three
conference tokens, two title tokens, bounded to ~75 characters.
"""

import re
from datetime import date
from typing import Union

# Generic words that say nothing about which conference it was
CONFERENCE_STOP_WORDS = {
    "conference", "conferences", "day", "days", "summit", "tech", "technology",
    "developer", "developers", "dev", "meetup", "event", "annual",
    "international", "world", "global",
}

TITLE_STOP_WORDS = {
    "a", "an", "and", "the", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "from", "by", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "can", "may", "might", "must", "shall", "why", "how", "what",
    "when", "where", "who",
}

YEAR_PATTERN = re.compile(r"^\d{4}$")

TARGET_FILENAME_LENGTH = 75
MAX_CONFERENCE_SLUG_LENGTH = 30
TITLE_WORDS = 2
FALLBACK_TITLE_SLUG = "talk"


def slugify(text: str) -> str:
    """Lower-case, hyphen-separated alphanumerics."""
    slug = text.lower()
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    return slug.strip("-")


def truncate_slug(slug: str, max_length: int) -> str:
    """Cut a slug to ``max_length``, preferring a hyphen boundary.

    The hyphen boundary is used only if it keeps more than 60% of the budget;
    otherwise the slug is hard-cut. Trailing hyphens are always stripped.
    """
    if max_length <= 0:
        return ""
    if len(slug) <= max_length:
        return slug.strip("-")
    truncated = slug[:max_length]
    last_dash = truncated.rfind("-")
    if last_dash > max_length * 0.6:
        truncated = truncated[:last_dash]
    return truncated.strip("-")


def _tokens(text: str) -> list[str]:
    return re.sub(r"[^a-z0-9\s]+", " ", text.lower()).split()


def conference_slug(name: str, max_parts: int = 3) -> str:
    """Up to three meaningful conference tokens, location/brand before year."""
    if not name or not name.strip():
        return ""

    parts = [t for t in _tokens(name) if t not in CONFERENCE_STOP_WORDS]

    selected: list[str] = []
    non_year = 0
    for part in parts:
        if len(part) < 2:
            continue
        is_year = bool(YEAR_PATTERN.match(part))
        if is_year and non_year >= 2:
            continue
        selected.append(part)
        if not is_year:
            non_year += 1
        if len(selected) >= max_parts:
            break

    return truncate_slug("-".join(selected), MAX_CONFERENCE_SLUG_LENGTH)


def title_slug(title: str, max_words: int = TITLE_WORDS) -> str:
    """The first two meaningful title words.

    Stop words are dropped unless longer than 8 characters. If that leaves
    fewer than two words, only short (<= 3 chars) stop words are dropped.
    """
    if not title or not title.strip():
        return ""

    words = _tokens(title)
    important = [
        w for w in words
        if len(w) > 2 and (w not in TITLE_STOP_WORDS or len(w) > 8)
    ]
    if len(important) < 2 and len(words) > len(important):
        important = [w for w in words if not (w in TITLE_STOP_WORDS and len(w) <= 3)]

    return "-".join(important[:max_words])


def filename(
    talk_date: Union[date, str],
    conference: str,
    title: str,
    extension: str = ".md",
) -> str:
    """``{date}-{conferenceSlug}-{titleSlug}{extension}``, about 75 chars at most."""
    date_part = talk_date.isoformat() if isinstance(talk_date, date) else str(talk_date)
    conf_part = conference_slug(conference)
    title_part = title_slug(title) or FALLBACK_TITLE_SLUG

    base_length = len(date_part) + 1 + len(conf_part) + 1 + len(extension)
    available = TARGET_FILENAME_LENGTH - base_length
    if len(title_part) > available:
        title_part = truncate_slug(title_part, available) or FALLBACK_TITLE_SLUG

    stem = "-".join(p for p in (date_part, conf_part, title_part) if p)
    return f"{stem}{extension}"


def thumbnail_filename(stem: str, extension: str = ".png") -> str:
    return f"{stem}-thumbnail{extension}"


def talk_stem(talk_date: Union[date, str], conference: str, title: str) -> str:
    """Record filename without ``.md``; shared by the PDF and thumbnail names."""
    return filename(talk_date, conference, title)[: -len(".md")]
