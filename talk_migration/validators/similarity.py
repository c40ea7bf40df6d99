"""Fuzzy comparison between a migrated record and its source page.

``SIMILARITY_THRESHOLD`` is policy, not law: titles scoring above it are taken
to describe the same resource.
"""

import re
from difflib import SequenceMatcher
from typing import Iterable

from talk_migration.extractors.platforms import NOTIST_POLICY, SourcePolicy
from talk_migration.models.results import ValidationResult
from talk_migration.models.talk import Resource
from talk_migration.normalizers.urls import host_of, normalize_url
from talk_migration.records.reader import ParsedRecord

SIMILARITY_THRESHOLD = 0.6


def _normalize_title(title: str) -> str:
    return re.sub(r"\s+", " ", re.sub(r"[^a-z0-9\s]+", " ", title.lower())).strip()


def title_similarity(title_a: str, title_b: str) -> float:
    """Edit-distance style ratio in [0, 1] over normalized titles."""
    a, b = _normalize_title(title_a or ""), _normalize_title(title_b or "")
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, a, b).ratio()


def acceptable_url_transformation(source_url: str, migrated_url: str) -> bool:
    """Same page modulo scheme/trailing slash, or at least the same host."""
    if normalize_url(source_url) == normalize_url(migrated_url):
        return True
    source_host = host_of(source_url)
    return bool(source_host) and source_host == host_of(migrated_url)


def verify_against_source(
    record: ParsedRecord,
    source_resources: Iterable[Resource],
    policy: SourcePolicy = NOTIST_POLICY,
    threshold: float = SIMILARITY_THRESHOLD,
) -> ValidationResult:
    """Every resource listed on the source page must survive the migration.

    Matches by URL first; PDFs and videos may legitimately move (to storage or a
    video platform); otherwise a title above ``threshold`` counts as a match.
    """
    errors: list[str] = []
    migrated = record.resources

    for source in source_resources:
        exact = next(
            (m for m in migrated if normalize_url(m.url) == normalize_url(source.url)),
            None,
        )
        if exact is not None:
            if exact.type in ("link", "code") and title_similarity(source.title, exact.title) <= threshold:
                errors.append(
                    f"Title mismatch for {source.url}: source '{source.title}', "
                    f"migrated '{exact.title}' "
                    f"({title_similarity(source.title, exact.title):.0%}, need >{threshold:.0%})"
                )
            continue

        is_pdf = source.url.lower().split("?")[0].endswith(".pdf") or source.type == "slides"
        if is_pdf and record.slides_url and policy.is_storage(record.slides_url):
            continue
        if source.type == "video" and record.video_url:
            continue

        similar = next(
            (m for m in migrated if title_similarity(source.title, m.title) > threshold),
            None,
        )
        if similar is not None:
            continue

        errors.append(f"Missing resource from source: '{source.title}' ({source.url})")

    if errors:
        return ValidationResult.failure(*errors)
    return ValidationResult.success()
