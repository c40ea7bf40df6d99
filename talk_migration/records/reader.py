"""Parse record files back into their parts (source URL, headline fields, resources)."""

import re
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from talk_migration.models.talk import Resource
from talk_migration.normalizers.urls import classify_resource, is_http_url

FRONT_MATTER_PATTERN = re.compile(r"\A---\s*\n(.*?)\n---\s*\n", re.S)
SOURCE_MARKER_PATTERN = re.compile(r"<!--\s*Source:\s*(\S+?)\s*-->")
HEADING_PATTERN = re.compile(r"^#\s+(.+?)\s*$", re.M)
CONFERENCE_PATTERN = re.compile(r"^\*\*Conference:\*\*\s*(.+?)\s*$", re.M)
DATE_PATTERN = re.compile(r"^\*\*Date:\*\*\s*(\d{4}-\d{2}-\d{2})\s*$", re.M)
SLIDES_PATTERN = re.compile(r"^\*\*Slides:\*\*\s*\[[^\]]*\]\(([^)\s]+)\)", re.M)
VIDEO_PATTERN = re.compile(r"^\*\*Video:\*\*\s*\[[^\]]*\]\(([^)\s]+)\)", re.M)
LIST_LINK_PATTERN = re.compile(r"^-\s+\[(.+?)\]\((\S+?)\)\s*$", re.M)

# Older records kept the source in front matter under one of these keys
LEGACY_SOURCE_KEYS = ("source_url", "notist_url")


class RecordParseError(ValueError):
    """A record file whose front matter cannot be parsed."""


class ParsedRecord(BaseModel):
    path: Optional[Path] = None
    front_matter: dict = Field(default_factory=dict)
    source_url: Optional[str] = None
    title: Optional[str] = None
    conference: Optional[str] = None
    date: Optional[str] = None
    slides_url: Optional[str] = None
    video_url: Optional[str] = None
    resources: list[Resource] = Field(default_factory=list)


def split_front_matter(content: str) -> tuple[dict, str]:
    """Return ``(front_matter, body)``. Raises RecordParseError on bad YAML."""
    match = FRONT_MATTER_PATTERN.match(content)
    if not match:
        return {}, content
    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise RecordParseError(f"invalid front matter: {e}") from e
    if not isinstance(data, dict):
        raise RecordParseError("front matter is not a mapping")
    return data, content[match.end():]


def resources_section(body: str) -> str:
    """Text of the ``## Resources`` section, '' if absent."""
    match = re.search(r"^## Resources\s*$(.*?)(?=^## |\Z)", body, re.M | re.S)
    return match.group(1) if match else ""


def _resources(body: str, slides_url: Optional[str], video_url: Optional[str]) -> list[Resource]:
    resources = []
    if slides_url and is_http_url(slides_url):
        resources.append(Resource(url=slides_url, title="Slides", type="slides"))
    if video_url and is_http_url(video_url):
        resources.append(Resource(url=video_url, title="Video", type="video"))
    for title, url in LIST_LINK_PATTERN.findall(resources_section(body)):
        if is_http_url(url) and title.strip():
            kind = classify_resource(url)
            resources.append(Resource(url=url, title=title, type="link" if kind in ("slides", "video") else kind))
    return resources


def parse_record(content: str, path: Optional[Path] = None) -> ParsedRecord:
    """Raises RecordParseError when the file is not a usable record."""
    front_matter, body = split_front_matter(content)

    source_url = None
    marker = SOURCE_MARKER_PATTERN.search(content)
    if marker:
        source_url = marker.group(1)
    else:
        for key in LEGACY_SOURCE_KEYS:
            value = front_matter.get(key)
            if isinstance(value, str) and value.strip():
                source_url = value.strip()
                break

    def first(pattern: re.Pattern) -> Optional[str]:
        match = pattern.search(body)
        return match.group(1) if match else None

    slides_url = first(SLIDES_PATTERN)
    video_url = first(VIDEO_PATTERN)
    title = first(HEADING_PATTERN) or front_matter.get("title")
    try:
        resources = _resources(body, slides_url, video_url)
        return ParsedRecord(
            path=path,
            front_matter=front_matter,
            source_url=source_url,
            title=None if title is None else str(title),
            conference=first(CONFERENCE_PATTERN),
            date=first(DATE_PATTERN),
            slides_url=slides_url,
            video_url=video_url,
            resources=resources,
        )
    except ValidationError as e:
        raise RecordParseError(f"malformed record: {e}") from e


def read_record(path: Path) -> ParsedRecord:
    return parse_record(path.read_text(encoding="utf-8"), path=path)
