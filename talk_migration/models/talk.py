"""Talk record model: the canonical output of one migration.

A ``TalkDraft`` is threaded through the pipeline stages; each stage returns an
updated copy. Once complete it is frozen into a ``TalkRecord``.
"""

from datetime import date
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

ResourceType = Literal["slides", "video", "code", "link"]
TalkStatus = Literal["completed", "video-pending"]

ACCEPTED_SCHEMES = ("http://", "https://")
UNKNOWN_SPEAKER = "Unknown Speaker"


class Resource(BaseModel):
    """A single supplementary artifact attached to a talk."""

    url: str
    title: str
    type: ResourceType = "link"
    description: str = ""

    class Config:
        frozen = True

    @field_validator("url")
    @classmethod
    def _url_has_scheme(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(ACCEPTED_SCHEMES):
            raise ValueError(f"resource URL must start with http(s)://, got {value!r}")
        return value

    @field_validator("title")
    @classmethod
    def _title_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("resource title must not be empty")
        return value


class TalkMetadata(BaseModel):
    """Fields scraped from the presentation page."""

    title: str
    date: date
    conference: str
    location: str = ""
    speaker: str = UNKNOWN_SPEAKER
    abstract: str = ""

    class Config:
        frozen = True


def place_slides(resources: tuple[Resource, ...], slides: Resource) -> tuple[Resource, ...]:
    """Put ``slides`` first; any other slides-typed entry is kept as a plain link."""
    rest = tuple(
        r.model_copy(update={"type": "link"}) if r.type == "slides" else r
        for r in resources
        if r.url != slides.url
    )
    return (slides,) + rest


def place_video(resources: tuple[Resource, ...], video: Resource) -> tuple[Resource, ...]:
    """Insert ``video`` right after the slides resource (or at the front)."""
    rest = [
        r.model_copy(update={"type": "link"}) if r.type == "video" else r
        for r in resources
        if r.url != video.url
    ]
    insert_at = 1 if rest and rest[0].type == "slides" else 0
    rest.insert(insert_at, video)
    return tuple(rest)


def promote_listed_slides(resources: tuple[Resource, ...]) -> tuple[Resource, ...]:
    """Move the first slides-typed list entry to the front; demote the others."""
    for resource in resources:
        if resource.type == "slides":
            return place_slides(resources, resource)
    return resources


def demote_videos(resources: tuple[Resource, ...], keep: Optional[Resource] = None) -> tuple[Resource, ...]:
    """Turn every video-typed entry except ``keep`` into a plain link."""
    return tuple(
        r.model_copy(update={"type": "link"}) if r.type == "video" and r is not keep else r
        for r in resources
    )


def keep_first_listed_video(resources: tuple[Resource, ...]) -> tuple[Resource, ...]:
    first = next((r for r in resources if r.type == "video"), None)
    return demote_videos(resources, keep=first)


class TalkDraft(BaseModel):
    """Immutable-until-complete state passed between pipeline stages."""

    source_url: str
    metadata: Optional[TalkMetadata] = None
    resources: tuple[Resource, ...] = ()
    status: TalkStatus = "video-pending"
    pdf_url: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_path: Optional[Path] = None

    class Config:
        frozen = True

    def with_metadata(self, metadata: TalkMetadata) -> "TalkDraft":
        return self.model_copy(update={"metadata": metadata})

    def with_resources(self, resources: list[Resource] | tuple[Resource, ...]) -> "TalkDraft":
        resources = promote_listed_slides(tuple(resources))
        return self.model_copy(update={"resources": keep_first_listed_video(resources)})

    def with_slides(self, slides: Resource, thumbnail_path: Optional[Path] = None) -> "TalkDraft":
        return self.model_copy(update={
            "resources": place_slides(self.resources, slides),
            "pdf_url": slides.url,
            "thumbnail_path": thumbnail_path,
        })

    def with_video(self, video: Optional[Resource]) -> "TalkDraft":
        if video is None:
            # Listed links the resolver could not canonicalize (channels, playlists)
            return self.model_copy(update={
                "resources": demote_videos(self.resources),
                "status": "video-pending",
            })
        return self.model_copy(update={
            "resources": place_video(self.resources, video),
            "video_url": video.url,
            "status": "completed",
        })

    def to_record(self) -> "TalkRecord":
        """Freeze the draft. Raises ValueError if metadata was never extracted."""
        if self.metadata is None:
            raise ValueError("cannot build a record before metadata extraction")
        meta = self.metadata
        return TalkRecord(
            source_url=self.source_url,
            title=meta.title,
            date=meta.date,
            conference=meta.conference,
            location=meta.location,
            speaker=meta.speaker,
            abstract=meta.abstract,
            status=self.status,
            resources=self.resources,
            thumbnail_path=self.thumbnail_path,
        )


class TalkRecord(BaseModel):
    """A completed talk, ready to be serialized."""

    source_url: str
    title: str
    date: date
    conference: str
    location: str = ""
    speaker: str = UNKNOWN_SPEAKER
    abstract: str = ""
    status: TalkStatus = "video-pending"
    resources: tuple[Resource, ...] = Field(default_factory=tuple)
    thumbnail_path: Optional[Path] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_resource_order(self) -> "TalkRecord":
        types = [r.type for r in self.resources]
        if types.count("slides") > 1:
            raise ValueError("a talk has at most one slides resource")
        if "slides" in types and types[0] != "slides":
            raise ValueError("the slides resource must come first")
        if types.count("video") > 1:
            raise ValueError("a talk has at most one video resource")
        return self

    @property
    def slides(self) -> Optional[Resource]:
        return next((r for r in self.resources if r.type == "slides"), None)

    @property
    def video(self) -> Optional[Resource]:
        return next((r for r in self.resources if r.type == "video"), None)

    @property
    def other_resources(self) -> list[Resource]:
        """Resources listed in the record's Resources section."""
        return [r for r in self.resources if r.type not in ("slides", "video")]
