"""Data models for the talk migration pipeline."""

from talk_migration.models.talk import (
    Resource,
    ResourceType,
    TalkDraft,
    TalkMetadata,
    TalkRecord,
    TalkStatus,
    UNKNOWN_SPEAKER,
)
from talk_migration.models.results import MigrationResult, ValidationResult

__all__ = [
    "Resource",
    "ResourceType",
    "TalkDraft",
    "TalkMetadata",
    "TalkRecord",
    "TalkStatus",
    "UNKNOWN_SPEAKER",
    "MigrationResult",
    "ValidationResult",
]
