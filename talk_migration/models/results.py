"""Result objects returned by validators and the orchestrator."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from talk_migration.models.talk import TalkRecord


class ValidationResult(BaseModel):
    """Outcome of a validator: ``ok`` plus the ordered failure messages."""

    ok: bool = True
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, *errors: str) -> "ValidationResult":
        return cls(ok=False, errors=list(errors))


class MigrationResult(BaseModel):
    """Verdict of one single-talk migration attempt."""

    url: str
    ok: bool = False
    already_migrated: bool = False
    record_path: Optional[Path] = None
    record: Optional[TalkRecord] = None
    errors: list[str] = Field(default_factory=list)  # append-only, surfaced verbatim
    warnings: list[str] = Field(default_factory=list)
