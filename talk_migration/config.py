"""Runtime settings, read from the environment (and ``.env`` via the CLI)."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

DEFAULT_TEST_COMMAND = "bundle exec rake test:migration"


class MigrationSettings(BaseModel):
    """Where records and assets live, and how the pipeline talks to the network."""

    site_root: Path = Path(".")
    talks_dir: Path = Path("_talks")
    pdf_dir: Path = Path("pdfs")
    thumbnails_dir: Path = Path("assets/images/thumbnails")

    # HTTP
    http_timeout: float = 30.0
    max_redirects: int = 10

    # Batch mode
    batch_pause: float = 1.0  # seconds between talks, keeps us polite

    # Storage provider
    google_credentials: Path = Path("Google API.json")
    drive_folder_name: Optional[str] = "pdfs"

    # Downstream hooks (empty command = disabled)
    build_command: str = ""
    test_command: str = DEFAULT_TEST_COMMAND
    hook_timeout: float = 600.0

    keep_rejected: bool = False

    class Config:
        extra = "ignore"

    def resolve(self, path: Path) -> Path:
        """Resolve a configured path against the site root."""
        if path.is_absolute():
            return path
        return self.site_root / path

    @property
    def talks_path(self) -> Path:
        return self.resolve(self.talks_dir)

    @property
    def pdf_path(self) -> Path:
        return self.resolve(self.pdf_dir)

    @property
    def thumbnails_path(self) -> Path:
        return self.resolve(self.thumbnails_dir)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(**overrides) -> MigrationSettings:
    """Build settings from TALK_MIGRATION_* environment variables.

    Keyword overrides win over the environment. Non-numeric values for numeric
    settings raise ValueError.
    """
    env = os.environ
    values: dict = {}

    if "TALK_MIGRATION_SITE_ROOT" in env:
        values["site_root"] = Path(env["TALK_MIGRATION_SITE_ROOT"])
    if "TALK_MIGRATION_TALKS_DIR" in env:
        values["talks_dir"] = Path(env["TALK_MIGRATION_TALKS_DIR"])
    if "TALK_MIGRATION_PDF_DIR" in env:
        values["pdf_dir"] = Path(env["TALK_MIGRATION_PDF_DIR"])
    if "TALK_MIGRATION_THUMBNAILS_DIR" in env:
        values["thumbnails_dir"] = Path(env["TALK_MIGRATION_THUMBNAILS_DIR"])

    try:
        if "TALK_MIGRATION_HTTP_TIMEOUT" in env:
            values["http_timeout"] = float(env["TALK_MIGRATION_HTTP_TIMEOUT"])
        if "TALK_MIGRATION_MAX_REDIRECTS" in env:
            values["max_redirects"] = int(env["TALK_MIGRATION_MAX_REDIRECTS"])
        if "TALK_MIGRATION_BATCH_PAUSE" in env:
            values["batch_pause"] = float(env["TALK_MIGRATION_BATCH_PAUSE"])
        if "TALK_MIGRATION_HOOK_TIMEOUT" in env:
            values["hook_timeout"] = float(env["TALK_MIGRATION_HOOK_TIMEOUT"])
    except ValueError as e:
        raise ValueError(f"Invalid numeric setting in environment: {e}") from e

    if "GOOGLE_APPLICATION_CREDENTIALS" in env:
        values["google_credentials"] = Path(env["GOOGLE_APPLICATION_CREDENTIALS"])
    if "TALK_MIGRATION_DRIVE_FOLDER" in env:
        values["drive_folder_name"] = env["TALK_MIGRATION_DRIVE_FOLDER"] or None
    if "TALK_MIGRATION_BUILD_CMD" in env:
        values["build_command"] = env["TALK_MIGRATION_BUILD_CMD"]
    if "TALK_MIGRATION_TEST_CMD" in env:
        values["test_command"] = env["TALK_MIGRATION_TEST_CMD"]
    if "TALK_MIGRATION_KEEP_REJECTED" in env:
        values["keep_rejected"] = _env_bool(env["TALK_MIGRATION_KEEP_REJECTED"])

    values.update(overrides)

    if values.get("max_redirects", 10) < 0:
        raise ValueError("TALK_MIGRATION_MAX_REDIRECTS must be >= 0")

    return MigrationSettings(**values)
