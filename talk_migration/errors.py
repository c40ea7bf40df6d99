"""Error taxonomy for talk migrations.

Every stage either returns its value or raises one of these. The orchestrator
collects ``str(error)`` into the migration's ordered error list.
"""

from typing import Optional


class MigrationError(Exception):
    """Base class for fatal, single-talk migration failures."""


class FetchError(MigrationError):
    """Network or HTTP failure, including unresolvable redirects."""

    def __init__(
        self,
        url: str,
        reason: str,
        status: Optional[int] = None,
    ):
        self.url = url
        self.reason = reason
        self.status = status
        if status is not None:
            message = f"HTTP {status} when fetching {url}: {reason}"
        else:
            message = f"Failed to fetch {url}: {reason}"
        super().__init__(message)


class ExtractionError(MigrationError):
    """A required metadata field (title, date, conference) is missing."""


class ProvenanceError(MigrationError):
    """A slides or video resource is not hosted where it must be."""


class AcquisitionError(MigrationError):
    """PDF/thumbnail download or upload failed, or slides are not downloadable."""


class StorageConfigurationError(AcquisitionError):
    """The storage provider is unusable (no credentials, no accessible folder)."""


class ValidationError(MigrationError):
    """The assembled record failed its structural self-check.

    ``details`` holds the individual check failures, in order.
    """

    def __init__(self, message: str, details: Optional[list[str]] = None):
        self.details = list(details or [])
        super().__init__(message)
