"""Record validators: provenance, structure, and similarity to the source."""

from talk_migration.validators.provenance import ResourceProvenanceValidator
from talk_migration.validators.record import RecordValidator
from talk_migration.validators.similarity import (
    SIMILARITY_THRESHOLD,
    acceptable_url_transformation,
    title_similarity,
    verify_against_source,
)

__all__ = [
    "ResourceProvenanceValidator",
    "RecordValidator",
    "SIMILARITY_THRESHOLD",
    "acceptable_url_transformation",
    "title_similarity",
    "verify_against_source",
]
