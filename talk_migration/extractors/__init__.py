"""Page fetching and extraction of talk metadata, resources and video."""

from talk_migration.extractors.fetch import Document, PageFetcher, parse_html
from talk_migration.extractors.metadata import MetadataExtractor
from talk_migration.extractors.platforms import NOTIST, NOTIST_POLICY, PageParser, SourcePolicy, get_parser
from talk_migration.extractors.resources import ResourceExtractor
from talk_migration.extractors.video import VideoResolver

__all__ = [
    "Document",
    "PageFetcher",
    "parse_html",
    "MetadataExtractor",
    "NOTIST",
    "NOTIST_POLICY",
    "PageParser",
    "SourcePolicy",
    "get_parser",
    "ResourceExtractor",
    "VideoResolver",
]
