"""Talk metadata extraction: selectors first, JSON-LD second, heuristics last."""

from typing import Optional

from rich.console import Console

from talk_migration.errors import ExtractionError
from talk_migration.extractors.fetch import Document
from talk_migration.extractors.heuristics import (
    abstract_from_container,
    abstract_from_paragraphs,
    location_from_subhead,
)
from talk_migration.extractors.platforms import PageParser, get_parser
from talk_migration.extractors.structured import (
    extract_json_ld,
    find_location,
    find_publication_name,
    find_publish_date,
    parse_date,
)
from talk_migration.models.talk import TalkMetadata

console = Console()


class MetadataExtractor:
    """Pull title, date, conference, location, speaker and abstract from a page.

    Title, date and conference are required; everything else degrades to an
    empty value.
    """

    def __init__(self, parser: Optional[PageParser] = None):
        self.parser = parser

    def extract(self, doc: Document, source_url: Optional[str] = None) -> TalkMetadata:
        source_url = source_url or doc.url
        parser = self.parser or get_parser(source_url)
        json_ld = extract_json_ld(doc.soup)

        title = parser.title(doc)
        if not title:
            raise ExtractionError(
                f"No title found on {source_url} (missing presentation header)"
            )

        talk_date = parse_date(parser.datetime_attr(doc))
        if talk_date is None:
            talk_date = find_publish_date(json_ld)
        if talk_date is None:
            raise ExtractionError(
                f"No date found on {source_url}: no usable time[datetime] and no "
                f"publish date in structured data"
            )

        conference = parser.conference(doc) or find_publication_name(json_ld)
        if not conference:
            raise ExtractionError(
                f"No conference found on {source_url}: no subhead link and no "
                f"publication name in structured data"
            )

        location = (
            location_from_subhead(parser.subhead_text(doc))
            or find_location(json_ld)
            or ""
        )

        abstract = (
            abstract_from_container(parser.description_container(doc))
            or abstract_from_paragraphs(doc)
        )

        metadata = TalkMetadata(
            title=title,
            date=talk_date,
            conference=conference,
            location=location,
            speaker=parser.speaker_for(source_url),
            abstract=abstract,
        )

        console.print("[green]Metadata extracted:[/green]")
        console.print(f"[dim]  Title: {metadata.title}[/dim]")
        console.print(f"[dim]  Date: {metadata.date.isoformat()}[/dim]")
        console.print(f"[dim]  Conference: {metadata.conference}[/dim]")
        console.print(f"[dim]  Location: {metadata.location or '-'}[/dim]")
        console.print(f"[dim]  Speaker: {metadata.speaker}[/dim]")

        return metadata
