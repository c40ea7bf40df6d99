"""Resource-list extraction from the page's structured resources section."""

from typing import Optional

from rich.console import Console

from talk_migration.extractors.fetch import Document
from talk_migration.extractors.platforms import PageParser, get_parser
from talk_migration.models.talk import Resource
from talk_migration.normalizers.urls import classify_resource, is_http_url

console = Console()


class ResourceExtractor:
    """Read ``#resources .resource-list`` entries in page order.

    A page without a resource section yields an empty list; entries with a
    non-http(s) href or no usable title are skipped.
    """

    def __init__(self, parser: Optional[PageParser] = None):
        self.parser = parser

    def extract(self, doc: Document) -> list[Resource]:
        parser = self.parser or get_parser(doc.url)
        anchors = parser.resource_anchors(doc)
        if anchors is None:
            console.print("[dim]No resources section on page[/dim]")
            return []

        resources: list[Resource] = []
        for anchor in anchors:
            href = (anchor.get("href") or "").strip()
            title = anchor.get_text(" ", strip=True)
            if not is_http_url(href):
                continue
            if not title:
                continue
            resources.append(Resource(
                url=href,
                title=title,
                type=classify_resource(href),
            ))

        console.print(f"[green]Found {len(resources)} resources[/green]")
        for i, resource in enumerate(resources, 1):
            console.print(f"[dim]  {i}. {resource.type}: {resource.title} ({resource.url})[/dim]")

        return resources
