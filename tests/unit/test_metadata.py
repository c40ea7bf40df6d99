"""Tests for talk metadata extraction."""

from datetime import date

import pytest

from conftest import TALK_URL, talk_page
from talk_migration.errors import ExtractionError
from talk_migration.extractors.fetch import parse_html
from talk_migration.extractors.metadata import MetadataExtractor
from talk_migration.extractors.structured import (
    extract_json_ld,
    find_location,
    find_publication_name,
    find_publish_date,
    parse_date,
)
from talk_migration.models.talk import UNKNOWN_SPEAKER

JSON_LD = """
<script type="application/ld+json">
{"@context": "https://schema.org", "@graph": [
  {"@type": "PresentationDigitalDocument",
   "datePublished": "2024-10-08T09:00:00+02:00",
   "publication": {"@type": "PublicationEvent", "name": "Devoxx Belgium 2024"},
   "contentLocation": {"@type": "Place", "name": "Kinepolis",
                       "address": {"addressLocality": "Antwerp", "addressCountry": "Belgium"}}}
]}
</script>
"""


def with_json_ld(html: str) -> str:
    return html.replace("</head>", JSON_LD + "</head>")


class TestMetadataExtractor:
    """Tests for MetadataExtractor."""

    def test_extracts_all_fields(self):
        doc = parse_html(TALK_URL, talk_page())
        meta = MetadataExtractor().extract(doc)
        assert meta.title == "Robocoders: Judgment Day"
        assert meta.date == date(2025, 6, 11)
        assert meta.conference == "Devoxx Poland 2025"
        assert meta.location == "Kraków, Poland"
        assert meta.speaker == "Baruch Sadogursky"
        assert meta.abstract.startswith("AI coding assistants")

    def test_missing_title_is_fatal(self):
        html = talk_page().replace('class="presentation-header"', 'class="header"')
        doc = parse_html(TALK_URL, html)
        with pytest.raises(ExtractionError, match="No title"):
            MetadataExtractor().extract(doc)

    def test_missing_date_is_fatal(self):
        doc = parse_html(TALK_URL, talk_page(datetime_attr=None))
        with pytest.raises(ExtractionError, match="No date"):
            MetadataExtractor().extract(doc)

    def test_unparsable_date_is_fatal(self):
        doc = parse_html(TALK_URL, talk_page(datetime_attr="sometime soon"))
        with pytest.raises(ExtractionError, match="No date"):
            MetadataExtractor().extract(doc)

    def test_missing_conference_is_fatal(self):
        doc = parse_html(TALK_URL, talk_page(conference=None))
        with pytest.raises(ExtractionError, match="No conference"):
            MetadataExtractor().extract(doc)

    def test_structured_data_fallbacks(self):
        html = with_json_ld(talk_page(datetime_attr=None, conference=None))
        meta = MetadataExtractor().extract(parse_html(TALK_URL, html))
        assert meta.date == date(2024, 10, 8)
        assert meta.conference == "Devoxx Belgium 2024"
        assert meta.location == "Antwerp, Belgium"

    def test_selectors_win_over_structured_data(self):
        meta = MetadataExtractor().extract(parse_html(TALK_URL, with_json_ld(talk_page())))
        assert meta.date == date(2025, 6, 11)
        assert meta.conference == "Devoxx Poland 2025"

    def test_speaker_from_notist_handle(self):
        url = "https://noti.st/jbaruch/PjlHKD/robocoders-judgment-day"
        meta = MetadataExtractor().extract(parse_html(url, talk_page()))
        assert meta.speaker == "jbaruch"

    def test_unknown_speaker(self):
        url = "https://talks.example.com/PjlHKD/robocoders"
        meta = MetadataExtractor().extract(parse_html(url, talk_page()))
        assert meta.speaker == UNKNOWN_SPEAKER

    def test_abstract_from_long_paragraph_fallback(self):
        html = talk_page().replace('id="description"', 'id="intro"')
        meta = MetadataExtractor().extract(parse_html(TALK_URL, html))
        assert meta.abstract.startswith("AI coding assistants")

    def test_no_location(self):
        html = talk_page().replace(" in Kraków, Poland by", " by")
        meta = MetadataExtractor().extract(parse_html(TALK_URL, html))
        assert meta.location == ""


class TestStructuredData:
    """Tests for JSON-LD helpers."""

    @pytest.mark.parametrize("value,expected", [
        ("2025-06-11", date(2025, 6, 11)),
        ("2025-06-11T10:30:00Z", date(2025, 6, 11)),
        ("June 11, 2025", date(2025, 6, 11)),
        ("11 Jun 2025", date(2025, 6, 11)),
        ("2025-13-45", None),
        ("", None),
        (None, None),
    ])
    def test_parse_date(self, value, expected):
        assert parse_date(value) == expected

    def test_graph_is_flattened(self):
        doc = parse_html(TALK_URL, with_json_ld(talk_page()))
        blocks = extract_json_ld(doc.soup)
        assert find_publish_date(blocks) == date(2024, 10, 8)
        assert find_publication_name(blocks) == "Devoxx Belgium 2024"
        assert find_location(blocks) == "Antwerp, Belgium"

    def test_invalid_json_is_skipped(self):
        html = talk_page().replace("</head>", '<script type="application/ld+json">{oops</script></head>')
        assert extract_json_ld(parse_html(TALK_URL, html).soup) == []

    def test_is_part_of_fallback(self):
        blocks = [{"isPartOf": {"name": "KubeCon EU"}}]
        assert find_publication_name(blocks) == "KubeCon EU"

    def test_location_name_only(self):
        assert find_location([{"location": {"name": "Online"}}]) == "Online"
