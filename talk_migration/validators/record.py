"""Structural self-check of an assembled record document."""

import re
from datetime import date
from typing import Iterable, Optional

import yaml

from talk_migration.models.results import ValidationResult
from talk_migration.models.talk import Resource
from talk_migration.records.reader import (
    CONFERENCE_PATTERN,
    DATE_PATTERN,
    FRONT_MATTER_PATTERN,
    SLIDES_PATTERN,
    SOURCE_MARKER_PATTERN,
    VIDEO_PATTERN,
)

TOP_HEADING_PATTERN = re.compile(r"^# \S.*$", re.M)
RESOURCES_HEADING_PATTERN = re.compile(r"^## Resources\s*$", re.M)


class RecordValidator:
    """Every check runs independently; all failures are reported together."""

    def validate(self, document: str, resources: Iterable[Resource]) -> ValidationResult:
        resources = list(resources)
        errors: list[str] = []

        errors += self._check_front_matter(document)

        if not SOURCE_MARKER_PATTERN.search(document):
            errors.append("Missing source URL marker comment")

        headings = TOP_HEADING_PATTERN.findall(document)
        if len(headings) != 1:
            errors.append(f"Expected exactly one top-level heading, found {len(headings)}")

        if not CONFERENCE_PATTERN.search(document):
            errors.append("Missing **Conference:** line")

        date_match = DATE_PATTERN.search(document)
        if not date_match:
            errors.append("Missing **Date:** line in ISO form (YYYY-MM-DD)")
        else:
            try:
                date.fromisoformat(date_match.group(1))
            except ValueError:
                errors.append(f"Date line is not a real date: {date_match.group(1)}")

        errors += self._check_link_line(
            "Slides", SLIDES_PATTERN, document,
            next((r for r in resources if r.type == "slides"), None),
        )
        errors += self._check_link_line(
            "Video", VIDEO_PATTERN, document,
            next((r for r in resources if r.type == "video"), None),
        )

        others = [r for r in resources if r.type not in ("slides", "video")]
        has_section = RESOURCES_HEADING_PATTERN.search(document) is not None
        if others and not has_section:
            errors.append(f"Missing Resources section (expected for {len(others)} resources)")
        elif has_section and not others:
            errors.append("Resources section present but there are no link or code resources")

        if errors:
            return ValidationResult.failure(*errors)
        return ValidationResult.success()

    @staticmethod
    def _check_front_matter(document: str) -> list[str]:
        match = FRONT_MATTER_PATTERN.match(document)
        if not match:
            return ["Missing front matter block at the top of the record"]
        try:
            data = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            return [f"Front matter is not valid YAML: {e}"]
        if not isinstance(data, dict) or "layout" not in data:
            return ["Front matter must define a layout"]
        return []

    @staticmethod
    def _check_link_line(
        label: str,
        pattern: re.Pattern,
        document: str,
        resource: Optional[Resource],
    ) -> list[str]:
        """The bolded link line exists exactly when the resource does, and matches it."""
        match = pattern.search(document)
        if resource is None:
            if match:
                return [f"**{label}:** line present but the talk has no {label.lower()} resource"]
            return []
        if not match:
            return [f"Missing **{label}:** line for the {label.lower()} resource"]
        if match.group(1) != resource.url:
            return [f"**{label}:** line links {match.group(1)}, expected {resource.url}"]
        return []
