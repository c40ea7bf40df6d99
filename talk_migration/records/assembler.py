"""Serialize a TalkRecord into the site's markdown record format."""

import yaml

from talk_migration.models.talk import TalkRecord
from talk_migration.normalizers.slugs import filename

LAYOUT = "talk"
SOURCE_MARKER = "<!-- Source: {url} -->"


def context_sentence(record: TalkRecord) -> str:
    """"A presentation at X in June 2025 in Kraków, Poland by Y." """
    sentence = f"A presentation at {record.conference} in {record.date.strftime('%B %Y')}"
    if record.location:
        sentence += f" in {record.location}"
    return f"{sentence} by {record.speaker}."


def render_record(record: TalkRecord) -> str:
    """The full on-disk document for ``record``."""
    front_matter = yaml.safe_dump({"layout": LAYOUT}, sort_keys=False)
    lines = [
        "---",
        front_matter.rstrip("\n"),
        "---",
        SOURCE_MARKER.format(url=record.source_url),
        "",
        f"# {record.title}",
        "",
        f"**Conference:** {record.conference}  ",
        f"**Date:** {record.date.isoformat()}  ",
    ]

    if record.slides:
        lines.append(f"**Slides:** [View Slides]({record.slides.url})  ")
    if record.video:
        lines.append(f"**Video:** [Watch Video]({record.video.url})  ")

    lines += ["", context_sentence(record), ""]

    if record.abstract:
        lines += ["## Abstract", "", record.abstract.strip(), ""]

    others = record.other_resources
    if others:
        lines += ["## Resources", ""]
        lines += [f"- [{r.title}]({r.url})" for r in others]
        lines.append("")

    return "\n".join(lines)


class ContentAssembler:
    """Name and render records."""

    extension = ".md"

    def filename_for(self, record: TalkRecord) -> str:
        return filename(record.date, record.conference, record.title, self.extension)

    def assemble(self, record: TalkRecord) -> tuple[str, str]:
        """Return ``(filename, document)``."""
        return self.filename_for(record), render_record(record)
