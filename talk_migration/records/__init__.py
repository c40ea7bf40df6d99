"""Record serialization, parsing and storage."""

from talk_migration.records.assembler import ContentAssembler, render_record
from talk_migration.records.reader import ParsedRecord, parse_record, read_record
from talk_migration.records.store import RecordStore

__all__ = [
    "ContentAssembler",
    "render_record",
    "ParsedRecord",
    "parse_record",
    "read_record",
    "RecordStore",
]
