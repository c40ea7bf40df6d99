"""Slide-deck acquisition and the storage provider boundary."""

from talk_migration.acquisition.pdf import PdfAcquirer, PdfOutcome
from talk_migration.acquisition.storage import (
    GoogleDriveStorage,
    StorageFolder,
    StorageProvider,
    StoredFile,
    StoredFileMetadata,
    resolve_upload_folder,
)

__all__ = [
    "PdfAcquirer",
    "PdfOutcome",
    "GoogleDriveStorage",
    "StorageFolder",
    "StorageProvider",
    "StoredFile",
    "StoredFileMetadata",
    "resolve_upload_folder",
]
