"""Storage provider boundary: where re-hosted slide decks go.

The pipeline only depends on ``StorageProvider``. ``GoogleDriveStorage`` is the
production implementation (Drive v3 through a service account).
"""

import mimetypes
from pathlib import Path
from typing import Optional, Protocol

from pydantic import BaseModel
from rich.console import Console

from talk_migration.errors import AcquisitionError, StorageConfigurationError

console = Console()

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


class StorageFolder(BaseModel):
    id: str
    name: str = ""


class StoredFile(BaseModel):
    id: str
    web_view_url: str


class StoredFileMetadata(BaseModel):
    thumbnail_link: Optional[str] = None
    mime_type: Optional[str] = None


class StorageProvider(Protocol):
    """What the pipeline needs from a cloud storage provider."""

    def upload(self, local_path: Path, parent_folder: str) -> StoredFile: ...

    def set_public_read_permission(self, file_id: str) -> None: ...

    def get_metadata(self, file_id: str) -> StoredFileMetadata: ...

    def list_accessible_root_folders(self) -> list[StorageFolder]: ...

    def find_subfolder(self, parent_id: str, name: str) -> Optional[StorageFolder]: ...


def drive_view_url(file_id: str) -> str:
    return f"https://drive.google.com/file/d/{file_id}/view"


class GoogleDriveStorage:
    """Google Drive (shared drives) via a service-account JSON key."""

    def __init__(self, credentials_path: Path, application_name: str = "Talk Migration"):
        self.credentials_path = credentials_path
        self.application_name = application_name
        self._service = None

    @property
    def service(self):
        if self._service is None:
            self._service = self._build_service()
        return self._service

    def _build_service(self):
        from google.oauth2 import service_account
        from googleapiclient.discovery import build

        if not self.credentials_path.exists():
            raise StorageConfigurationError(
                f"Google service account key not found at {self.credentials_path} "
                f"(set GOOGLE_APPLICATION_CREDENTIALS)"
            )
        try:
            credentials = service_account.Credentials.from_service_account_file(
                str(self.credentials_path), scopes=DRIVE_SCOPES
            )
        except ValueError as e:
            raise StorageConfigurationError(
                f"Google service account key at {self.credentials_path} is malformed: {e}"
            ) from e
        return build("drive", "v3", credentials=credentials, cache_discovery=False)

    def _execute(self, request, action: str):
        from google.auth.exceptions import GoogleAuthError
        from googleapiclient.errors import HttpError

        try:
            return request.execute()
        except HttpError as e:
            raise AcquisitionError(f"Google Drive {action} failed: {e}") from e
        except GoogleAuthError as e:
            # Revoked or expired keys surface here as RefreshError
            raise AcquisitionError(
                f"Google Drive {action} failed: could not authenticate the service account: {e}"
            ) from e

    def list_accessible_root_folders(self) -> list[StorageFolder]:
        response = self._execute(self.service.drives().list(pageSize=10), "drive listing")
        return [
            StorageFolder(id=d["id"], name=d.get("name", ""))
            for d in response.get("drives", [])
        ]

    def find_subfolder(self, parent_id: str, name: str) -> Optional[StorageFolder]:
        query = (
            f"'{parent_id}' in parents and trashed=false "
            f"and mimeType='{FOLDER_MIME_TYPE}' and name='{name}'"
        )
        response = self._execute(
            self.service.files().list(
                q=query,
                fields="files(id, name)",
                corpora="drive",
                driveId=parent_id,
                supportsAllDrives=True,
                includeItemsFromAllDrives=True,
            ),
            "folder lookup",
        )
        files = response.get("files", [])
        if not files:
            return None
        return StorageFolder(id=files[0]["id"], name=files[0].get("name", name))

    def upload(self, local_path: Path, parent_folder: str) -> StoredFile:
        from googleapiclient.http import MediaFileUpload

        mime_type = mimetypes.guess_type(local_path.name)[0] or "application/octet-stream"
        media = MediaFileUpload(str(local_path), mimetype=mime_type, resumable=False)
        created = self._execute(
            self.service.files().create(
                body={"name": local_path.name, "parents": [parent_folder]},
                media_body=media,
                fields="id, webViewLink",
                supportsAllDrives=True,
            ),
            "upload",
        )
        file_id = created["id"]
        return StoredFile(id=file_id, web_view_url=created.get("webViewLink") or drive_view_url(file_id))

    def set_public_read_permission(self, file_id: str) -> None:
        self._execute(
            self.service.permissions().create(
                fileId=file_id,
                body={"role": "reader", "type": "anyone"},
                supportsAllDrives=True,
            ),
            "permission grant",
        )

    def get_metadata(self, file_id: str) -> StoredFileMetadata:
        data = self._execute(
            self.service.files().get(
                fileId=file_id,
                fields="thumbnailLink, mimeType",
                supportsAllDrives=True,
            ),
            "metadata lookup",
        )
        return StoredFileMetadata(
            thumbnail_link=data.get("thumbnailLink"),
            mime_type=data.get("mimeType"),
        )


def resolve_upload_folder(storage: StorageProvider, preferred_name: Optional[str] = None) -> StorageFolder:
    """The folder to upload into, derived fresh on every run.

    First accessible root folder, or its ``preferred_name`` sub-folder if present.
    """
    roots = storage.list_accessible_root_folders()
    if not roots:
        raise StorageConfigurationError(
            "No accessible storage folders: share a Google Drive shared drive "
            "with the service account"
        )
    root = roots[0]
    if preferred_name:
        sub = storage.find_subfolder(root.id, preferred_name)
        if sub is not None:
            console.print(f"[dim]  Using folder {root.name}/{sub.name} ({sub.id})[/dim]")
            return sub
    console.print(f"[dim]  Using folder {root.name or root.id} ({root.id})[/dim]")
    return root
