import json
import logging
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

from catalog.config import CatalogSettings
from catalog.exceptions import (
    ClientInitFailed,
    ConfigMissing,
    ListingFailed,
    MetadataReadFailed,
)
from catalog.models.schemas import DriveEntry, DriveFile

logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]
PAGE_SIZE = 1000

# Errors the Google client raises for failed calls
TRANSPORT_ERRORS = (HttpError, GoogleAuthError, HttpLib2Error, OSError)

# --- Interface Definition ---


class StorageBackend(ABC):
    @abstractmethod
    def list_folders(self, root_id: str) -> List[DriveEntry]:
        """List the non-trashed folders directly inside ``root_id``."""
        pass

    @abstractmethod
    def list_files(self, folder_id: str) -> List[DriveFile]:
        """List the non-trashed files directly inside ``folder_id``."""
        pass

    @abstractmethod
    def download_file(self, file_id: str) -> bytes:
        pass


# --- Google Drive Implementation ---


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


class GoogleDriveBackend(StorageBackend):
    def __init__(self, service: Any):
        self.service = service

    @classmethod
    def from_credentials_json(cls, credentials_json: str) -> "GoogleDriveBackend":
        """
        Build a Drive v3 client from a service-account key.

        Args:
            credentials_json: The service-account key file contents

        Returns:
            A backend bound to a read-only Drive client

        Raises:
            ClientInitFailed: If the key cannot be parsed or the client cannot be built
        """
        try:
            info = json.loads(credentials_json)
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=DRIVE_SCOPES
            )
            service = build(
                "drive", "v3", credentials=credentials, cache_discovery=False
            )
        except Exception as e:
            raise ClientInitFailed(f"Unable to create Drive client: {e}") from e
        return cls(service)

    def _list(self, query: str, fields: str) -> List[Dict[str, Any]]:
        files = []
        page_token = None
        while True:
            response = (
                self.service.files()
                .list(
                    q=query,
                    fields=f"nextPageToken, {fields}",
                    pageSize=PAGE_SIZE,
                    pageToken=page_token,
                    supportsAllDrives=True,
                    includeItemsFromAllDrives=True,
                )
                .execute()
            )
            files.extend(response.get("files", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                return files

    def list_folders(self, root_id: str) -> List[DriveEntry]:
        query = (
            f"'{_quote(root_id)}' in parents and mimeType='{FOLDER_MIME_TYPE}' "
            "and trashed=false"
        )
        try:
            files = self._list(query, "files(id, name)")
        except TRANSPORT_ERRORS as e:
            raise ListingFailed(f"error listing folders: {e}", folder_id=root_id) from e
        return [DriveEntry(id=f["id"], name=f.get("name", "")) for f in files]

    def list_files(self, folder_id: str) -> List[DriveFile]:
        query = f"'{_quote(folder_id)}' in parents and trashed=false"
        try:
            files = self._list(query, "files(id, name, mimeType)")
        except TRANSPORT_ERRORS as e:
            raise ListingFailed(
                f"error listing files in folder: {e}", folder_id=folder_id
            ) from e
        return [
            DriveFile(id=f["id"], name=f.get("name", ""), mimeType=f.get("mimeType", ""))
            for f in files
        ]

    def download_file(self, file_id: str) -> bytes:
        try:
            return self.service.files().get_media(fileId=file_id).execute()
        except TRANSPORT_ERRORS as e:
            raise MetadataReadFailed(str(e), file_id=file_id) from e


# --- Local Implementation ---


class LocalBackend(StorageBackend):
    """
    Serves a local directory laid out like the Drive hierarchy.

    File and folder ids are paths relative to ``base_path``.
    """

    def __init__(self, base_path: str = "local_storage"):
        self.base_path = Path(base_path).resolve()
        logger.debug("Using local storage at %s", self.base_path)

    def _resolve(self, entry_id: str) -> Optional[Path]:
        path = (self.base_path / entry_id).resolve()
        if path != self.base_path and not path.is_relative_to(self.base_path):
            return None
        return path

    def _entry_id(self, path: Path) -> str:
        return path.relative_to(self.base_path).as_posix()

    def _children(self, folder_id: str) -> List[Path]:
        folder = self._resolve(folder_id)
        if folder is None or not folder.is_dir():
            raise ListingFailed(f"folder not found: {folder_id}", folder_id=folder_id)
        try:
            return sorted(p for p in folder.iterdir() if not p.name.startswith("."))
        except OSError as e:
            raise ListingFailed(str(e), folder_id=folder_id) from e

    def list_folders(self, root_id: str) -> List[DriveEntry]:
        try:
            children = self._children(root_id)
        except ListingFailed as e:
            raise ListingFailed(f"error listing folders: {e}", folder_id=root_id) from e
        return [
            DriveEntry(id=self._entry_id(p), name=p.name) for p in children if p.is_dir()
        ]

    def list_files(self, folder_id: str) -> List[DriveFile]:
        try:
            children = self._children(folder_id)
        except ListingFailed as e:
            raise ListingFailed(
                f"error listing files in folder: {e}", folder_id=folder_id
            ) from e

        files = []
        for path in children:
            if not path.is_file():
                continue
            mime_type, _ = mimetypes.guess_type(path.name)
            files.append(
                DriveFile(
                    id=self._entry_id(path),
                    name=path.name,
                    mimeType=mime_type or "application/octet-stream",
                )
            )
        return files

    def download_file(self, file_id: str) -> bytes:
        path = self._resolve(file_id)
        if path is None or not path.is_file():
            raise MetadataReadFailed(f"file not found: {file_id}", file_id=file_id)
        try:
            return path.read_bytes()
        except OSError as e:
            raise MetadataReadFailed(str(e), file_id=file_id) from e


# --- Service Wrapper ---


class StorageService:
    def __init__(self, settings: CatalogSettings):
        if settings.environment == "local":
            self.backend: StorageBackend = LocalBackend(settings.local_storage_path)
        else:
            if not settings.credentials_json:
                raise ConfigMissing("Google credentials not configured")
            self.backend: StorageBackend = GoogleDriveBackend.from_credentials_json(
                settings.credentials_json
            )

    def list_folders(self, root_id: str) -> List[DriveEntry]:
        return self.backend.list_folders(root_id)

    def list_files(self, folder_id: str) -> List[DriveFile]:
        return self.backend.list_files(folder_id)

    def download_file(self, file_id: str) -> bytes:
        return self.backend.download_file(file_id)
