"""Configuration for the catalog service."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from catalog.exceptions import ConfigMissing

load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigMissing(f"Invalid {name}: {value!r} is not a number") from None


class CatalogSettings(BaseModel):
    """
    Settings for one catalog request.

    Built from the environment on every request; the ``folderId`` query
    parameter is applied afterwards with :meth:`for_request`.
    """

    root_folder_id: Optional[str] = None
    credentials_json: Optional[str] = None
    environment: str = "drive"
    local_storage_path: str = "local_storage"
    include_videos: bool = True
    docx_metadata: bool = True
    pandoc_path: str = "pandoc"
    pandoc_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "CatalogSettings":
        return cls(
            root_folder_id=os.getenv("GOOGLE_DRIVE_FOLDER_ID") or None,
            credentials_json=os.getenv("GOOGLE_CREDENTIALS_JSON") or None,
            environment=os.getenv("ENVIRONMENT", "drive").lower(),
            local_storage_path=os.getenv("LOCAL_STORAGE_PATH", "local_storage"),
            include_videos=_env_flag("CATALOG_INCLUDE_VIDEOS", True),
            docx_metadata=_env_flag("CATALOG_DOCX_METADATA", True),
            pandoc_path=os.getenv("PANDOC_PATH", "pandoc"),
            pandoc_timeout=_env_float("PANDOC_TIMEOUT", 30.0),
        )

    @property
    def metadata_filenames(self) -> tuple:
        """Reserved names of the metadata file inside an item folder."""
        if self.docx_metadata:
            return ("metadata.txt", "metadata.docx")
        return ("metadata.txt",)

    def for_request(self, folder_id: Optional[str] = None) -> "CatalogSettings":
        """
        Apply the per-request folder override.

        Args:
            folder_id: The ``folderId`` query parameter, if given

        Returns:
            A copy of the settings with ``root_folder_id`` resolved

        Raises:
            ConfigMissing: If neither the request nor the environment names a folder
        """
        root_folder_id = folder_id or self.root_folder_id
        if not root_folder_id:
            raise ConfigMissing("Folder ID is required", status_code=400)
        return self.model_copy(update={"root_folder_id": root_folder_id})


def get_settings() -> CatalogSettings:
    """FastAPI dependency returning freshly read settings."""
    return CatalogSettings.from_env()
