"""Catalog builder: walks the root folder and turns each subfolder into an item."""

import logging
from typing import List, Optional

from catalog.config import CatalogSettings
from catalog.exceptions import ListingFailed, MetadataReadFailed
from catalog.models.schemas import DriveEntry, DriveFile, Item
from catalog.services.extractors import ExtractorRegistry, default_registry
from catalog.services.metadata import apply_metadata, parse_metadata
from catalog.services.storage import StorageService
from catalog.utils import get_image_url, get_video_url, is_image, is_video

logger = logging.getLogger(__name__)

# Errors that skip a single item without failing the whole catalog
ITEM_ERRORS = (ListingFailed, MetadataReadFailed)


class ItemOutcome:
    """
    Result of processing one item folder: either the built item or the error
    that caused the folder to be skipped.
    """

    def __init__(
        self,
        folder: DriveEntry,
        item: Optional[Item] = None,
        error: Optional[Exception] = None,
    ):
        self.folder = folder
        self.item = item
        self.error = error

    @property
    def skipped(self) -> bool:
        return self.item is None


class CatalogBuilder:
    """Builds the list of items found under a root folder."""

    def __init__(
        self,
        storage: StorageService,
        settings: CatalogSettings,
        extractors: Optional[ExtractorRegistry] = None,
    ):
        self.storage = storage
        self.settings = settings
        self.extractors = extractors or default_registry(
            settings.pandoc_path, settings.pandoc_timeout
        )

    def build_items(self, root_folder_id: str) -> List[Item]:
        """
        List the item folders under the root and build one item per folder.

        Folders that fail are logged and left out; the remaining items keep
        the listing order.

        Args:
            root_folder_id: The folder whose subfolders are the items

        Returns:
            The built items

        Raises:
            ListingFailed: If the root folder itself cannot be listed
        """
        folders = self.storage.list_folders(root_folder_id)

        items = []
        for folder in folders:
            outcome = self.process_folder(folder)
            if outcome.skipped:
                logger.warning(
                    "Error processing folder %s: %s",
                    folder.name,
                    outcome.error,
                    extra={"folder_id": folder.id, "folder_name": folder.name},
                )
                continue
            items.append(outcome.item)

        logger.info(
            "Built %d of %d items from folder %s",
            len(items),
            len(folders),
            root_folder_id,
        )
        return items

    def process_folder(self, folder: DriveEntry) -> ItemOutcome:
        try:
            item = self.build_item(folder.id, folder.name)
        except ITEM_ERRORS as e:
            return ItemOutcome(folder, error=e)
        return ItemOutcome(folder, item=item)

    def build_item(self, folder_id: str, folder_name: str) -> Item:
        """
        Classify the files of one item folder and read its metadata.

        Args:
            folder_id: The item folder id
            folder_name: The item folder name

        Returns:
            The item with media URLs and metadata fields

        Raises:
            ListingFailed: If the folder's files cannot be listed
            MetadataReadFailed: If the metadata file cannot be downloaded or converted
        """
        files = self.storage.list_files(folder_id)

        metadata_file: Optional[DriveFile] = None
        image_urls: List[str] = []
        video_urls: List[str] = []
        for file in files:
            # A later metadata file replaces an earlier one
            if file.name in self.settings.metadata_filenames:
                metadata_file = file
                continue

            if is_image(file.mimeType):
                image_urls.append(get_image_url(file.id))
            elif self.settings.include_videos and is_video(file.mimeType):
                video_urls.append(get_video_url(file.id))

        item = Item(
            imageUrls=image_urls,
            videoUrls=video_urls if self.settings.include_videos else None,
        )
        if metadata_file is None:
            return item

        return apply_metadata(item, self.read_metadata(metadata_file))

    def read_metadata(self, file: DriveFile) -> dict:
        try:
            content = self.storage.download_file(file.id)
            text = self.extractors.extract_text(file.name, content)
        except MetadataReadFailed as e:
            raise MetadataReadFailed(
                f"error reading metadata: {e}", file_id=file.id
            ) from e
        return parse_metadata(text)
