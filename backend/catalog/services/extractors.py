"""Text extractors that turn a downloaded metadata file into plain text."""

import logging
import subprocess
import tempfile
from pathlib import Path, PurePosixPath
from typing import Callable, Dict

from catalog.exceptions import MetadataReadFailed

logger = logging.getLogger(__name__)

TextExtractor = Callable[[str, bytes], str]


def decode_text(filename: str, content: bytes) -> str:
    """
    Decode a plain-text metadata file.

    A leading UTF-8 byte-order mark is dropped and undecodable bytes are
    replaced, so decoding never fails.
    """
    return content.decode("utf-8-sig", errors="replace")


class PandocExtractor:
    """
    Converts a document to plain text with the ``pandoc`` executable.

    The document bytes are written into a temporary directory that is removed
    once conversion finishes, whether it succeeded or not.
    """

    def __init__(self, pandoc_path: str = "pandoc", timeout: float = 30.0):
        self.pandoc_path = pandoc_path
        self.timeout = timeout

    def __call__(self, filename: str, content: bytes) -> str:
        suffix = PurePosixPath(filename).suffix.lower()
        try:
            with tempfile.TemporaryDirectory(prefix="metadata_") as tmp_dir:
                source = Path(tmp_dir) / f"metadata{suffix}"
                source.write_bytes(content)
                return self._convert(source, filename)
        except OSError as e:
            raise MetadataReadFailed(f"error writing temp file: {e}") from e

    def _convert(self, source: Path, filename: str) -> str:
        logger.debug("Running %s on %s", self.pandoc_path, filename)
        try:
            result = subprocess.run(
                [self.pandoc_path, str(source), "-t", "plain"],
                capture_output=True,
                check=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise MetadataReadFailed(
                f"error running pandoc: {self.pandoc_path} not found"
            ) from e
        except OSError as e:
            raise MetadataReadFailed(f"error running pandoc: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise MetadataReadFailed(
                f"error running pandoc: timed out after {self.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            raise MetadataReadFailed(
                f"error running pandoc: exit status {e.returncode}: {stderr}"
            ) from e

        return result.stdout.decode("utf-8", errors="replace")


class ExtractorRegistry:
    """
    Maps lower-cased file-name suffixes to text extractors.

    Suffixes without a registered extractor fall back to :func:`decode_text`.
    """

    def __init__(self, default: TextExtractor = decode_text):
        self._extractors: Dict[str, TextExtractor] = {}
        self.default = default

    def register_extractor(self, suffix: str, extractor: TextExtractor) -> None:
        self._extractors[suffix.lower()] = extractor

    def get(self, filename: str) -> TextExtractor:
        suffix = PurePosixPath(filename).suffix.lower()
        return self._extractors.get(suffix, self.default)

    def extract_text(self, filename: str, content: bytes) -> str:
        """
        Extract plain text from a downloaded file.

        Args:
            filename: Name of the file, used to pick the extractor
            content: The raw file bytes

        Returns:
            The file's text

        Raises:
            MetadataReadFailed: If the extractor cannot convert the file
        """
        return self.get(filename)(filename, content)


def default_registry(pandoc_path: str = "pandoc", timeout: float = 30.0) -> ExtractorRegistry:
    """Create a registry handling ``.txt`` natively and ``.docx`` through pandoc."""
    registry = ExtractorRegistry()
    registry.register_extractor(".txt", decode_text)
    registry.register_extractor(".docx", PandocExtractor(pandoc_path, timeout))
    return registry
