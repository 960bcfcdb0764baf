"""Parsing of ``key: value`` metadata files."""

from typing import Dict

from catalog.models.schemas import Item

METADATA_FIELDS = ("title", "subtitle", "description", "code")


def parse_metadata(content: str) -> Dict[str, str]:
    """
    Parse ``key: value`` lines into a mapping.

    Each non-blank line is split at its first colon; the key is trimmed and
    lower-cased, the value trimmed. Lines without a colon are ignored and a
    repeated key keeps its last value.

    Args:
        content: The metadata text

    Returns:
        Mapping of lower-cased keys to values
    """
    metadata: Dict[str, str] = {}
    # Only "\n" ends a line; other Unicode separators stay inside values
    for line in content.split("\n"):
        line = line.strip()
        if not line:
            continue

        key, sep, value = line.partition(":")
        if sep:
            metadata[key.strip().lower()] = value.strip()
    return metadata


def apply_metadata(item: Item, metadata: Dict[str, str]) -> Item:
    """Return a copy of ``item`` with the known metadata fields filled in."""
    return item.model_copy(
        update={field: metadata.get(field, "") for field in METADATA_FIELDS}
    )
