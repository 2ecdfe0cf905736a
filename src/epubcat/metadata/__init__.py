# ABOUTME: Metadata package for EPUB catalog records and their JSON representation.
# ABOUTME: Exports the BookMetadata dataclass and the JSON mapping helpers.

from epubcat.metadata.mapping import catalog_to_json, metadata_to_record
from epubcat.metadata.types import BookMetadata

__all__ = [
    "BookMetadata",
    "catalog_to_json",
    "metadata_to_record",
]
