# ABOUTME: Converts BookMetadata records into JSON-ready dictionaries.
# ABOUTME: Applies the field omission policy and renders a whole catalog as a JSON array.

import json
from collections.abc import Iterable
from typing import Any

from epubcat.metadata.types import BookMetadata

JSON_INDENT = 2

# Dropped from the record when empty. Everything else is always emitted.
_OMIT_WHEN_EMPTY = frozenset(
    {"language", "publisher", "description", "subjects", "date", "rights"}
)


def metadata_to_record(metadata: BookMetadata) -> dict[str, Any]:
    """Convert a BookMetadata instance to a dict suitable for json.dumps.

    Keys come out in a fixed order. Empty optional strings and an empty
    subject list are left out entirely; title, authors, identifiers and the
    file fields are always present, even when empty.
    """
    record: dict[str, Any] = {
        "title": metadata.title,
        "authors": list(metadata.authors),
        "identifiers": list(metadata.identifiers),
        "language": metadata.language,
        "publisher": metadata.publisher,
        "description": metadata.description,
        "subjects": list(metadata.subjects),
        "date": metadata.date,
        "rights": metadata.rights,
        "filename": metadata.filename,
        "filepath": str(metadata.filepath),
        "filesize": metadata.filesize,
    }
    return {
        key: value
        for key, value in record.items()
        if value or key not in _OMIT_WHEN_EMPTY
    }


def catalog_to_json(books: Iterable[BookMetadata], *, pretty: bool = True) -> str:
    """Render a collection of BookMetadata as a single JSON array.

    Args:
        books: Records to serialize, in output order.
        pretty: Indent the output when True, otherwise emit it compactly.

    Returns:
        The JSON text, without a trailing newline.
    """
    records = [metadata_to_record(book) for book in books]
    if pretty:
        return json.dumps(records, indent=JSON_INDENT, ensure_ascii=False)
    return json.dumps(records, separators=(",", ":"), ensure_ascii=False)
