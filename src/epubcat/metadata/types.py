# ABOUTME: Core metadata data structures for cataloged EPUB files.
# ABOUTME: BookMetadata is the per-file record produced by extraction and serialized to JSON.

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class BookMetadata:
    """Bibliographic metadata extracted from a single EPUB file.

    Single-valued fields hold the first value declared in the package
    document, or an empty string when none was declared. Multi-valued fields
    keep every declared value in document order.
    """

    title: str
    filename: str
    filepath: Path
    filesize: int
    authors: list[str] = field(default_factory=list)
    identifiers: list[str] = field(default_factory=list)
    language: str = ""
    publisher: str = ""
    description: str = ""
    subjects: list[str] = field(default_factory=list)
    date: str = ""
    rights: str = ""