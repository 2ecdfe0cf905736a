# ABOUTME: Catalog builder that extracts metadata from every EPUB under a directory.
# ABOUTME: A file that fails to parse is reported and skipped; the rest of the scan continues.

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from epubcat.core.scanner import ScanError, find_epub_files
from epubcat.formats.epub import EpubReadError, read_epub_metadata
from epubcat.metadata.types import BookMetadata

logger = logging.getLogger(__name__)


class NoEpubFilesError(ScanError):
    """Raised when a scanned directory contains no EPUB files."""


@dataclass
class CatalogResult:
    """Summary of a catalog run."""

    books: list[BookMetadata] = field(default_factory=list)
    errors: int = 0
    error_details: list[tuple[Path, str]] = field(default_factory=list)


# Called with (epub_path, error) as soon as a file fails
ErrorFn = Callable[[Path, EpubReadError], None]


def extract_catalog(
    paths: list[Path],
    *,
    on_error: ErrorFn | None = None,
) -> CatalogResult:
    """Extract metadata from each EPUB file in order.

    Files that raise EpubReadError are recorded in the result and passed to
    on_error, and never contribute a partial record.

    Args:
        paths: EPUB file paths to read.
        on_error: Optional callback invoked for each failing file.

    Returns:
        CatalogResult with one BookMetadata per readable file.
    """
    result = CatalogResult()

    for epub_path in paths:
        try:
            metadata = read_epub_metadata(epub_path)
        except EpubReadError as exc:
            result.errors += 1
            result.error_details.append((epub_path, str(exc)))
            if on_error is not None:
                on_error(epub_path, exc)
            continue

        logger.debug("Extracted metadata from %s", epub_path)
        result.books.append(metadata)

    return result


def catalog_directory(
    root: Path,
    *,
    on_error: ErrorFn | None = None,
) -> CatalogResult:
    """Walk a directory tree and extract metadata from every EPUB in it.

    Raises:
        ScanError: If the directory is missing or cannot be walked.
        NoEpubFilesError: If the tree holds no EPUB files at all.
    """
    paths = find_epub_files(root)
    if not paths:
        raise NoEpubFilesError(f"No epub files found in {root}")
    return extract_catalog(paths, on_error=on_error)
