# ABOUTME: Directory walker that finds EPUB files beneath a root directory.
# ABOUTME: Visits directories in lexicographic order and aborts on any traversal I/O error.

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

EPUB_EXTENSION = ".epub"


class ScanError(Exception):
    """Raised when a directory tree cannot be scanned."""


def is_epub_name(name: str) -> bool:
    """Check whether a file name carries the .epub extension, in any case."""
    return name.lower().endswith(EPUB_EXTENSION)


def _raise_walk_error(exc: OSError) -> None:
    raise ScanError(f"Failed to read {exc.filename}: {exc.strerror or exc}") from exc


def find_epub_files(root: Path) -> list[Path]:
    """Recursively find all .epub files under a directory.

    Returned paths keep the form of ``root``: a relative root yields
    relative paths. Within each directory, files come first in sorted
    order, then subdirectories are descended in sorted order.

    Args:
        root: The top-level directory to scan.

    Returns:
        Paths of every non-directory entry named ``*.epub``.

    Raises:
        ScanError: If root is missing or not a directory, or the walk fails.
    """
    if not root.exists():
        raise ScanError(f"Directory not found: {root}")
    if not root.is_dir():
        raise ScanError(f"{root} is not a directory")

    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        for name in sorted(filenames):
            if is_epub_name(name):
                found.append(Path(dirpath) / name)

    logger.debug("Found %d EPUB file(s) under %s", len(found), root)
    return found
