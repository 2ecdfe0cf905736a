# ABOUTME: EPUB metadata extraction: zip container, container.xml and the OPF package document.
# ABOUTME: Each failure mode raises a specific EpubReadError subclass so callers can skip the file.

import logging
import zipfile
import zlib
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from pathlib import Path

from lxml import etree

from epubcat.formats.xmldecl import normalize_xml_declaration
from epubcat.metadata.types import BookMetadata

logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"

# Errors zipfile can raise while reading a damaged or unsupported entry
_ENTRY_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    NotImplementedError,
    RuntimeError,
    OSError,
    EOFError,
)


class EpubReadError(Exception):
    """Raised when an EPUB file cannot be read or parsed."""


class ArchiveError(EpubReadError):
    """The file is not a readable zip archive, or an entry is corrupt."""


class ContainerNotFoundError(EpubReadError):
    """The archive has no META-INF/container.xml entry."""


class RootFilePathMissingError(EpubReadError):
    """container.xml does not name a package document."""


class PackageNotFoundError(EpubReadError):
    """The package document named by container.xml is not in the archive."""


class XmlDecodeError(EpubReadError):
    """An XML document in the archive is malformed or has the wrong root element."""


@dataclass
class OpfMetadata:
    """Every Dublin Core value declared in a package document, in document order."""

    title: list[str] = field(default_factory=list)
    creator: list[str] = field(default_factory=list)
    identifier: list[str] = field(default_factory=list)
    language: list[str] = field(default_factory=list)
    publisher: list[str] = field(default_factory=list)
    description: list[str] = field(default_factory=list)
    subject: list[str] = field(default_factory=list)
    date: list[str] = field(default_factory=list)
    rights: list[str] = field(default_factory=list)


_OPF_FIELDS = frozenset(f.name for f in fields(OpfMetadata))


@contextmanager
def open_archive(path: Path) -> Iterator[zipfile.ZipFile]:
    """Open an EPUB as a zip archive, closing it on exit.

    Raises:
        ArchiveError: If the file is unreadable or not a zip archive.
    """
    try:
        archive = zipfile.ZipFile(path)
    except (zipfile.BadZipFile, OSError, UnicodeDecodeError, ValueError) as exc:
        raise ArchiveError(f"Failed to open archive: {exc}") from exc

    with archive:
        yield archive


def find_entry(archive: zipfile.ZipFile, name: str) -> zipfile.ZipInfo | None:
    """Return the first entry whose name matches exactly, or None."""
    for info in archive.infolist():
        if info.filename == name:
            return info
    return None


def read_entry(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
    """Read and decompress a whole archive entry into memory."""
    try:
        with archive.open(info) as stream:
            return stream.read()
    except _ENTRY_READ_ERRORS as exc:
        raise ArchiveError(f"Failed to read {info.filename}: {exc}") from exc


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def _parse_xml(content: bytes, name: str, root_name: str) -> etree._Element:
    """Parse an XML entry after normalizing its declaration, checking the root element."""
    try:
        root = etree.fromstring(normalize_xml_declaration(content), _make_parser())
    except etree.XMLSyntaxError as exc:
        raise XmlDecodeError(f"Malformed XML in {name}: {exc}") from exc

    actual = _local_name(root)
    if actual != root_name:
        raise XmlDecodeError(
            f"Expected element type <{root_name}> but have <{actual}> in {name}"
        )
    return root


def _local_name(element: etree._Element) -> str | None:
    """Element name without its namespace, or None for comments and entities."""
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def _children(element: etree._Element, name: str) -> Iterator[etree._Element]:
    """Yield direct children with the given local name, ignoring namespaces."""
    for child in element:
        if _local_name(child) == name:
            yield child


def _element_text(element: etree._Element) -> str:
    """Character data directly inside the element, as written; nested elements are skipped."""
    parts = [element.text or ""]
    parts.extend(child.tail or "" for child in element)
    return "".join(parts)


def resolve_package_path(archive: zipfile.ZipFile) -> str:
    """Find the package document path declared in META-INF/container.xml.

    Raises:
        ContainerNotFoundError: If the archive has no container.xml.
        XmlDecodeError: If container.xml is malformed.
        RootFilePathMissingError: If no rootfile with a full-path is declared.
    """
    info = find_entry(archive, CONTAINER_PATH)
    if info is None:
        raise ContainerNotFoundError("container.xml not found in epub")

    container = _parse_xml(read_entry(archive, info), CONTAINER_PATH, "container")

    full_path = ""
    rootfiles = next(_children(container, "rootfiles"), None)
    if rootfiles is not None:
        rootfile = next(_children(rootfiles, "rootfile"), None)
        if rootfile is not None:
            full_path = rootfile.get("full-path", "")
    if not full_path:
        raise RootFilePathMissingError("OPF file path not found in container.xml")

    logger.debug("Package document resolved to %s", full_path)
    return full_path


def parse_package(archive: zipfile.ZipFile, package_path: str) -> OpfMetadata:
    """Collect every Dublin Core metadata value from the package document.

    Elements are matched by local name among the direct children of each
    <metadata> section, so both ``dc:title`` and an unprefixed ``title``
    count.

    Raises:
        PackageNotFoundError: If the package document is not in the archive.
        XmlDecodeError: If the package document is malformed.
    """
    info = find_entry(archive, package_path)
    if info is None:
        raise PackageNotFoundError(f"OPF file not found in epub: {package_path}")

    package = _parse_xml(read_entry(archive, info), package_path, "package")

    opf = OpfMetadata()
    for section in _children(package, "metadata"):
        for element in section:
            name = _local_name(element)
            if name in _OPF_FIELDS:
                getattr(opf, name).append(_element_text(element))
    return opf


def _first(values: list[str]) -> str:
    return values[0] if values else ""


def read_epub_metadata(path: Path) -> BookMetadata:
    """Extract metadata from an EPUB file.

    Args:
        path: Path to the EPUB file, kept as given in the result.

    Returns:
        BookMetadata populated with extracted fields.

    Raises:
        EpubReadError: If the file cannot be read or parsed.
    """
    with open_archive(path) as archive:
        package_path = resolve_package_path(archive)
        opf = parse_package(archive, package_path)

    try:
        filesize = path.stat().st_size
    except OSError as exc:
        raise EpubReadError(f"Failed to stat {path}: {exc}") from exc

    return BookMetadata(
        title=_first(opf.title),
        authors=list(opf.creator),
        identifiers=list(opf.identifier),
        language=_first(opf.language),
        publisher=_first(opf.publisher),
        description=_first(opf.description),
        subjects=list(opf.subject),
        date=_first(opf.date),
        rights=_first(opf.rights),
        filename=path.name,
        filepath=path,
        filesize=filesize,
    )
