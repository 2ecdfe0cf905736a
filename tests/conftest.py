# ABOUTME: Shared pytest fixtures for epubcat tests.
# ABOUTME: Provides real EPUBs built with ebooklib plus a factory for hand-crafted archives.

import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest
from ebooklib import epub

CONTAINER_TEMPLATE = """<?xml version="{version}" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

PACKAGE_TEMPLATE = """<?xml version="{version}" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="uid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
{metadata}
  </metadata>
  <manifest/>
  <spine/>
</package>
"""

EpubFactory = Callable[..., Path]


def build_epub(
    path: Path,
    *,
    metadata: str = "",
    version: str = "1.0",
    opf_path: str = "OEBPS/content.opf",
    container: str | None = None,
    package: str | None = None,
) -> Path:
    """Write a minimal EPUB zip with the given container and package documents.

    Passing container or package as None uses the templates; passing an empty
    string for either leaves that entry out of the archive.
    """
    if container is None:
        container = CONTAINER_TEMPLATE.format(version=version, opf_path=opf_path)
    if package is None:
        package = PACKAGE_TEMPLATE.format(version=version, metadata=metadata)

    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("mimetype", "application/epub+zip", compress_type=zipfile.ZIP_STORED)
        if container:
            zf.writestr("META-INF/container.xml", container, compress_type=zipfile.ZIP_DEFLATED)
        if package:
            zf.writestr(opf_path, package, compress_type=zipfile.ZIP_DEFLATED)
    return path


@pytest.fixture
def epub_factory(tmp_path: Path) -> EpubFactory:
    """Factory for hand-crafted EPUBs under tmp_path."""

    def _make(name: str = "book.epub", **kwargs) -> Path:
        return build_epub(tmp_path / name, **kwargs)

    return _make


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    """Create a minimal valid EPUB file with known metadata."""
    book = epub.EpubBook()

    book.set_identifier("test-isbn-978-0-123456-47-2")
    book.set_title("The Name of the Rose")
    book.set_language("en")
    book.add_author("Umberto Eco")

    book.add_metadata("DC", "publisher", "Harcourt")
    book.add_metadata("DC", "description", "A mystery set in a medieval monastery.")
    book.add_metadata("DC", "subject", "Fiction")
    book.add_metadata("DC", "subject", "Mystery")

    # Add a minimal chapter so the EPUB is structurally valid
    chapter = epub.EpubHtml(title="Chapter 1", file_name="chap01.xhtml", lang="en")
    chapter.content = b"<html><body><h1>Chapter 1</h1><p>Content.</p></body></html>"
    book.add_item(chapter)

    book.toc = [epub.Link("chap01.xhtml", "Chapter 1", "chap01")]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    library = tmp_path / "library"
    library.mkdir()
    filepath = library / "name_of_the_rose.epub"
    epub.write_epub(str(filepath), book)
    return filepath


@pytest.fixture
def corrupt_epub(tmp_path: Path) -> Path:
    """Create a corrupt file that is not a valid EPUB."""
    filepath = tmp_path / "corrupt.epub"
    filepath.write_text("this is not a valid epub file")
    return filepath


@pytest.fixture
def mixed_library(tmp_path: Path) -> Path:
    """A directory tree with one good EPUB, one corrupt EPUB and unrelated files.

    Layout:
        mixed/
            notes.txt
            Agatha Christie/
                Poirot.EPUB
            broken/
                broken.epub
    """
    root = tmp_path / "mixed"
    build_epub(
        root / "Agatha Christie" / "Poirot.EPUB",
        metadata=(
            "    <dc:title>The Mysterious Affair at Styles</dc:title>\n"
            "    <dc:creator>Agatha Christie</dc:creator>\n"
            "    <dc:identifier id=\"uid\">urn:isbn:9780007527496</dc:identifier>"
        ),
    )
    (root / "broken").mkdir()
    (root / "broken" / "broken.epub").write_bytes(b"PK\x03\x04 definitely not a zip")
    (root / "notes.txt").write_text("reading list")
    return root


@pytest.fixture
def bad_name_epub(tmp_path: Path) -> Path:
    """A zip whose entry carries the UTF-8 name flag but invalid UTF-8 name bytes."""
    filepath = tmp_path / "bad_name.epub"
    # Non-ASCII names get the UTF-8 flag set automatically
    with zipfile.ZipFile(filepath, "w") as zf:
        zf.writestr("ééé.bin", b"data")
    raw = filepath.read_bytes()
    filepath.write_bytes(raw.replace("ééé".encode(), b"\xff\xfe\xfd\xfc\xfb\xfa"))
    return filepath


@pytest.fixture
def corrupt_entry_epub(tmp_path: Path) -> Path:
    """A valid zip whose stored container.xml bytes no longer match their CRC."""
    filepath = tmp_path / "corrupt_entry.epub"
    container = CONTAINER_TEMPLATE.format(version="1.0", opf_path="OEBPS/content.opf")
    with zipfile.ZipFile(filepath, "w") as zf:
        zf.writestr("mimetype", "application/epub+zip", compress_type=zipfile.ZIP_STORED)
        zf.writestr("META-INF/container.xml", container, compress_type=zipfile.ZIP_STORED)
    raw = filepath.read_bytes()
    filepath.write_bytes(raw.replace(b"urn:oasis", b"urn:oasiz", 1))
    return filepath
