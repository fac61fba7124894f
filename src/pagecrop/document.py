"""Source documents: loading raw bytes and inspecting page geometry."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import fitz

from pagecrop import logger
from pagecrop.exceptions import DocumentLoadError
from pagecrop.geometry import detect_paper_format
from pagecrop.typing.models import CropBox, PageBoxes, PageSize

if TYPE_CHECKING:
    from collections.abc import Iterator


class SourceDocument:
    """Immutable PDF byte buffer with its derived page count and page sizes.

    The underlying file is reopened for every operation; rebuilds always produce
    a new `SourceDocument` rather than mutating this one.
    """

    def __init__(self, data: bytes, page_sizes: list[PageSize], name: str | None = None) -> None:
        self._data = bytes(data)
        self._page_sizes = tuple(page_sizes)
        self._name = name

    def __repr__(self) -> str:
        return f"SourceDocument(name={self._name!r}, pages={self.page_count}, bytes={len(self._data)})"

    @property
    def data(self) -> bytes:
        """Return the raw PDF bytes."""
        return self._data

    @property
    def name(self) -> str | None:
        """Return the original file name, if known."""
        return self._name

    @property
    def page_count(self) -> int:
        """Return the number of pages."""
        return len(self._page_sizes)

    def page_size(self, page_number: int) -> PageSize:
        """Return a page's natural size in points at scale 1.0.

        Args:
            page_number (int): 1-based page number.

        Raises:
            IndexError: If the page does not exist.

        Returns:
            PageSize: Natural size.
        """
        if not 1 <= page_number <= self.page_count:
            raise IndexError(f"Page {page_number} out of range 1..{self.page_count}")
        return self._page_sizes[page_number - 1]

    def paper_format(self, page_number: int) -> str:
        """Return the detected paper format of a page."""
        size = self.page_size(page_number)
        return detect_paper_format(size.width, size.height)

    @contextmanager
    def open(self) -> Iterator[fitz.Document]:
        """Open the bytes with PyMuPDF for read-only use.

        Yields:
            fitz.Document: Open document, closed when the block exits.
        """
        doc = fitz.open(stream=self._data, filetype="pdf")
        try:
            yield doc
        finally:
            doc.close()

    def read_page_boxes(self, page_number: int) -> PageBoxes:
        """Read a page's media and crop boxes in PDF points (origin bottom-left).

        Args:
            page_number (int): 1-based page number.

        Returns:
            PageBoxes: Media box and crop box; the crop box defaults to the media box.
        """
        self.page_size(page_number)
        with self.open() as doc:
            page = doc.load_page(page_number - 1)
            media_box = _read_box(doc, page.xref, "MediaBox")
            if media_box is None:
                rect = page.mediabox
                media_box = CropBox.from_corners(rect.x0, rect.y0, rect.x1, rect.y1)
            crop_box = _read_box(doc, page.xref, "CropBox") or media_box
        return PageBoxes(media_box=media_box, crop_box=crop_box)


def _read_box(doc: fitz.Document, xref: int, key: str) -> CropBox | None:
    """Parse a rectangle array stored directly on a page object.

    Args:
        doc (fitz.Document): Open document.
        xref (int): Page object number.
        key (str): Dictionary key, e.g. `MediaBox`.

    Returns:
        CropBox | None: Parsed box, or None when the key is absent, inherited or malformed.
    """
    kind, value = doc.xref_get_key(xref, key)
    if kind != "array":
        return None
    try:
        numbers = [float(part) for part in value.strip("[]").split()]
    except ValueError:
        logger.warning("Malformed page box ignored", extra={"xref": xref, "key": key, "value": value})
        return None
    if len(numbers) != 4:  # noqa: PLR2004
        return None
    return CropBox.from_corners(*numbers)


def load_document(data: bytes, *, name: str | None = None) -> SourceDocument:
    """Parse raw bytes as a PDF and measure every page.

    Args:
        data (bytes): PDF file content.
        name (str | None): Original file name used to name results.

    Raises:
        DocumentLoadError: If the bytes are not a readable, non-empty PDF.

    Returns:
        SourceDocument: Loaded document.
    """
    if not data:
        raise DocumentLoadError(message="Failed to load PDF: the file is empty.")

    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        logger.warning("PDF load failed", extra={"document_name": name, "error": str(exc)})
        raise DocumentLoadError() from exc

    try:
        if doc.needs_pass:
            raise DocumentLoadError(message="Failed to load PDF: the file is password protected.")
        if doc.page_count == 0:
            raise DocumentLoadError(message="Failed to load PDF: the document has no pages.")
        page_sizes = [PageSize(width=page.rect.width, height=page.rect.height) for page in doc]
    except DocumentLoadError:
        raise
    except Exception as exc:
        logger.warning("PDF page measurement failed", extra={"document_name": name, "error": str(exc)})
        raise DocumentLoadError() from exc
    finally:
        doc.close()

    logger.info("PDF loaded", extra={"document_name": name, "pages": len(page_sizes), "bytes": len(data)})
    return SourceDocument(data, page_sizes, name=name)


def load_document_file(path: Path) -> SourceDocument:
    """Read a PDF from disk.

    Raises:
        DocumentLoadError: If the file cannot be read or parsed.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise DocumentLoadError(message=f"Failed to read PDF: {path}") from exc
    return load_document(data, name=Path(path).name)
