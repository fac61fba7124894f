"""Rebuild PDF documents from a subset of source pages.

Both operations copy pages one by one into a fresh document, yielding to the
event loop after every page, and serialize the result only once every page was
copied. Any failure discards the partial document.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import fitz

from pagecrop import logger
from pagecrop.async_runner import run_async
from pagecrop.exceptions import RebuildError, SelectionError
from pagecrop.logging import operation_context
from pagecrop.processing.crop import CropTransformer, validate_crop_box
from pagecrop.processing.page_ranges import pages_to_crop, pages_to_keep
from pagecrop.settings import Settings, get_settings
from pagecrop.typing.enums import RebuildMode
from pagecrop.typing.models import CropBox, CropRequest, RebuildResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from pagecrop.document import SourceDocument

_SECONDARY_BOXES = ("TrimBox", "BleedBox", "ArtBox")


def output_name(source_name: str | None, prefix: str, settings: Settings | None = None) -> str:
    """Return the suggested file name of a rebuilt document."""
    config = settings or get_settings()
    return f"{prefix}{source_name or config.default_document_name}"


def plan_crop_boxes(
    source: SourceDocument,
    request: CropRequest,
    settings: Settings | None = None,
) -> dict[int, CropBox]:
    """Compute the crop box of every page a crop request touches.

    Each page is mapped with its own natural size, so documents with mixed page
    sizes get a box per page.

    Args:
        source: Loaded source document.
        request: Selection, scale and page scope.
        settings: Optional settings override.

    Raises:
        SelectionError: If the page scope is invalid or a box would be empty.

    Returns:
        dict[int, CropBox]: Crop boxes keyed by 1-based page number, in page order.
    """
    transformer = CropTransformer(settings)
    pages = pages_to_crop(
        source.page_count,
        current_page=request.current_page,
        crop_all_pages=request.crop_all_pages,
    )
    return {
        page_number: validate_crop_box(
            transformer.transform_for_page(request.selection, source.page_size(page_number), request.display_scale),
            page_number=page_number,
        )
        for page_number in pages
    }


def _apply_boxes(doc: fitz.Document, page: fitz.Page, box: CropBox) -> None:
    """Set media and crop boxes of a page to the same rectangle in PDF points."""
    array = box.as_pdf_array()
    doc.xref_set_key(page.xref, "MediaBox", array)
    doc.xref_set_key(page.xref, "CropBox", array)
    for key in _SECONDARY_BOXES:
        doc.xref_set_key(page.xref, key, "null")


async def _copy_pages(
    source: SourceDocument,
    page_numbers: Iterable[int],
    *,
    boxes: Mapping[int, CropBox] | None = None,
    settings: Settings,
) -> bytes:
    """Copy pages in order into a new document and serialize it.

    Args:
        source: Loaded source document.
        page_numbers: 1-based pages to copy, in output order.
        boxes: Optional per-page boxes to apply after copying.
        settings: Serialization settings.

    Raises:
        RebuildError: If copying or saving fails.

    Returns:
        bytes: The new PDF.
    """
    try:
        src = fitz.open(stream=source.data, filetype="pdf")
    except Exception as exc:
        raise RebuildError(message="Failed to open source PDF for rebuild") from exc

    out = fitz.open()
    try:
        for page_number in page_numbers:
            index = page_number - 1
            out.insert_pdf(src, from_page=index, to_page=index)
            if boxes is not None:
                _apply_boxes(out, out[-1], boxes[page_number])
            await asyncio.sleep(0)
        return out.tobytes(garbage=settings.save_garbage, deflate=settings.save_deflate)
    except Exception as exc:
        raise RebuildError(message="An error occurred while processing the PDF. Please try again.") from exc
    finally:
        out.close()
        src.close()


async def crop_document_async(
    source: SourceDocument,
    request: CropRequest,
    settings: Settings | None = None,
) -> RebuildResult:
    """Crop one page or every page of a document to a selection.

    Args:
        source: Loaded source document (never modified).
        request: Selection in display pixels, display scale and page scope.
        settings: Optional settings override.

    Raises:
        SelectionError: If the request would produce an empty or invalid page.
        RebuildError: If the authoring library fails.

    Returns:
        RebuildResult: New document containing only the cropped pages.
    """
    config = settings or get_settings()
    with operation_context(RebuildMode.CROP.to_str(), document_name=source.name):
        boxes = plan_crop_boxes(source, request, config)
        logger.info("Cropping pages", extra={"pages": list(boxes), "scale": request.display_scale})
        try:
            data = await _copy_pages(source, boxes, boxes=boxes, settings=config)
        except RebuildError:
            logger.exception("Crop failed")
            raise
        result = RebuildResult(
            data=data,
            mode=RebuildMode.CROP,
            file_name=output_name(source.name, config.cropped_prefix, config),
            source_page_numbers=list(boxes),
        )
        logger.info("Crop applied", extra={"pages": result.retained_page_count, "bytes": result.byte_length})
        return result


async def remove_pages_async(
    source: SourceDocument,
    pages_to_remove: Iterable[int],
    settings: Settings | None = None,
) -> RebuildResult:
    """Drop a set of pages, keeping the rest in their original order.

    Args:
        source: Loaded source document (never modified).
        pages_to_remove: 1-based pages to drop.
        settings: Optional settings override.

    Raises:
        SelectionError: If the set is empty, out of range, or covers every page.
        RebuildError: If the authoring library fails.

    Returns:
        RebuildResult: New document with the retained pages.
    """
    config = settings or get_settings()
    removed = sorted(set(pages_to_remove))
    with operation_context(RebuildMode.REMOVE.to_str(), document_name=source.name):
        try:
            retained = pages_to_keep(removed, source.page_count)
        except SelectionError:
            logger.warning("Rejected page removal", extra={"removed": removed, "page_count": source.page_count})
            raise
        logger.info("Removing pages", extra={"removed": removed, "retained": len(retained)})
        try:
            data = await _copy_pages(source, retained, settings=config)
        except RebuildError:
            logger.exception("Page removal failed")
            raise
        result = RebuildResult(
            data=data,
            mode=RebuildMode.REMOVE,
            file_name=output_name(source.name, config.removed_prefix, config),
            source_page_numbers=retained,
        )
        logger.info("Pages removed", extra={"pages": result.retained_page_count, "bytes": result.byte_length})
        return result


def crop_document(
    source: SourceDocument,
    request: CropRequest,
    settings: Settings | None = None,
) -> RebuildResult:
    """Synchronous wrapper around `crop_document_async`."""
    return run_async(crop_document_async(source, request, settings))


def remove_pages(
    source: SourceDocument,
    pages_to_remove: Iterable[int],
    settings: Settings | None = None,
) -> RebuildResult:
    """Synchronous wrapper around `remove_pages_async`."""
    return run_async(remove_pages_async(source, pages_to_remove, settings))
