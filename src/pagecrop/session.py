"""Editor session: one loaded document, its view state and the latest result."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from pagecrop import logger
from pagecrop.async_runner import run_async
from pagecrop.document import SourceDocument, load_document
from pagecrop.exceptions import SelectionError, SessionBusyError
from pagecrop.geometry import PageGeometryModel, clamp_scale, zoom_in, zoom_out
from pagecrop.processing.page_ranges import commit_page_ranges, pages_to_keep, select_span, toggle_page
from pagecrop.rebuild import crop_document_async, remove_pages_async
from pagecrop.selection import SelectionModel
from pagecrop.settings import Settings, get_settings
from pagecrop.typing.enums import SelectionState
from pagecrop.typing.models import CropRequest, PageGeometry, RebuildResult

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pagecrop.typing.protocol import ArtifactStore


class EditorSession:
    """Coordinate selection, zoom, page navigation and rebuilds for one document.

    Only one rebuild may run at a time; pointer events received while a rebuild
    is in flight are ignored. The most recent result exclusively owns its
    artifact handle: the previous handle is released before a new one is kept.
    """

    def __init__(
        self,
        source: SourceDocument,
        *,
        artifacts: ArtifactStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._artifacts = artifacts
        self._source = source
        self._current_page = 1
        self._scale = clamp_scale(self._settings.default_scale, self._settings)
        self._crop_all_pages = True
        self._processing = False
        self._result: RebuildResult | None = None
        self._artifact_handle: str | None = None
        self._pages_to_remove: list[int] = []
        self._last_toggled_page: int | None = None
        self._geometry_model = PageGeometryModel(self._settings)
        self._remember_page_sizes()
        self._geometry = self._geometry_model.geometry(self._current_page, self._scale)
        self.selection = SelectionModel(self._geometry, self._settings)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        name: str | None = None,
        artifacts: ArtifactStore | None = None,
        settings: Settings | None = None,
    ) -> EditorSession:
        """Load a document and open a session on it."""
        return cls(load_document(data, name=name), artifacts=artifacts, settings=settings)

    @property
    def source(self) -> SourceDocument:
        """Return the document currently being edited."""
        return self._source

    @property
    def current_page(self) -> int:
        """Return the 1-based page on screen."""
        return self._current_page

    @property
    def scale(self) -> float:
        """Return the display scale."""
        return self._scale

    @property
    def geometry(self) -> PageGeometry:
        """Return the geometry of the current page at the current scale."""
        return self._geometry

    @property
    def processing(self) -> bool:
        """Return whether a rebuild is in flight."""
        return self._processing

    @property
    def result(self) -> RebuildResult | None:
        """Return the latest rebuild result."""
        return self._result

    @property
    def artifact_handle(self) -> str | None:
        """Return the handle of the latest published result."""
        return self._artifact_handle

    @property
    def pages_to_remove(self) -> list[int]:
        """Return the pages marked for removal."""
        return list(self._pages_to_remove)

    @property
    def crop_all_pages(self) -> bool:
        """Return whether a crop applies to every page."""
        return self._crop_all_pages

    @crop_all_pages.setter
    def crop_all_pages(self, value: bool) -> None:
        self._crop_all_pages = value

    def go_to_page(self, page_number: int) -> None:
        """Show another page; the selection is kept and re-clamped to it.

        Raises:
            SelectionError: If the page does not exist.
        """
        if not 1 <= page_number <= self._source.page_count:
            raise SelectionError(
                message=f"Page {page_number} does not exist in a {self._source.page_count}-page document",
                offending_value=page_number,
            )
        self._current_page = page_number
        self._refresh_geometry()

    def next_page(self) -> None:
        """Advance one page, stopping at the last page."""
        self.go_to_page(min(self._current_page + 1, self._source.page_count))

    def previous_page(self) -> None:
        """Go back one page, stopping at the first page."""
        self.go_to_page(max(self._current_page - 1, 1))

    def set_scale(self, scale: float) -> None:
        """Change the display scale within the configured zoom bounds."""
        self._scale = clamp_scale(scale, self._settings)
        self._refresh_geometry()

    def zoom_in(self) -> None:
        """Increase the display scale by one step."""
        self.set_scale(zoom_in(self._scale, self._settings))

    def zoom_out(self) -> None:
        """Decrease the display scale by one step."""
        self.set_scale(zoom_out(self._scale, self._settings))

    def toggle_crop_mode(self) -> bool:
        """Enter or leave crop mode; leaving discards the selection."""
        return self.selection.toggle_crop_mode()

    def cancel_crop(self) -> None:
        """Discard the current selection."""
        self.selection.cancel()

    def pointer_down(self, x: float, y: float) -> SelectionState:
        """Forward a pointer press unless a rebuild is running."""
        if self._processing:
            return self.selection.state
        return self.selection.pointer_down(x, y)

    def pointer_move(self, x: float, y: float) -> SelectionState:
        """Forward a pointer drag unless a rebuild is running."""
        if self._processing:
            return self.selection.state
        return self.selection.pointer_move(x, y)

    def pointer_up(self) -> SelectionState:
        """Forward a pointer release unless a rebuild is running."""
        if self._processing:
            return self.selection.state
        return self.selection.pointer_up()

    def toggle_page_for_removal(self, page_number: int, *, extend: bool = False) -> list[int]:
        """Mark or unmark a page; with `extend`, add the span from the last clicked page.

        Raises:
            SelectionError: If the page does not exist.

        Returns:
            list[int]: Pages marked for removal.
        """
        if not 1 <= page_number <= self._source.page_count:
            raise SelectionError(message=f"Page {page_number} does not exist", offending_value=page_number)
        if extend and self._last_toggled_page is not None:
            self._pages_to_remove = select_span(self._pages_to_remove, self._last_toggled_page, page_number)
        else:
            self._pages_to_remove = toggle_page(self._pages_to_remove, page_number)
        self._last_toggled_page = page_number
        return self.pages_to_remove

    def apply_page_range(self, text: str) -> list[int]:
        """Replace the removal set from a range expression such as `"1,3-5"`.

        Raises:
            SelectionError: If the expression references pages beyond the document.

        Returns:
            list[int]: Pages marked for removal.
        """
        self._pages_to_remove = commit_page_ranges(text, self._source.page_count)
        return self.pages_to_remove

    async def apply_crop_async(self) -> RebuildResult:
        """Crop with the locked selection and publish the result.

        Raises:
            SelectionError: If no selection is locked or a crop box would be empty.

        Returns:
            RebuildResult: The cropped document.
        """
        selection = self.selection.locked_selection
        if selection is None:
            raise SelectionError(message="Draw and release a crop selection before applying the crop.")
        request = CropRequest(
            selection=selection,
            display_scale=self._scale,
            current_page=self._current_page,
            crop_all_pages=self._crop_all_pages,
        )
        with self._processing_guard():
            result = await crop_document_async(self._source, request, self._settings)
        self._publish(result)
        self.selection.complete()
        return result

    async def remove_pages_async(self) -> RebuildResult:
        """Remove the marked pages; the result becomes the edited document.

        Raises:
            SelectionError: If no page, or every page, is marked.

        Returns:
            RebuildResult: The document without the marked pages.
        """
        pages_to_keep(self._pages_to_remove, self._source.page_count)
        with self._processing_guard():
            result = await remove_pages_async(self._source, self._pages_to_remove, self._settings)
        self._publish(result)
        self._source = load_document(result.data, name=self._source.name)
        self._pages_to_remove = []
        self._last_toggled_page = None
        self._current_page = 1
        self._remember_page_sizes()
        self._refresh_geometry()
        self.selection.exit_crop_mode()
        return result

    def apply_crop(self) -> RebuildResult:
        """Synchronous wrapper around `apply_crop_async`."""
        return run_async(self.apply_crop_async())

    def remove_pages(self) -> RebuildResult:
        """Synchronous wrapper around `remove_pages_async`."""
        return run_async(self.remove_pages_async())

    def close(self) -> None:
        """Release the artifact of the latest result."""
        self._release_artifact()
        self._result = None

    @contextmanager
    def _processing_guard(self) -> Iterator[None]:
        if self._processing:
            raise SessionBusyError()
        self._processing = True
        try:
            yield
        finally:
            self._processing = False

    def _publish(self, result: RebuildResult) -> None:
        """Release the previous artifact, then keep the new result and its handle."""
        self._release_artifact()
        self._result = result
        if self._artifacts is not None:
            self._artifact_handle = self._artifacts.publish(result.data, result.file_name)

    def _release_artifact(self) -> None:
        if self._artifact_handle is None or self._artifacts is None:
            return
        handle, self._artifact_handle = self._artifact_handle, None
        self._artifacts.release(handle)
        logger.debug("Released artifact", extra={"handle": handle})

    def _remember_page_sizes(self) -> None:
        self._geometry_model.clear()
        for page_number in range(1, self._source.page_count + 1):
            self._geometry_model.remember(page_number, self._source.page_size(page_number))

    def _refresh_geometry(self) -> None:
        self._geometry = self._geometry_model.geometry(self._current_page, self._scale)
        self.selection.set_geometry(self._geometry)
