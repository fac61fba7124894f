"""Collaborator interfaces consumed by the core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pagecrop.typing.models import PageSize


class PageViewport(Protocol):
    """Rendering collaborator able to report a page's size at a given scale."""

    def get_viewport(self, *, scale: float) -> PageSize:
        """Return the rendered page size.

        Args:
            scale: Display scale.

        Returns:
            PageSize: Size in display units at `scale`.
        """


class ArtifactStore(Protocol):
    """File I/O collaborator turning result bytes into downloadable handles."""

    def publish(self, data: bytes, file_name: str) -> str:
        """Wrap bytes into an artifact handle (e.g. an object URL).

        Args:
            data: Document bytes.
            file_name: Suggested download name.

        Returns:
            str: Opaque artifact handle.
        """

    def release(self, handle: str) -> None:
        """Release a previously published artifact handle.

        Args:
            handle: Handle returned by `publish`.
        """
