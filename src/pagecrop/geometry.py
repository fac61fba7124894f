"""Page measurement, zoom and pixel/point conversion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagecrop.settings import PDF_POINTS_PER_INCH, Settings, get_settings
from pagecrop.typing.enums import Orientation
from pagecrop.typing.models import PageGeometry, PageSize

if TYPE_CHECKING:
    from pagecrop.typing.protocol import PageViewport

_PAPER_SIZES: dict[str, tuple[float, float]] = {
    "A4": (595, 842),
    "A3": (842, 1191),
    "A5": (420, 595),
    "Letter": (612, 792),
    "Legal": (612, 1008),
    "Tabloid": (792, 1224),
}
_PAPER_TOLERANCE_PT = 5.0


def to_points(pixel_value: float, scale: float, *, screen_dpi: float = 96.0) -> float:
    """Convert display pixels at `scale` into PDF points.

    Args:
        pixel_value: Length in display pixels.
        scale: Display scale the pixels were measured at.
        screen_dpi: Reference display DPI.

    Raises:
        ValueError: If `scale` is not positive.

    Returns:
        float: Length in points.
    """
    if scale <= 0:
        raise ValueError("scale must be positive")
    return pixel_value / scale * (PDF_POINTS_PER_INCH / screen_dpi)


def measure(viewport: PageViewport) -> PageSize:
    """Read a page's natural size from the rendering collaborator at scale 1.0."""
    return viewport.get_viewport(scale=1.0)


def clamp_scale(scale: float, settings: Settings | None = None) -> float:
    """Clamp a display scale to the configured zoom bounds, rounded to 0.1."""
    config = settings or get_settings()
    return round(min(config.max_scale, max(config.min_scale, scale)), 1)


def zoom_in(scale: float, settings: Settings | None = None) -> float:
    """Return the next larger display scale."""
    config = settings or get_settings()
    return clamp_scale(scale + config.zoom_step, config)


def zoom_out(scale: float, settings: Settings | None = None) -> float:
    """Return the next smaller display scale."""
    config = settings or get_settings()
    return clamp_scale(scale - config.zoom_step, config)


def detect_paper_format(width: float, height: float) -> str:
    """Name the paper format of a page from its size in points.

    Standard sizes match within 5pt in either orientation.

    Args:
        width: Page width in points.
        height: Page height in points.

    Returns:
        str: e.g. `A4 (Portrait)` or `Custom (500 × 500 pts)`.
    """
    for name, (paper_width, paper_height) in _PAPER_SIZES.items():
        portrait = abs(width - paper_width) <= _PAPER_TOLERANCE_PT and abs(height - paper_height) <= _PAPER_TOLERANCE_PT
        landscape = abs(width - paper_height) <= _PAPER_TOLERANCE_PT and abs(height - paper_width) <= _PAPER_TOLERANCE_PT
        if portrait or landscape:
            orientation = Orientation.LANDSCAPE if width > height else Orientation.PORTRAIT
            return f"{name} ({orientation.to_str()})"
    return f"Custom ({round(width)} × {round(height)} pts)"


class PageGeometryModel:
    """Cache of measured page sizes producing `PageGeometry` for the active scale."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._sizes: dict[int, PageSize] = {}

    def measure(self, page_number: int, viewport: PageViewport) -> PageSize:
        """Measure a page once and cache its natural size.

        Args:
            page_number: 1-based page number.
            viewport: Rendering collaborator for that page.

        Returns:
            PageSize: Natural size in points.
        """
        size = self._sizes.get(page_number)
        if size is None:
            size = measure(viewport)
            self._sizes[page_number] = size
        return size

    def remember(self, page_number: int, size: PageSize) -> None:
        """Store a size read directly from the document."""
        self._sizes[page_number] = size

    def size_of(self, page_number: int) -> PageSize | None:
        """Return the cached natural size of a page, if measured."""
        return self._sizes.get(page_number)

    def geometry(self, page_number: int, scale: float) -> PageGeometry:
        """Build the geometry of a measured page at a display scale.

        Raises:
            KeyError: If the page was never measured.
        """
        size = self._sizes[page_number]
        return PageGeometry.from_size(size, scale)

    def to_points(self, pixel_value: float, scale: float) -> float:
        """Convert pixels to points with the configured reference DPI."""
        return to_points(pixel_value, scale, screen_dpi=self._settings.screen_dpi)

    def clear(self) -> None:
        """Forget every measured page, e.g. after loading a new document."""
        self._sizes.clear()
