"""Map a locked pixel-space selection onto a PDF-space crop box."""

from __future__ import annotations

from pagecrop.exceptions import SelectionError
from pagecrop.selection import normalize
from pagecrop.settings import Settings, get_settings
from pagecrop.typing.models import CropBox, PageGeometry, PageSize, SelectionRect


def compute_crop_box(
    selection: SelectionRect,
    geometry: PageGeometry,
    *,
    left_pad: float = 30.0,
    right_shrink: float = 1.0,
) -> CropBox:
    """Translate a display-pixel selection into a crop box in PDF points.

    Ratios are derived per axis from natural and displayed sizes. The left edge
    is pushed out by `left_pad` (never below 0) and the width is reduced by
    `right_shrink`, capped at the remaining page width. The y axis is flipped
    because PDF space has its origin at the bottom-left, and the bottom edge is
    floored at 0.

    Args:
        selection: Locked selection in display pixels.
        geometry: Natural size and display scale of the page.
        left_pad: Points added to the left of the selection.
        right_shrink: Points removed from the right of the selection.

    Returns:
        CropBox: Box in PDF points. Width or height may be non-positive for tiny
        selections; see `validate_crop_box`.
    """
    x_ratio = geometry.natural_width / geometry.display_width
    y_ratio = geometry.natural_height / geometry.display_height

    crop_x = max(0.0, selection.x * x_ratio - left_pad)
    # Float error in the flip can land a bottom-edge selection just below 0.
    crop_y = max(0.0, geometry.natural_height - (selection.y + selection.height) * y_ratio)
    exact_width = selection.width * x_ratio
    crop_width = min(geometry.natural_width - crop_x, exact_width - right_shrink)
    crop_height = min(geometry.natural_height - crop_y, selection.height * y_ratio)

    return CropBox(x=crop_x, y=crop_y, width=crop_width, height=crop_height)


def validate_crop_box(box: CropBox, *, page_number: int | None = None) -> CropBox:
    """Reject a crop box that would produce an empty page.

    Raises:
        SelectionError: If width or height is not positive.

    Returns:
        CropBox: The same box.
    """
    if box.is_degenerate:
        where = f" on page {page_number}" if page_number is not None else ""
        raise SelectionError(message=f"Crop selection is too small{where}")
    return box


class CropTransformer:
    """Crop box computation with the configured calibration constants."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def transform(self, selection: SelectionRect, geometry: PageGeometry) -> CropBox:
        """Compute the crop box for one page."""
        return compute_crop_box(
            selection,
            geometry,
            left_pad=self._settings.crop_left_pad_pt,
            right_shrink=self._settings.crop_right_shrink_pt,
        )

    def transform_for_page(self, selection: SelectionRect, page_size: PageSize, scale: float) -> CropBox:
        """Compute the crop box for a page of any natural size at `scale`.

        The selection keeps its pixel position and is clamped into the page's
        displayed bounds, then mapped with that page's own ratios and height.
        """
        geometry = PageGeometry.from_size(page_size, scale)
        clamped = normalize(
            selection.x,
            selection.y,
            selection.width,
            selection.height,
            bounds=(geometry.display_width, geometry.display_height),
        )
        return self.transform(clamped, geometry)
