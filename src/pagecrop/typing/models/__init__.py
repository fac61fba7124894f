"""Core domain model exports."""

from pagecrop.typing.models.geometry import CropBox, PageBoxes, PageGeometry, PageSize, SelectionRect
from pagecrop.typing.models.page_selection import PageSetValidation
from pagecrop.typing.models.rebuild import CropRequest, RebuildResult

__all__ = [
    "CropBox",
    "CropRequest",
    "PageBoxes",
    "PageGeometry",
    "PageSetValidation",
    "PageSize",
    "RebuildResult",
    "SelectionRect",
]
