"""Typing-centric domain modules."""

from pagecrop.typing.enums import Handle, Orientation, RebuildMode, SelectionState
from pagecrop.typing.models import (
    CropBox,
    CropRequest,
    PageBoxes,
    PageGeometry,
    PageSetValidation,
    PageSize,
    RebuildResult,
    SelectionRect,
)
from pagecrop.typing.protocol import ArtifactStore, PageViewport

__all__ = [
    "ArtifactStore",
    "CropBox",
    "CropRequest",
    "Handle",
    "Orientation",
    "PageBoxes",
    "PageGeometry",
    "PageSetValidation",
    "PageSize",
    "PageViewport",
    "RebuildMode",
    "RebuildResult",
    "SelectionRect",
    "SelectionState",
]
