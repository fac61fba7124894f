"""Rebuild request and result models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field

from pagecrop.typing.enums import RebuildMode
from pagecrop.typing.models.geometry import SelectionRect


class CropRequest(BaseModel):
    """Crop a pixel-space selection out of one page or every page."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    selection: SelectionRect
    display_scale: float = Field(gt=0.0)
    current_page: int = Field(default=1, ge=1)
    crop_all_pages: bool = True


class RebuildResult(BaseModel):
    """Rebuilt document bytes handed to the caller."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    data: bytes = Field(repr=False)
    mode: RebuildMode
    file_name: str
    source_page_numbers: list[int]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def byte_length(self) -> int:
        """Size of the produced document in bytes."""
        return len(self.data)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def retained_page_count(self) -> int:
        """Number of pages in the produced document."""
        return len(self.source_page_numbers)
