"""Page geometry, selection and crop box models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field


class PageSize(BaseModel):
    """Natural page size in PDF points at scale 1.0."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: float = Field(gt=0.0)
    height: float = Field(gt=0.0)


class PageGeometry(BaseModel):
    """Natural page size paired with the active display scale."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    natural_width: float = Field(gt=0.0)
    natural_height: float = Field(gt=0.0)
    display_scale: float = Field(gt=0.0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_width(self) -> float:
        """Rendered page width in display pixels."""
        return self.natural_width * self.display_scale

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_height(self) -> float:
        """Rendered page height in display pixels."""
        return self.natural_height * self.display_scale

    @classmethod
    def from_size(cls, size: PageSize, scale: float) -> PageGeometry:
        """Build geometry for a measured page at a given scale."""
        return cls(natural_width=size.width, natural_height=size.height, display_scale=scale)


class SelectionRect(BaseModel):
    """Axis-aligned selection in display pixels, origin top-left."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float = Field(ge=0.0)
    y: float = Field(ge=0.0)
    width: float = Field(ge=0.0)
    height: float = Field(ge=0.0)

    @property
    def right(self) -> float:
        """Return the x coordinate of the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Return the y coordinate of the bottom edge."""
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        """Return whether a point lies inside the rectangle, edges included."""
        return self.x <= x <= self.right and self.y <= y <= self.bottom


class CropBox(BaseModel):
    """Page box in PDF points, origin bottom-left."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float
    y: float
    width: float
    height: float

    @property
    def x1(self) -> float:
        """Return the right edge."""
        return self.x + self.width

    @property
    def y1(self) -> float:
        """Return the top edge."""
        return self.y + self.height

    @property
    def is_degenerate(self) -> bool:
        """Return whether the box has no area."""
        return self.width <= 0 or self.height <= 0

    def as_pdf_array(self) -> str:
        """Render the box as a PDF rectangle array `[llx lly urx ury]`."""
        return f"[{_fmt(self.x)} {_fmt(self.y)} {_fmt(self.x1)} {_fmt(self.y1)}]"

    @classmethod
    def from_corners(cls, llx: float, lly: float, urx: float, ury: float) -> CropBox:
        """Build a box from PDF rectangle corners, normalizing their order."""
        x0, x1 = sorted((llx, urx))
        y0, y1 = sorted((lly, ury))
        return cls(x=x0, y=y0, width=x1 - x0, height=y1 - y0)


class PageBoxes(BaseModel):
    """Media and crop boxes read back from a page."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    media_box: CropBox
    crop_box: CropBox


def _fmt(value: float) -> str:
    """Format a coordinate as a PDF real: fixed point, no exponent, at most 6 decimals."""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text
