from __future__ import annotations

import pytest

from pagecrop.exceptions import SelectionError
from pagecrop.processing.crop import CropTransformer, compute_crop_box, validate_crop_box
from pagecrop.settings import Settings
from pagecrop.typing.models import CropBox, PageGeometry, PageSize, SelectionRect

LETTER = PageGeometry(natural_width=612, natural_height=792, display_scale=1.5)


def test_compute_crop_box_applies_scale_flip_and_padding() -> None:
    selection = SelectionRect(x=150, y=300, width=450, height=600)

    box = compute_crop_box(selection, LETTER)

    assert box.x == pytest.approx(70)
    assert box.y == pytest.approx(192)
    assert box.width == pytest.approx(299)
    assert box.height == pytest.approx(400)


def test_left_pad_never_goes_below_zero() -> None:
    geometry = PageGeometry(natural_width=612, natural_height=792, display_scale=1.0)

    box = compute_crop_box(SelectionRect(x=15, y=0, width=100, height=100), geometry)

    assert box.x == 0
    assert box.width == pytest.approx(99)


def test_width_is_capped_at_remaining_page_width() -> None:
    geometry = PageGeometry(natural_width=612, natural_height=792, display_scale=1.0)

    box = compute_crop_box(SelectionRect(x=0, y=0, width=612, height=792), geometry, right_shrink=0)

    assert box.x == 0
    assert box.width == pytest.approx(612)
    assert box.y == pytest.approx(0)
    assert box.height == pytest.approx(792)


@pytest.mark.parametrize(
    ("selection", "scale"),
    [
        (SelectionRect(x=0, y=0, width=918, height=1188), 1.5),
        (SelectionRect(x=40, y=900, width=300, height=288), 1.5),
        (SelectionRect(x=600, y=10, width=12, height=700), 1.0),
        (SelectionRect(x=100, y=100, width=50, height=50), 0.5),
    ],
)
def test_crop_box_stays_inside_page_for_in_bounds_selection(selection: SelectionRect, scale: float) -> None:
    geometry = PageGeometry(natural_width=612, natural_height=792, display_scale=scale)

    box = compute_crop_box(selection, geometry)

    assert box.x >= 0
    assert box.y >= 0
    assert box.x + box.width <= 612 + 1e-9
    assert box.y + box.height <= 792 + 1e-9


@pytest.mark.parametrize("scale", [0.8, 0.9])
def test_selection_touching_bottom_edge_maps_to_zero(scale: float) -> None:
    geometry = PageGeometry(natural_width=612, natural_height=1008, display_scale=scale)
    selection = SelectionRect(x=100, y=400, width=300, height=geometry.display_height - 400)

    box = compute_crop_box(selection, geometry)

    assert box.y >= 0
    assert box.y == pytest.approx(0, abs=1e-9)
    assert box.y + box.height == pytest.approx(1008 - 400 / scale)
    assert "e" not in box.as_pdf_array()


def test_transformer_uses_configured_constants() -> None:
    transformer = CropTransformer(Settings(crop_left_pad_pt=0, crop_right_shrink_pt=0))

    box = transformer.transform(SelectionRect(x=150, y=300, width=450, height=600), LETTER)

    assert box.x == pytest.approx(100)
    assert box.width == pytest.approx(300)


def test_transform_for_page_clamps_selection_to_smaller_page() -> None:
    transformer = CropTransformer(Settings())

    box = transformer.transform_for_page(
        SelectionRect(x=100, y=100, width=400, height=500),
        PageSize(width=300, height=400),
        1.0,
    )

    assert box == CropBox(x=0, y=0, width=299, height=400)


def test_validate_crop_box_rejects_degenerate_box() -> None:
    with pytest.raises(SelectionError, match="page 3"):
        validate_crop_box(CropBox(x=10, y=10, width=0, height=5), page_number=3)

    box = CropBox(x=10, y=10, width=1, height=5)
    assert validate_crop_box(box) is box
