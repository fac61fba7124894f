from __future__ import annotations

import pytest

from pagecrop.geometry import (
    PageGeometryModel,
    clamp_scale,
    detect_paper_format,
    measure,
    to_points,
    zoom_in,
    zoom_out,
)
from pagecrop.settings import Settings
from pagecrop.typing.models import PageGeometry, PageSize


class _FakeViewport:
    def __init__(self, width: float, height: float) -> None:
        self.calls: list[float] = []
        self._size = PageSize(width=width, height=height)

    def get_viewport(self, *, scale: float) -> PageSize:
        self.calls.append(scale)
        return PageSize(width=self._size.width * scale, height=self._size.height * scale)


def test_to_points_uses_96_dpi_reference() -> None:
    assert to_points(96, 1.0) == 72


def test_to_points_is_linear_and_inverse_in_scale() -> None:
    assert to_points(192, 1.0) == pytest.approx(2 * to_points(96, 1.0))
    assert to_points(96, 2.0) == pytest.approx(to_points(96, 1.0) / 2)
    assert to_points(0, 1.5) == 0


def test_to_points_rejects_non_positive_scale() -> None:
    with pytest.raises(ValueError, match="scale"):
        to_points(10, 0)


def test_measure_reads_viewport_at_unit_scale() -> None:
    viewport = _FakeViewport(612, 792)

    size = measure(viewport)

    assert viewport.calls == [1.0]
    assert (size.width, size.height) == (612, 792)


def test_page_geometry_display_size() -> None:
    geometry = PageGeometry(natural_width=612, natural_height=792, display_scale=1.5)

    assert geometry.display_width == pytest.approx(918)
    assert geometry.display_height == pytest.approx(1188)


def test_page_geometry_rejects_non_positive_scale() -> None:
    with pytest.raises(ValueError):
        PageGeometry(natural_width=612, natural_height=792, display_scale=0)


def test_geometry_model_caches_measurements() -> None:
    model = PageGeometryModel(Settings())
    viewport = _FakeViewport(595, 842)

    model.measure(1, viewport)
    model.measure(1, viewport)

    assert viewport.calls == [1.0]
    assert model.geometry(1, 2.0).display_width == pytest.approx(1190)


def test_geometry_model_requires_measured_page() -> None:
    model = PageGeometryModel(Settings())
    with pytest.raises(KeyError):
        model.geometry(3, 1.0)


def test_geometry_model_uses_configured_dpi() -> None:
    model = PageGeometryModel(Settings(screen_dpi=72))
    assert model.to_points(100, 1.0) == pytest.approx(100)


@pytest.mark.parametrize(
    ("scale", "expected"),
    [(0.1, 0.5), (3.0, 2.0), (1.04, 1.0), (1.26, 1.3)],
)
def test_clamp_scale(scale: float, expected: float) -> None:
    assert clamp_scale(scale, Settings()) == expected


def test_zoom_steps_are_bounded() -> None:
    settings = Settings()

    assert zoom_in(1.0, settings) == 1.1
    assert zoom_in(2.0, settings) == 2.0
    assert zoom_out(0.5, settings) == 0.5
    assert zoom_out(0.7, settings) == 0.6


@pytest.mark.parametrize(
    ("width", "height", "expected"),
    [
        (612, 792, "Letter (Portrait)"),
        (842, 595, "A4 (Landscape)"),
        (597, 840, "A4 (Portrait)"),
        (612, 1008, "Legal (Portrait)"),
        (500, 500, "Custom (500 × 500 pts)"),
    ],
)
def test_detect_paper_format(width: float, height: float, expected: str) -> None:
    assert detect_paper_format(width, height) == expected
