"""Pytest marker auto-assignment by folder and shared PDF fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import fitz
import pytest

from pagecrop import logger
from pagecrop.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except Exception:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


def build_pdf(sizes: Sequence[tuple[float, float]]) -> bytes:
    """Build a PDF whose page N has the given size and the text `Page N`."""
    doc = fitz.open()
    try:
        for number, (width, height) in enumerate(sizes, start=1):
            page = doc.new_page(width=width, height=height)
            page.insert_text((72, 72), f"Page {number}", fontsize=12)
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Return a factory building in-memory PDFs."""
    return build_pdf


@pytest.fixture
def letter_pdf() -> bytes:
    """Five US Letter pages."""
    return build_pdf([(612, 792)] * 5)


@pytest.fixture
def settings() -> Settings:
    """Settings with console logging and default calibration."""
    return Settings(log_json=False, log_level="INFO")
