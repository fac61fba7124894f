from __future__ import annotations

import sys
from subprocess import run as subprocess_run  # noqa: S404
from typing import TYPE_CHECKING

import fitz
import pytest

from pagecrop.document import load_document_file

if TYPE_CHECKING:
    from pathlib import Path
    from subprocess import CompletedProcess  # noqa: S404


def _cli(cwd: Path, *args: str) -> CompletedProcess[str]:
    return subprocess_run(  # noqa: S603
        [sys.executable, "-m", "pagecrop.cli", *args],
        capture_output=True,
        text=True,
        check=False,
        cwd=cwd,
    )


@pytest.fixture
def input_pdf(tmp_path: Path, letter_pdf: bytes) -> Path:
    path = tmp_path / "report.pdf"
    path.write_bytes(letter_pdf)
    return path


def test_info_lists_pages_and_formats(tmp_path: Path, input_pdf: Path) -> None:
    result = _cli(tmp_path, "info", "--input", str(input_pdf))

    assert result.returncode == 0, result.stderr
    assert "report.pdf: 5 page(s)" in result.stdout
    assert "page 5: 612 x 792 pt, Letter (Portrait)" in result.stdout


def test_crop_writes_default_output_name(tmp_path: Path, input_pdf: Path) -> None:
    result = _cli(tmp_path, "crop", "--input", str(input_pdf), "--selection", "150,300,450,600", "--scale", "1.5")

    assert result.returncode == 0, result.stderr
    cropped = load_document_file(tmp_path / "cropped-report.pdf")
    assert cropped.page_count == 5
    box = cropped.read_page_boxes(3).crop_box
    assert box.x == pytest.approx(70, rel=1e-7, abs=1e-6)
    assert box.y == pytest.approx(192, rel=1e-7, abs=1e-6)
    assert box.width == pytest.approx(299, rel=1e-7, abs=1e-6)
    assert box.height == pytest.approx(400, rel=1e-7, abs=1e-6)


def test_remove_writes_requested_output(tmp_path: Path, input_pdf: Path, letter_pdf: bytes) -> None:
    output = tmp_path / "out" / "trimmed.pdf"

    result = _cli(tmp_path, "remove", "--input", str(input_pdf), "--pages", "1,3-4", "--output", str(output))

    assert result.returncode == 0, result.stderr
    with fitz.open(output) as doc:
        assert [page.get_text().strip() for page in doc] == ["Page 2", "Page 5"]
    assert input_pdf.read_bytes() == letter_pdf


def test_remove_rejects_pages_beyond_document(tmp_path: Path, input_pdf: Path) -> None:
    result = _cli(tmp_path, "remove", "--input", str(input_pdf), "--pages", "4-9")

    assert result.returncode == 1
    assert not (tmp_path / "modified-report.pdf").exists()


def test_crop_rejects_malformed_selection(tmp_path: Path, input_pdf: Path) -> None:
    result = _cli(tmp_path, "crop", "--input", str(input_pdf), "--selection", "1,2,3")

    assert result.returncode == 2
    assert "X,Y,WIDTH,HEIGHT" in result.stderr
