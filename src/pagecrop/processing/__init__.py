"""Crop box mapping and page-set planning."""

from pagecrop.processing.crop import CropTransformer, compute_crop_box, validate_crop_box
from pagecrop.processing.page_ranges import (
    commit_page_ranges,
    pages_to_crop,
    pages_to_keep,
    parse_page_ranges,
    select_span,
    toggle_page,
    validate_page_ranges,
)

__all__ = [
    "CropTransformer",
    "commit_page_ranges",
    "compute_crop_box",
    "pages_to_crop",
    "pages_to_keep",
    "parse_page_ranges",
    "select_span",
    "toggle_page",
    "validate_crop_box",
    "validate_page_ranges",
]
