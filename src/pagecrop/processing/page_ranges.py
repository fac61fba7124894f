"""Page range expressions and page-set algebra (1-based page numbers)."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pagecrop import logger
from pagecrop.exceptions import SelectionError
from pagecrop.typing.models import PageSetValidation

if TYPE_CHECKING:
    from collections.abc import Iterable

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

EMPTY_OR_ALL_MESSAGE = "Please select at least one page to remove, but not all pages."


def _leading_int(text: str) -> int | None:
    """Parse the leading integer of a token, ignoring trailing garbage.

    Args:
        text (str): Raw token such as `"3"`, `" 12 "` or `"4abc"`.

    Returns:
        int | None: Parsed value, or None when the token does not start with digits.
    """
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def _iter_tokens(text: str) -> Iterable[tuple[int | None, int | None]]:
    """Yield `(start, end)` bounds per comma-separated token.

    Single numbers yield `(n, n)`. For dashed tokens, the first two parts are used.
    """
    for raw in text.split(","):
        token = raw.strip()
        if not token:
            continue
        if "-" in token:
            parts = token.split("-")
            yield _leading_int(parts[0]), _leading_int(parts[1])
        else:
            value = _leading_int(token)
            yield value, value


def parse_page_ranges(text: str, page_count: int) -> list[int]:
    """Parse a range expression into sorted, unique, in-bounds page numbers.

    Tokens are single pages (`"3"`) or inclusive spans in either order
    (`"7-9"`, `"9-7"`). Malformed and out-of-range values are dropped.

    Args:
        text (str): Comma-separated range expression.
        page_count (int): Number of pages in the document.

    Returns:
        list[int]: Selected page numbers in ascending order.
    """
    if not text.strip():
        return []

    pages: set[int] = set()
    for start, end in _iter_tokens(text):
        if start is None or end is None:
            continue
        low, high = min(start, end), max(start, end)
        pages.update(range(max(low, 1), min(high, page_count) + 1))
    return sorted(pages)


def validate_page_ranges(text: str, page_count: int) -> PageSetValidation:
    """Find the highest value above the page count in a range expression.

    Args:
        text (str): Comma-separated range expression.
        page_count (int): Number of pages in the document.

    Returns:
        PageSetValidation: `ok=True`, or the offending value with a user-facing message.
    """
    highest: int | None = None
    for start, end in _iter_tokens(text):
        for value in (start, end):
            if value is not None and value > page_count:
                highest = value if highest is None else max(highest, value)

    if highest is None:
        return PageSetValidation(ok=True)
    return PageSetValidation(
        ok=False,
        offending_value=highest,
        message=(
            f"Invalid page number(s): This PDF only has {page_count} pages, but you entered page {highest}."
        ),
    )


def commit_page_ranges(text: str, page_count: int) -> list[int]:
    """Validate then parse a range expression.

    Raises:
        SelectionError: If any value exceeds the page count.

    Returns:
        list[int]: Selected page numbers in ascending order.
    """
    validation = validate_page_ranges(text, page_count)
    if not validation.ok:
        logger.warning(
            "Rejected page range",
            extra={"page_count": page_count, "offending_value": validation.offending_value},
        )
        raise SelectionError(message=validation.message or "", offending_value=validation.offending_value)
    return parse_page_ranges(text, page_count)


def toggle_page(selected: Iterable[int], page_number: int) -> list[int]:
    """Add or remove one page from a selection, keeping it sorted."""
    pages = set(selected)
    pages.symmetric_difference_update({page_number})
    return sorted(pages)


def select_span(selected: Iterable[int], anchor: int, page_number: int) -> list[int]:
    """Add the inclusive span between a previously clicked page and `page_number`."""
    low, high = min(anchor, page_number), max(anchor, page_number)
    return sorted(set(selected).union(range(low, high + 1)))


def pages_to_keep(pages_to_remove: Iterable[int], page_count: int) -> list[int]:
    """Compute the retained pages for a removal request.

    Args:
        pages_to_remove (Iterable[int]): 1-based pages to drop.
        page_count (int): Number of pages in the document.

    Raises:
        SelectionError: If nothing valid is removed, a page is out of range, or
            every page would be removed.

    Returns:
        list[int]: Retained pages in original order.
    """
    removed = set(pages_to_remove)
    out_of_range = sorted(page for page in removed if not 1 <= page <= page_count)
    if out_of_range:
        raise SelectionError(
            message=f"Invalid page number(s): This PDF only has {page_count} pages, but you entered page {out_of_range[-1]}.",
            offending_value=out_of_range[-1],
        )
    if not removed or len(removed) >= page_count:
        raise SelectionError(message=EMPTY_OR_ALL_MESSAGE)
    return [page for page in range(1, page_count + 1) if page not in removed]


def pages_to_crop(page_count: int, *, current_page: int, crop_all_pages: bool) -> list[int]:
    """Return the pages a crop applies to.

    Raises:
        SelectionError: If `current_page` is outside the document.

    Returns:
        list[int]: 1-based page numbers in order.
    """
    if crop_all_pages:
        return list(range(1, page_count + 1))
    if not 1 <= current_page <= page_count:
        raise SelectionError(
            message=f"Page {current_page} does not exist in a {page_count}-page document",
            offending_value=current_page,
        )
    return [current_page]
