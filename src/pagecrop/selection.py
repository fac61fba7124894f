"""Pointer-driven rectangular selection state machine (display pixel space)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagecrop import logger
from pagecrop.settings import Settings, get_settings
from pagecrop.typing.enums import Handle, SelectionState
from pagecrop.typing.models import SelectionRect

if TYPE_CHECKING:
    from pagecrop.typing.models import PageGeometry

# Hit-test order when handle boxes overlap on small selections.
_HANDLE_ORDER = (
    Handle.TOP_LEFT,
    Handle.TOP_RIGHT,
    Handle.BOTTOM_LEFT,
    Handle.BOTTOM_RIGHT,
    Handle.TOP,
    Handle.RIGHT,
    Handle.BOTTOM,
    Handle.LEFT,
)

HandleBox = tuple[float, float, float, float]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def handle_centers(rect: SelectionRect) -> dict[Handle, tuple[float, float]]:
    """Return the center point of every resize handle of a rectangle."""
    mid_x = rect.x + rect.width / 2
    mid_y = rect.y + rect.height / 2
    return {
        Handle.TOP_LEFT: (rect.x, rect.y),
        Handle.TOP_RIGHT: (rect.right, rect.y),
        Handle.BOTTOM_LEFT: (rect.x, rect.bottom),
        Handle.BOTTOM_RIGHT: (rect.right, rect.bottom),
        Handle.TOP: (mid_x, rect.y),
        Handle.RIGHT: (rect.right, mid_y),
        Handle.BOTTOM: (mid_x, rect.bottom),
        Handle.LEFT: (rect.x, mid_y),
    }


def handle_boxes(rect: SelectionRect, size: float) -> dict[Handle, HandleBox]:
    """Return `(x, y, width, height)` hit boxes centered on each handle.

    Args:
        rect: Locked selection.
        size: Side of the square hit box in pixels.

    Returns:
        dict[Handle, HandleBox]: Hit boxes keyed by handle.
    """
    half = size / 2
    return {handle: (cx - half, cy - half, size, size) for handle, (cx, cy) in handle_centers(rect).items()}


def resize(rect: SelectionRect, handle: Handle, x: float, y: float) -> tuple[float, float, float, float]:
    """Apply a handle drag to a rectangle, keeping the opposite anchor fixed.

    The result may have negative width or height when the pointer crossed the
    opposite edge; callers normalize it.

    Args:
        rect: Rectangle before the drag step.
        handle: Dragged handle (not `MOVE`).
        x: Pointer x in pixels.
        y: Pointer y in pixels.

    Returns:
        tuple[float, float, float, float]: Raw `(x, y, width, height)`.
    """
    new_x, new_y, new_width, new_height = rect.x, rect.y, rect.width, rect.height
    match handle:
        case Handle.TOP_LEFT:
            new_x, new_y = x, y
            new_width = rect.width + (rect.x - x)
            new_height = rect.height + (rect.y - y)
        case Handle.TOP_RIGHT:
            new_y = y
            new_width = x - rect.x
            new_height = rect.height + (rect.y - y)
        case Handle.BOTTOM_LEFT:
            new_x = x
            new_width = rect.width + (rect.x - x)
            new_height = y - rect.y
        case Handle.BOTTOM_RIGHT:
            new_width = x - rect.x
            new_height = y - rect.y
        case Handle.TOP:
            new_y = y
            new_height = rect.height + (rect.y - y)
        case Handle.RIGHT:
            new_width = x - rect.x
        case Handle.BOTTOM:
            new_height = y - rect.y
        case Handle.LEFT:
            new_x = x
            new_width = rect.width + (rect.x - x)
        case Handle.MOVE:
            raise ValueError("MOVE is not a resize handle")
    return new_x, new_y, new_width, new_height


def normalize(
    x: float,
    y: float,
    width: float,
    height: float,
    *,
    bounds: tuple[float, float],
) -> SelectionRect:
    """Flip negative extents and clamp a raw rectangle into the page bounds.

    Args:
        x: Raw left edge.
        y: Raw top edge.
        width: Raw width, possibly negative.
        height: Raw height, possibly negative.
        bounds: `(display_width, display_height)` of the page.

    Returns:
        SelectionRect: Rectangle with non-negative size inside the bounds.
    """
    max_width, max_height = bounds
    if width < 0:
        x += width
        width = abs(width)
    if height < 0:
        y += height
        height = abs(height)

    width = min(width, max_width)
    height = min(height, max_height)
    x = _clamp(x, 0.0, max_width - width)
    y = _clamp(y, 0.0, max_height - height)
    return SelectionRect(x=x, y=y, width=width, height=height)


class SelectionModel:
    """Track an in-progress or locked crop selection on the current page.

    States follow `SelectionState`: pointer-down starts drawing (or adjusting when
    a locked selection's handle or body is hit), pointer-move updates the
    rectangle, pointer-up locks it when both sides exceed the minimum size.
    """

    def __init__(self, geometry: PageGeometry, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._bounds = (geometry.display_width, geometry.display_height)
        self._state = SelectionState.IDLE
        self._crop_mode = False
        self._rect: SelectionRect | None = None
        self._anchor: tuple[float, float] | None = None
        self._handle: Handle | None = None
        self._last_point: tuple[float, float] | None = None

    @property
    def state(self) -> SelectionState:
        """Return the current state."""
        return self._state

    @property
    def crop_mode(self) -> bool:
        """Return whether pointer events are interpreted as crop gestures."""
        return self._crop_mode

    @property
    def rect(self) -> SelectionRect | None:
        """Return the current rectangle in any state."""
        return self._rect

    @property
    def active_handle(self) -> Handle | None:
        """Return the handle being dragged while adjusting."""
        return self._handle

    @property
    def bounds(self) -> tuple[float, float]:
        """Return `(display_width, display_height)` of the current page."""
        return self._bounds

    @property
    def locked_selection(self) -> SelectionRect | None:
        """Return the rectangle when it is locked and eligible for cropping."""
        if self._state is SelectionState.LOCKED:
            return self._rect
        return None

    def enter_crop_mode(self) -> None:
        """Start interpreting pointer events as crop gestures."""
        self._crop_mode = True
        self._reset()

    def exit_crop_mode(self) -> None:
        """Stop cropping and discard any selection."""
        self._crop_mode = False
        self._reset()

    def toggle_crop_mode(self) -> bool:
        """Flip crop mode and return the new value."""
        if self._crop_mode:
            self.exit_crop_mode()
        else:
            self.enter_crop_mode()
        return self._crop_mode

    def cancel(self) -> None:
        """Discard the selection; crop mode stays active."""
        self._reset()

    def complete(self) -> None:
        """Clear the selection after a crop was applied."""
        self._reset()

    def set_geometry(self, geometry: PageGeometry) -> None:
        """Adopt new page bounds (page or scale change) and re-clamp the rectangle."""
        self._bounds = (geometry.display_width, geometry.display_height)
        if self._rect is not None:
            self._rect = normalize(
                self._rect.x,
                self._rect.y,
                self._rect.width,
                self._rect.height,
                bounds=self._bounds,
            )

    def hit_test(self, x: float, y: float) -> Handle | None:
        """Return the handle (or `MOVE`) under a point of the locked selection."""
        if self._state is not SelectionState.LOCKED or self._rect is None:
            return None
        boxes = handle_boxes(self._rect, self._settings.handle_size_px)
        for handle in _HANDLE_ORDER:
            box_x, box_y, box_width, box_height = boxes[handle]
            if box_x <= x <= box_x + box_width and box_y <= y <= box_y + box_height:
                return handle
        if self._rect.contains(x, y):
            return Handle.MOVE
        return None

    def pointer_down(self, x: float, y: float) -> SelectionState:
        """Handle a pointer press in display pixels relative to the page."""
        if not self._crop_mode:
            return self._state

        point = self._clamp_point(x, y)
        handle = self.hit_test(*point)
        if handle is not None:
            self._state = SelectionState.ADJUSTING
            self._handle = handle
            self._last_point = point
            return self._state

        self._state = SelectionState.DRAWING
        self._handle = None
        self._anchor = point
        self._rect = SelectionRect(x=point[0], y=point[1], width=0.0, height=0.0)
        return self._state

    def pointer_move(self, x: float, y: float) -> SelectionState:
        """Handle a pointer drag; ignored unless drawing or adjusting."""
        point = self._clamp_point(x, y)
        if self._state is SelectionState.DRAWING and self._anchor is not None:
            anchor_x, anchor_y = self._anchor
            self._rect = SelectionRect(
                x=min(anchor_x, point[0]),
                y=min(anchor_y, point[1]),
                width=abs(point[0] - anchor_x),
                height=abs(point[1] - anchor_y),
            )
        elif self._state is SelectionState.ADJUSTING and self._rect is not None and self._handle is not None:
            self._rect = self._adjust(self._rect, self._handle, point)
        return self._state

    def pointer_up(self) -> SelectionState:
        """Handle a pointer release, locking or discarding the rectangle."""
        if self._state is SelectionState.DRAWING:
            rect = self._rect
            minimum = self._settings.min_selection_px
            if rect is not None and rect.width > minimum and rect.height > minimum:
                self._state = SelectionState.LOCKED
            else:
                logger.debug("Selection too small, discarded", extra={"minimum_px": minimum})
                self._reset()
        elif self._state is SelectionState.ADJUSTING:
            self._state = SelectionState.LOCKED
            self._handle = None
            self._last_point = None
        self._anchor = None
        return self._state

    def _adjust(self, rect: SelectionRect, handle: Handle, point: tuple[float, float]) -> SelectionRect:
        if handle is Handle.MOVE:
            last_x, last_y = self._last_point or point
            self._last_point = point
            raw = (rect.x + point[0] - last_x, rect.y + point[1] - last_y, rect.width, rect.height)
        else:
            raw = resize(rect, handle, *point)
        return normalize(*raw, bounds=self._bounds)

    def _clamp_point(self, x: float, y: float) -> tuple[float, float]:
        width, height = self._bounds
        return _clamp(x, 0.0, width), _clamp(y, 0.0, height)

    def _reset(self) -> None:
        self._state = SelectionState.IDLE
        self._rect = None
        self._anchor = None
        self._handle = None
        self._last_point = None
