"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class SelectionState(_EnumMixin):
    """Lifecycle of the on-screen crop selection."""

    IDLE = "idle"
    DRAWING = "drawing"
    LOCKED = "locked"
    ADJUSTING = "adjusting"


class Handle(_EnumMixin):
    """Grab points of a locked selection; `MOVE` is the rectangle body."""

    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"
    MOVE = "move"


class RebuildMode(_EnumMixin):
    """Document rebuild operation."""

    CROP = "crop"
    REMOVE = "remove"


class Orientation(_EnumMixin):
    """Page orientation derived from natural size."""

    PORTRAIT = "Portrait"
    LANDSCAPE = "Landscape"
