from __future__ import annotations

import pytest

from pagecrop.selection import SelectionModel, handle_boxes, normalize, resize
from pagecrop.settings import Settings
from pagecrop.typing.enums import Handle, SelectionState
from pagecrop.typing.models import PageGeometry, SelectionRect


def _geometry(scale: float = 1.0) -> PageGeometry:
    return PageGeometry(natural_width=612, natural_height=792, display_scale=scale)


def _locked_model() -> SelectionModel:
    model = SelectionModel(_geometry(), Settings())
    model.enter_crop_mode()
    model.pointer_down(100, 100)
    model.pointer_move(300, 250)
    assert model.pointer_up() is SelectionState.LOCKED
    return model


def test_pointer_events_are_ignored_outside_crop_mode() -> None:
    model = SelectionModel(_geometry(), Settings())

    assert model.pointer_down(10, 10) is SelectionState.IDLE
    assert model.rect is None


def test_drawing_tracks_bounding_box_of_drag() -> None:
    model = SelectionModel(_geometry(), Settings())
    model.enter_crop_mode()

    assert model.pointer_down(300, 250) is SelectionState.DRAWING
    model.pointer_move(100, 100)

    assert model.rect == SelectionRect(x=100, y=100, width=200, height=150)


def test_drawing_clamps_to_page_bounds() -> None:
    model = SelectionModel(_geometry(), Settings())
    model.enter_crop_mode()

    model.pointer_down(500, 700)
    model.pointer_move(900, 1000)

    assert model.rect == SelectionRect(x=500, y=700, width=112, height=92)


def test_release_locks_selection_larger_than_minimum() -> None:
    model = _locked_model()

    assert model.locked_selection == SelectionRect(x=100, y=100, width=200, height=150)


@pytest.mark.parametrize(("end_x", "end_y"), [(110, 200), (200, 110), (105, 105)])
def test_release_discards_selection_not_larger_than_minimum(end_x: float, end_y: float) -> None:
    model = SelectionModel(_geometry(), Settings())
    model.enter_crop_mode()

    model.pointer_down(100, 100)
    model.pointer_move(end_x, end_y)

    assert model.pointer_up() is SelectionState.IDLE
    assert model.rect is None
    assert model.locked_selection is None


@pytest.mark.parametrize(
    ("x", "y", "expected"),
    [
        (100, 100, Handle.TOP_LEFT),
        (304, 96, Handle.TOP_RIGHT),
        (100, 250, Handle.BOTTOM_LEFT),
        (300, 250, Handle.BOTTOM_RIGHT),
        (200, 100, Handle.TOP),
        (300, 175, Handle.RIGHT),
        (200, 250, Handle.BOTTOM),
        (100, 175, Handle.LEFT),
        (150, 150, Handle.MOVE),
        (400, 400, None),
    ],
)
def test_hit_test_on_locked_selection(x: float, y: float, expected: Handle | None) -> None:
    assert _locked_model().hit_test(x, y) is expected


def test_pointer_down_outside_locked_selection_starts_new_drawing() -> None:
    model = _locked_model()

    assert model.pointer_down(400, 400) is SelectionState.DRAWING
    assert model.rect == SelectionRect(x=400, y=400, width=0, height=0)


def test_right_handle_only_changes_width() -> None:
    model = _locked_model()

    assert model.pointer_down(300, 175) is SelectionState.ADJUSTING
    assert model.active_handle is Handle.RIGHT
    model.pointer_move(400, 10)

    assert model.rect == SelectionRect(x=100, y=100, width=300, height=150)
    assert model.pointer_up() is SelectionState.LOCKED
    assert model.active_handle is None


def test_top_left_handle_updates_all_edges() -> None:
    model = _locked_model()

    model.pointer_down(100, 100)
    model.pointer_move(50, 60)

    assert model.rect == SelectionRect(x=50, y=60, width=250, height=190)


def test_resize_across_opposite_edge_flips_origin() -> None:
    model = _locked_model()

    model.pointer_down(100, 175)
    model.pointer_move(350, 175)

    assert model.rect == SelectionRect(x=300, y=100, width=50, height=150)


def test_move_translates_and_clamps_to_page() -> None:
    model = _locked_model()

    model.pointer_down(150, 150)
    model.pointer_move(200, 170)
    assert model.rect == SelectionRect(x=150, y=120, width=200, height=150)

    model.pointer_move(700, 170)
    assert model.rect == SelectionRect(x=412, y=120, width=200, height=150)


def test_cancel_and_exit_clear_selection() -> None:
    model = _locked_model()
    model.cancel()
    assert model.state is SelectionState.IDLE
    assert model.rect is None
    assert model.crop_mode is True

    model = _locked_model()
    assert model.toggle_crop_mode() is False
    assert model.rect is None
    assert model.state is SelectionState.IDLE


def test_set_geometry_reclamps_selection() -> None:
    model = SelectionModel(_geometry(), Settings())
    model.enter_crop_mode()
    model.pointer_down(400, 600)
    model.pointer_move(600, 750)
    model.pointer_up()

    model.set_geometry(_geometry(0.5))

    assert model.bounds == (306, 396)
    assert model.rect == SelectionRect(x=106, y=246, width=200, height=150)


def test_handle_boxes_are_centered() -> None:
    boxes = handle_boxes(SelectionRect(x=10, y=20, width=100, height=50), 10)

    assert boxes[Handle.TOP_LEFT] == (5, 15, 10, 10)
    assert boxes[Handle.BOTTOM] == (55, 65, 10, 10)
    assert Handle.MOVE not in boxes


def test_resize_rejects_move_handle() -> None:
    with pytest.raises(ValueError, match="MOVE"):
        resize(SelectionRect(x=0, y=0, width=20, height=20), Handle.MOVE, 5, 5)


def test_normalize_flips_and_clamps() -> None:
    rect = normalize(100, 100, -40, -30, bounds=(612, 792))
    assert rect == SelectionRect(x=60, y=70, width=40, height=30)

    rect = normalize(-10, 780, 50, 50, bounds=(612, 792))
    assert rect == SelectionRect(x=0, y=742, width=50, height=50)
