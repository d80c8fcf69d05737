import math

import pytest

from frct_kernel import FractalVariant
from frct_viewport import DEFAULT_VIEWPORT, ExplorerState, Viewport


def test_default_window():
    assert DEFAULT_VIEWPORT == Viewport(top=-1.0, bottom=1.0, left=-2.0, right=1.0)
    assert DEFAULT_VIEWPORT.width == 3.0
    assert DEFAULT_VIEWPORT.height == 2.0
    assert DEFAULT_VIEWPORT.center == (-0.5, 0.0)


def test_pan_up_and_down():
    up = DEFAULT_VIEWPORT.pan_up()
    assert up.top == pytest.approx(-1.1)
    assert up.bottom == pytest.approx(0.9)
    assert (up.left, up.right) == (DEFAULT_VIEWPORT.left, DEFAULT_VIEWPORT.right)

    down = DEFAULT_VIEWPORT.pan_down()
    assert down.top == pytest.approx(-0.9)
    assert down.bottom == pytest.approx(1.1)


def test_pan_left_and_right():
    left = DEFAULT_VIEWPORT.pan_left()
    assert left.left == pytest.approx(-0.5 - 1.5 * 1.1)
    assert left.right == pytest.approx(-0.5 + 1.5 * 0.9)
    assert (left.top, left.bottom) == (DEFAULT_VIEWPORT.top, DEFAULT_VIEWPORT.bottom)

    right = DEFAULT_VIEWPORT.pan_right()
    assert right.left == pytest.approx(-0.5 - 1.5 * 0.9)
    assert right.right == pytest.approx(-0.5 + 1.5 * 1.1)


def test_pan_then_opposite_pan_follows_the_factors():
    moved = DEFAULT_VIEWPORT.pan_left().pan_right()
    cx = -0.5 - 1.5 * 0.1
    assert moved.left == pytest.approx(cx - 1.5 * 0.9)
    assert moved.right == pytest.approx(cx + 1.5 * 1.1)
    assert moved.width == pytest.approx(DEFAULT_VIEWPORT.width)


def test_zoom_in_then_out_keeps_center():
    viewport = DEFAULT_VIEWPORT.zoom_in()
    assert viewport.width == pytest.approx(3.0 * 0.9)
    assert viewport.height == pytest.approx(2.0 * 0.9)
    back = viewport.zoom_out()
    assert back.center == DEFAULT_VIEWPORT.center
    assert back.center == (-0.5, 0.0)
    assert back.width == pytest.approx(3.0 * 0.9 * 1.1)
    assert back.height == pytest.approx(2.0 * 0.9 * 1.1)


@pytest.mark.parametrize("viewport", [
    Viewport(top=-1.0, bottom=1.0, left=1.0, right=1.0),
    Viewport(top=1.0, bottom=-1.0, left=-2.0, right=1.0),
    Viewport(top=-1.0, bottom=1.0, left=-math.inf, right=1.0),
    Viewport(top=math.nan, bottom=1.0, left=-2.0, right=1.0),
])
def test_invalid_viewports_are_rejected(viewport):
    with pytest.raises(ValueError):
        viewport.validate()


def test_iteration_cap_floor():
    state = ExplorerState(max_iterations=20, iteration_step=10, min_iterations=10)
    assert state.decrease_iterations() is True
    assert state.max_iterations == 10
    assert state.decrease_iterations() is False
    assert state.max_iterations == 10
    assert state.increase_iterations() is True
    assert state.max_iterations == 20


def test_starting_cap_is_clamped_to_floor():
    state = ExplorerState(max_iterations=3, iteration_step=10, min_iterations=10)
    assert state.max_iterations == 10


def test_variant_cycling_wraps_both_ways():
    state = ExplorerState(variant_index=0)
    assert state.previous_variant() is True
    assert state.variant is FractalVariant.JULIA
    assert state.next_variant() is True
    assert state.variant is FractalVariant.MANDELBROT
    state.variant_index = 2
    state.next_variant()
    assert state.variant_index == 0


def test_reset_only_when_moved():
    state = ExplorerState()
    assert state.reset_viewport() is False
    state.zoom_in()
    state.pan_left()
    assert state.viewport != DEFAULT_VIEWPORT
    assert state.reset_viewport() is True
    assert state.viewport == DEFAULT_VIEWPORT


def test_state_moves_replace_the_viewport():
    state = ExplorerState()
    before = state.viewport
    assert state.pan_up() is True
    assert before == DEFAULT_VIEWPORT
    assert state.viewport == DEFAULT_VIEWPORT.pan_up()
