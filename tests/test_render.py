import re

import pytest

import frct_render
from frct_config import ANSI
from frct_glyph import GLYPH_SET
from frct_kernel import FractalVariant
from frct_render import FrameScheduler, render_row
from frct_sampler import sample_row
from frct_viewport import DEFAULT_VIEWPORT, Viewport

ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
COLOR = re.compile(r"\x1b\[(38|48);2;(\d+);(\d+);(\d+)m")
ROW_START = re.compile(r"\x1b\[(\d+);1H")


@pytest.fixture
def scheduler():
    with FrameScheduler(max_workers=4) as pool:
        yield pool


def test_uniform_row_sets_color_once():
    viewport = Viewport(top=-0.1, bottom=0.1, left=-0.1, right=0.1)
    text = render_row(0, 4, 2, viewport, 30, FractalVariant.MANDELBROT)
    assert text == ANSI.fg((0, 0, 0)) + "█" * 4


def test_row_emits_colors_only_on_change():
    width, height = 24, 8
    for row in range(height):
        pixels = sample_row(row, width, height, DEFAULT_VIEWPORT, 60, FractalVariant.MANDELBROT)
        text = render_row(row, width, height, DEFAULT_VIEWPORT, 60, FractalVariant.MANDELBROT)

        assert ESCAPE.sub("", text) == "".join(pixel.glyph for pixel in pixels)

        fg_changes = sum(1 for index, pixel in enumerate(pixels)
                         if index == 0 or pixel.foreground != pixels[index - 1].foreground)
        bg_changes = 0
        last_bg = None
        for pixel in pixels:
            if pixel.background is not None and pixel.background != last_bg:
                bg_changes += 1
                last_bg = pixel.background
        assert text.count("\x1b[38;2;") == fg_changes
        assert text.count("\x1b[48;2;") == bg_changes


def test_frame_rows_are_positioned_and_ordered(scheduler):
    width, height = 10, 6
    frame = scheduler.render_frame(width, height, DEFAULT_VIEWPORT, 50, FractalVariant.JULIA)

    assert frame.startswith("\x1b[1;1H")
    assert frame.endswith(ANSI.RESET)
    assert [int(n) for n in ROW_START.findall(frame)] == list(range(1, height + 1))

    body = frame[:-len(ANSI.RESET)]
    rows = ROW_START.split(body)[2::2]
    expected = [render_row(row, width, height, DEFAULT_VIEWPORT, 50, FractalVariant.JULIA)
                for row in range(height)]
    assert rows == expected


def test_single_threaded_and_pooled_frames_match():
    args = (12, 5, DEFAULT_VIEWPORT, 40, FractalVariant.BURNING_SHIP)
    with FrameScheduler(max_workers=1) as serial, FrameScheduler(max_workers=3) as pooled:
        assert serial.render_frame(*args) == pooled.render_frame(*args)


def test_zero_area_frame_is_only_a_reset(scheduler):
    assert scheduler.render_frame(0, 5, DEFAULT_VIEWPORT, 10, FractalVariant.MANDELBROT) == ANSI.RESET
    assert scheduler.render_frame(5, 0, DEFAULT_VIEWPORT, 10, FractalVariant.MANDELBROT) == ANSI.RESET


def test_end_to_end_small_frame(scheduler):
    frame = scheduler.render_frame(4, 2, DEFAULT_VIEWPORT, 100, FractalVariant.MANDELBROT)

    glyphs = ESCAPE.sub("", frame)
    assert len(glyphs) == 8
    assert set(glyphs) <= GLYPH_SET

    colors = COLOR.findall(frame)
    assert colors
    for _, r, g, b in colors:
        assert all(0 <= int(channel) <= 255 for channel in (r, g, b))


def test_row_failure_reaches_the_caller(scheduler, monkeypatch):
    def broken_row(*args):
        raise RuntimeError("row failed")

    monkeypatch.setattr(frct_render, "render_row", broken_row)
    with pytest.raises(RuntimeError, match="row failed"):
        scheduler.render_frame(4, 3, DEFAULT_VIEWPORT, 10, FractalVariant.MANDELBROT)


def test_stats_track_frames(scheduler):
    assert scheduler.get_stats() == {'status': 'No renders yet'}
    scheduler.render_frame(3, 2, DEFAULT_VIEWPORT, 10, FractalVariant.MANDELBROT)
    scheduler.render_frame(3, 2, DEFAULT_VIEWPORT, 10, FractalVariant.MANDELBROT)
    stats = scheduler.get_stats()
    assert stats['frames_rendered'] == 2
    assert stats['rows_rendered'] == 4
    assert stats['max_workers'] == 4


def test_default_scheduler_helpers():
    try:
        frame = frct_render.render_frame(2, 2, DEFAULT_VIEWPORT, 10, FractalVariant.MANDELBROT)
        assert frame.endswith(ANSI.RESET)
        assert frct_render.get_scheduler() is frct_render.get_scheduler()
    finally:
        frct_render.shutdown_scheduler()
