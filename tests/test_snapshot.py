import pytest
from PIL import Image

from frct_config import ExplorerConfig, reload_config
from frct_kernel import FractalVariant
from frct_sampler import Pixel
from frct_snapshot import frame_to_image, render_image, save_snapshot
from frct_viewport import DEFAULT_VIEWPORT

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def test_quadrant_cell_is_painted_by_mask():
    image = frame_to_image([[Pixel("▘", RED, BLUE)]], cell_pixels=4)
    assert image.size == (4, 4)
    assert image.getpixel((0, 0)) == RED
    assert image.getpixel((1, 1)) == RED
    assert image.getpixel((3, 0)) == BLUE
    assert image.getpixel((0, 3)) == BLUE
    assert image.getpixel((3, 3)) == BLUE


def test_missing_background_paints_black():
    image = frame_to_image([[Pixel("▄", RED, None), Pixel("█", BLUE, None)]], cell_pixels=2)
    assert image.size == (4, 2)
    assert image.getpixel((0, 0)) == (0, 0, 0)
    assert image.getpixel((0, 1)) == RED
    assert image.getpixel((2, 0)) == BLUE
    assert image.getpixel((3, 1)) == BLUE


def test_render_image_size():
    image = render_image(4, 2, DEFAULT_VIEWPORT, 50, FractalVariant.MANDELBROT, cell_pixels=8)
    assert image.mode == "RGB"
    assert image.size == (32, 16)


def test_render_image_rejects_empty_frames():
    with pytest.raises(ValueError):
        render_image(0, 2, DEFAULT_VIEWPORT, 50, FractalVariant.MANDELBROT)


def test_save_snapshot_to_explicit_path(tmp_path):
    target = tmp_path / "view.png"
    path = save_snapshot(5, 3, DEFAULT_VIEWPORT, 30, FractalVariant.JULIA, path=target)
    assert path == target
    with Image.open(path) as image:
        assert image.format == "PNG"


def test_save_snapshot_default_name(tmp_path):
    assert reload_config(ExplorerConfig(snapshot_dir=str(tmp_path / "shots"))) is True
    try:
        path = save_snapshot(3, 2, DEFAULT_VIEWPORT, 20, FractalVariant.BURNING_SHIP)
    finally:
        reload_config()
    assert path.parent == tmp_path / "shots"
    assert path.name.startswith("frct_burning-ship_")
    assert path.exists()
