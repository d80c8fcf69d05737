#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Snapshot Export
===========================================
Copyright (c) 2025 PNGN-Tec LLC

Paints rendered cells into a PIL image so a view can be saved as PNG or
strung into a GIF. Each terminal cell becomes a square of cell_pixels and
each of its quadrants is filled with the foreground color when the glyph
covers it, otherwise with the background (black when the cell has none).
"""

import time
import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
from PIL import Image

from frct_config import INTERIOR_COLOR, SUBPIXELS, get_config
from frct_glyph import GLYPH_MASKS
from frct_kernel import FractalVariant
from frct_sampler import Pixel, sample_grid
from frct_viewport import Viewport

logger = logging.getLogger('FRCT.Snapshot')


def frame_to_image(pixels: List[List[Pixel]], cell_pixels: int = 8) -> Image.Image:
    """
    Paint a grid of Pixels into an RGB image.

    Args:
        pixels: Rows of Pixel values, all rows the same length
        cell_pixels: Edge length of one cell in image pixels (even)

    Returns:
        PIL Image of size (columns * cell_pixels, rows * cell_pixels)
    """
    rows = len(pixels)
    columns = len(pixels[0]) if rows else 0
    half = cell_pixels // SUBPIXELS

    buffer = np.zeros((max(rows, 1) * cell_pixels, max(columns, 1) * cell_pixels, 3),
                      dtype=np.uint8)

    for row, line in enumerate(pixels):
        for column, pixel in enumerate(line):
            mask = GLYPH_MASKS[pixel.glyph]
            background = pixel.background if pixel.background is not None else INTERIOR_COLOR
            top = row * cell_pixels
            left = column * cell_pixels
            for sy in range(SUBPIXELS):
                for sx in range(SUBPIXELS):
                    color = pixel.foreground if mask[sy][sx] else background
                    buffer[top + sy * half:top + (sy + 1) * half,
                           left + sx * half:left + (sx + 1) * half] = color

    return Image.fromarray(buffer)


def render_image(width: int, height: int, viewport: Viewport,
                 max_iterations: int, variant: FractalVariant,
                 cell_pixels: Optional[int] = None) -> Image.Image:
    """Sample a width x height cell frame and paint it"""
    if width <= 0 or height <= 0:
        raise ValueError("Snapshot size must be positive")
    cell_pixels = cell_pixels or get_config().rendering.snapshot_cell_pixels
    return frame_to_image(sample_grid(width, height, viewport, max_iterations, variant),
                          cell_pixels)


def save_snapshot(width: int, height: int, viewport: Viewport,
                  max_iterations: int, variant: FractalVariant,
                  path: Optional[Path] = None) -> Path:
    """
    Render the view and save it as PNG.

    Args:
        path: Output file; a timestamped name in the snapshot directory if None

    Returns:
        Path of the written file
    """
    if path is None:
        directory = Path(get_config().snapshot_dir)
        directory.mkdir(parents=True, exist_ok=True)
        stamp = time.strftime("%Y%m%d-%H%M%S")
        path = directory / f"frct_{variant.value}_{stamp}.png"

    image = render_image(width, height, viewport, max_iterations, variant)
    image.save(path, format='PNG')
    logger.info(f"Saved snapshot {path} ({image.width}x{image.height})")
    return Path(path)
