#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Cell Sampler
========================================
Copyright (c) 2025 PNGN-Tec LLC

Subpixel Supersampling
======================
Each terminal cell covers a 2x2 grid of plane samples. The four escape counts
are split around their integer mean: samples at or above the mean are "on",
the rest "off". The on/off mask picks the quadrant glyph, the on-set average
picks the foreground color and the off-set average the background.

A cell whose samples are all "on" (including any uniform cell) is drawn as a
solid block in the mean color with no background change.

Module Interface
================
- Pixel: glyph plus foreground and optional background
- sample_cell(): One cell, evaluated as four kernel lanes
- sample_row(): A whole row, evaluated as one 2 x (2*width) lane block
- pixel_from_subpixels(): Quantize a 2x2 count grid into a Pixel
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from frct_config import RGBColor, SUBPIXELS
from frct_kernel import FractalVariant, escape_time
from frct_color import iteration_color
from frct_glyph import SOLID, glyph_for_mask
from frct_viewport import Viewport


@dataclass(frozen=True)
class Pixel:
    glyph: str
    foreground: RGBColor
    background: Optional[RGBColor] = None


def scale_number(number, in_min: float, in_max: float,
                 out_min: float, out_max: float):
    """Linear map of number from [in_min, in_max] onto [out_min, out_max]"""
    return (number - in_min) * (out_max - out_min) / (in_max - in_min) + out_min


def _average(values: List[int]) -> int:
    if not values:
        return 0
    return sum(values) // len(values)


def pixel_from_subpixels(values: np.ndarray, max_iterations: int) -> Pixel:
    """
    Quantize a 2x2 grid of escape counts into a Pixel.

    Args:
        values: Array of shape (2, 2), rows top to bottom
        max_iterations: Iteration cap the counts were produced with

    Returns:
        Pixel with glyph, foreground and optional background
    """
    counts = [[int(values[0, 0]), int(values[0, 1])],
              [int(values[1, 0]), int(values[1, 1])]]
    mean = (counts[0][0] + counts[0][1] + counts[1][0] + counts[1][1]) // 4

    on_values = []
    off_values = []
    mask = [[False, False], [False, False]]
    for sy in range(SUBPIXELS):
        for sx in range(SUBPIXELS):
            value = counts[sy][sx]
            if value >= mean:
                mask[sy][sx] = True
                on_values.append(value)
            else:
                off_values.append(value)

    # The maximum of four values is never below their floored mean
    assert on_values, "subpixel on-set cannot be empty"

    if len(on_values) == SUBPIXELS * SUBPIXELS:
        return Pixel(SOLID, iteration_color(mean, max_iterations), None)

    glyph = glyph_for_mask(((mask[0][0], mask[0][1]), (mask[1][0], mask[1][1])))
    return Pixel(glyph,
                 iteration_color(_average(on_values), max_iterations),
                 iteration_color(_average(off_values), max_iterations))


def _subpixel_coordinates(first_column: int, columns: int, row: int,
                          width: int, height: int, viewport: Viewport):
    """Plane coordinates of the 2 x (2*columns) subpixel block of a row span"""
    sub_x = np.arange(first_column * SUBPIXELS, (first_column + columns) * SUBPIXELS,
                      dtype=np.float64)
    sub_y = np.arange(row * SUBPIXELS, (row + 1) * SUBPIXELS, dtype=np.float64)
    xs = scale_number(sub_x, 0.0, float(width * SUBPIXELS), viewport.left, viewport.right)
    ys = scale_number(sub_y, 0.0, float(height * SUBPIXELS), viewport.top, viewport.bottom)
    return xs[np.newaxis, :], ys[:, np.newaxis]


def sample_cell(column: int, row: int, width: int, height: int,
                viewport: Viewport, max_iterations: int,
                variant: FractalVariant) -> Pixel:
    """Render one terminal cell into a Pixel"""
    xs, ys = _subpixel_coordinates(column, 1, row, width, height, viewport)
    values = escape_time(variant, xs, ys, max_iterations)
    return pixel_from_subpixels(values, max_iterations)


def sample_row(row: int, width: int, height: int,
               viewport: Viewport, max_iterations: int,
               variant: FractalVariant) -> List[Pixel]:
    """Render every cell of a terminal row, left to right"""
    if width <= 0:
        return []
    xs, ys = _subpixel_coordinates(0, width, row, width, height, viewport)
    values = escape_time(variant, xs, ys, max_iterations)
    return [
        pixel_from_subpixels(values[:, column * SUBPIXELS:(column + 1) * SUBPIXELS],
                             max_iterations)
        for column in range(width)
    ]


def sample_grid(width: int, height: int, viewport: Viewport,
                max_iterations: int, variant: FractalVariant) -> List[List[Pixel]]:
    """Pixels for a full width x height frame, row by row"""
    return [sample_row(row, width, height, viewport, max_iterations, variant)
            for row in range(height)]
