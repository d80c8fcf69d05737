#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Escape-Time Kernel
==============================================
Copyright (c) 2025 PNGN-Tec LLC

Vectorized Fractal Evaluation
=============================
Evaluates the escape-time count of any number of plane points at once using
numpy lanes. Every lane iterates its own recurrence in lockstep with the
others; a lane is frozen as soon as it escapes (|z|^2 > 4) or reaches the
iteration cap, so its count and iterate never change afterwards.

Supported Fractals
==================
- Mandelbrot:   z0 = 0,     z' = z^2 + c
- Burning Ship: z0 = c,     z' = (zx^2 - zy^2 + cx, |2 zx zy| + cy)
- Julia:        z0 = point, z' = z^2 + (0.156 + 0.8i)

Module Interface
================
- FractalVariant: Enum of the supported fractals, indexed 0..n-1
- escape_time(): Vectorized evaluation over broadcastable x/y arrays
- escape_time_scalar(): Single-lane reference loop with early break
"""

import logging
from enum import Enum
from typing import Union

import numpy as np

from frct_config import ESCAPE_RADIUS_SQUARED, JULIA_REAL, JULIA_IMAG

logger = logging.getLogger('FRCT.Kernel')

ArrayLike = Union[float, np.ndarray]


class FractalVariant(Enum):
    MANDELBROT = "mandelbrot"
    BURNING_SHIP = "burning-ship"
    JULIA = "julia"

    @property
    def index(self) -> int:
        return list(FractalVariant).index(self)

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_index(cls, index: int) -> 'FractalVariant':
        """Variant at index, wrapping around the ends of the list"""
        members = list(cls)
        return members[index % len(members)]


_LABELS = {
    FractalVariant.MANDELBROT: "Mandelbrot Set",
    FractalVariant.BURNING_SHIP: "Burning Ship",
    FractalVariant.JULIA: "Julia Set",
}


def _seed(variant: FractalVariant, cx: np.ndarray, cy: np.ndarray):
    if variant is FractalVariant.MANDELBROT:
        return np.zeros_like(cx), np.zeros_like(cy)
    return cx.copy(), cy.copy()


def _step(variant: FractalVariant, zx: np.ndarray, zy: np.ndarray,
          cx: np.ndarray, cy: np.ndarray):
    """One recurrence step for every lane"""
    xx = zx * zx - zy * zy
    cross = 2.0 * zx * zy
    if variant is FractalVariant.MANDELBROT:
        return xx + cx, cross + cy
    if variant is FractalVariant.BURNING_SHIP:
        return xx + cx, np.abs(cross) + cy
    if variant is FractalVariant.JULIA:
        return xx + JULIA_REAL, cross + JULIA_IMAG
    raise ValueError(f"Unknown fractal variant: {variant!r}")


def escape_time(variant: FractalVariant, x: ArrayLike, y: ArrayLike,
                max_iterations: int) -> np.ndarray:
    """
    Escape iteration count for each (x, y) lane.

    Args:
        variant: Fractal recurrence to iterate
        x: Real coordinates (scalar or array)
        y: Imaginary coordinates, broadcastable against x
        max_iterations: Iteration cap; a lane reaching it is interior

    Returns:
        Integer array in [0, max_iterations] with the broadcast shape of x and y
    """
    cx, cy = np.broadcast_arrays(np.asarray(x, dtype=np.float64),
                                 np.asarray(y, dtype=np.float64))
    cx = np.array(cx)
    cy = np.array(cy)

    zx, zy = _seed(variant, cx, cy)
    counts = np.zeros(cx.shape, dtype=np.int64)

    # Huge coordinates overflow to inf on their first step and escape
    with np.errstate(over='ignore', invalid='ignore'):
        active = (zx * zx + zy * zy <= ESCAPE_RADIUS_SQUARED) & (counts < max_iterations)
        while active.any():
            next_x, next_y = _step(variant, zx, zy, cx, cy)
            zx = np.where(active, next_x, zx)
            zy = np.where(active, next_y, zy)
            counts += active
            active &= (zx * zx + zy * zy <= ESCAPE_RADIUS_SQUARED) & (counts < max_iterations)

    return counts


def escape_time_scalar(variant: FractalVariant, x: float, y: float,
                       max_iterations: int) -> int:
    """Width-1 form of escape_time; a plain loop that breaks on escape"""
    if variant is FractalVariant.MANDELBROT:
        zx, zy = 0.0, 0.0
    else:
        zx, zy = x, y

    iteration = 0
    while iteration < max_iterations:
        if zx * zx + zy * zy > ESCAPE_RADIUS_SQUARED:
            break
        xx = zx * zx - zy * zy
        cross = 2.0 * zx * zy
        if variant is FractalVariant.MANDELBROT:
            zx, zy = xx + x, cross + y
        elif variant is FractalVariant.BURNING_SHIP:
            zx, zy = xx + x, abs(cross) + y
        else:
            zx, zy = xx + JULIA_REAL, cross + JULIA_IMAG
        iteration += 1

    return iteration
