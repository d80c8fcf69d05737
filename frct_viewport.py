#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Viewport Module
===========================================
Copyright (c) 2025 PNGN-Tec LLC

Plane Window and Explorer State
===============================
The Viewport is the rectangle of the complex plane shown on screen. It is
immutable: every pan and zoom returns a new rectangle computed around the
current center, so a frame in flight always sees one consistent window.

ExplorerState bundles the viewport with the iteration cap and the selected
fractal variant. It is owned by the single-threaded control loop; each
mutation returns True when something changed and a redraw is warranted.

Navigation Algebra
==================
With center c and half extent h along an axis:
- zoom:  edges move to c - h*f and c + h*f (f = 0.9 in, 1.1 out)
- pan:   the approaching edge uses 0.9, the receding edge 1.1

Pan is deliberately not self-inverse: panning left then right leaves the
window slightly smaller and shifted.
"""

import math
import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from frct_config import (
    DEFAULT_TOP, DEFAULT_BOTTOM, DEFAULT_LEFT, DEFAULT_RIGHT,
    ZOOM_IN_FACTOR, ZOOM_OUT_FACTOR,
    PAN_NEAR_FACTOR, PAN_FAR_FACTOR,
    get_rendering_config,
)
from frct_kernel import FractalVariant

logger = logging.getLogger('FRCT.Viewport')


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the complex plane; y grows downward like screen rows"""
    top: float
    bottom: float
    left: float
    right: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0)

    def validate(self) -> bool:
        """Reject non-finite or degenerate rectangles"""
        for name in ('top', 'bottom', 'left', 'right'):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"Viewport {name} must be finite")
        if not self.left < self.right:
            raise ValueError("Viewport left must be less than right")
        if not self.top < self.bottom:
            raise ValueError("Viewport top must be less than bottom")
        return True

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def zoom(self, factor: float) -> 'Viewport':
        """Scale both axes symmetrically around the center"""
        cx, cy = self.center
        half_w = self.width / 2.0
        half_h = self.height / 2.0
        return Viewport(
            top=cy - half_h * factor,
            bottom=cy + half_h * factor,
            left=cx - half_w * factor,
            right=cx + half_w * factor,
        )

    def zoom_in(self) -> 'Viewport':
        return self.zoom(ZOOM_IN_FACTOR)

    def zoom_out(self) -> 'Viewport':
        return self.zoom(ZOOM_OUT_FACTOR)

    # ------------------------------------------------------------------
    # Pan
    # ------------------------------------------------------------------

    def pan_up(self) -> 'Viewport':
        _, cy = self.center
        half_h = self.height / 2.0
        return replace(self, top=cy - half_h * PAN_FAR_FACTOR, bottom=cy + half_h * PAN_NEAR_FACTOR)

    def pan_down(self) -> 'Viewport':
        _, cy = self.center
        half_h = self.height / 2.0
        return replace(self, top=cy - half_h * PAN_NEAR_FACTOR, bottom=cy + half_h * PAN_FAR_FACTOR)

    def pan_left(self) -> 'Viewport':
        cx, _ = self.center
        half_w = self.width / 2.0
        return replace(self, left=cx - half_w * PAN_FAR_FACTOR, right=cx + half_w * PAN_NEAR_FACTOR)

    def pan_right(self) -> 'Viewport':
        cx, _ = self.center
        half_w = self.width / 2.0
        return replace(self, left=cx - half_w * PAN_NEAR_FACTOR, right=cx + half_w * PAN_FAR_FACTOR)


DEFAULT_VIEWPORT = Viewport(top=DEFAULT_TOP, bottom=DEFAULT_BOTTOM,
                            left=DEFAULT_LEFT, right=DEFAULT_RIGHT)


class ExplorerState:
    """
    Mutable render parameters owned by the control loop.

    Attributes:
        viewport: Current plane window
        max_iterations: Iteration cap, never below min_iterations
        variant_index: Index into FractalVariant, wraps at both ends
    """

    def __init__(self,
                 viewport: Viewport = DEFAULT_VIEWPORT,
                 max_iterations: Optional[int] = None,
                 variant_index: Optional[int] = None,
                 iteration_step: Optional[int] = None,
                 min_iterations: Optional[int] = None):
        rendering = get_rendering_config()

        viewport.validate()
        self.default_viewport = viewport
        self.viewport = viewport
        self.iteration_step = iteration_step or rendering.iteration_step
        self.min_iterations = min_iterations or rendering.min_iterations
        if max_iterations is None:
            max_iterations = rendering.default_max_iterations
        self.max_iterations = max(max_iterations, self.min_iterations)
        if variant_index is None:
            variant_index = rendering.default_variant
        self.variant_index = variant_index % len(FractalVariant)

    @property
    def variant(self) -> FractalVariant:
        return FractalVariant.from_index(self.variant_index)

    def _move(self, viewport: Viewport) -> bool:
        viewport.validate()
        self.viewport = viewport
        return True

    def pan_up(self) -> bool:
        return self._move(self.viewport.pan_up())

    def pan_down(self) -> bool:
        return self._move(self.viewport.pan_down())

    def pan_left(self) -> bool:
        return self._move(self.viewport.pan_left())

    def pan_right(self) -> bool:
        return self._move(self.viewport.pan_right())

    def zoom_in(self) -> bool:
        return self._move(self.viewport.zoom_in())

    def zoom_out(self) -> bool:
        return self._move(self.viewport.zoom_out())

    def increase_iterations(self) -> bool:
        self.max_iterations += self.iteration_step
        logger.debug(f"Iteration cap raised to {self.max_iterations}")
        return True

    def decrease_iterations(self) -> bool:
        """Lower the cap by one step; refused when it would drop below the floor"""
        if self.max_iterations - self.iteration_step < self.min_iterations:
            logger.debug(f"Iteration cap kept at {self.max_iterations}")
            return False
        self.max_iterations -= self.iteration_step
        logger.debug(f"Iteration cap lowered to {self.max_iterations}")
        return True

    def next_variant(self) -> bool:
        self.variant_index = (self.variant_index + 1) % len(FractalVariant)
        logger.debug(f"Fractal switched to {self.variant.label}")
        return True

    def previous_variant(self) -> bool:
        self.variant_index = (self.variant_index - 1) % len(FractalVariant)
        logger.debug(f"Fractal switched to {self.variant.label}")
        return True

    def reset_viewport(self) -> bool:
        if self.viewport == self.default_viewport:
            return False
        self.viewport = self.default_viewport
        return True
