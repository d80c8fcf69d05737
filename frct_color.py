#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Color Law
=====================================
Copyright (c) 2025 PNGN-Tec LLC

Maps an escape count to a 24-bit color. Interior points (count == cap) are
black, points escaping before the first step are white, and everything else
walks the hue wheel once across the cap at full saturation, half lightness.
"""

from frct_config import (
    RGBColor,
    INTERIOR_COLOR, IMMEDIATE_ESCAPE_COLOR,
    HUE_SATURATION, HUE_LIGHTNESS,
)


def _channel(value: float) -> int:
    # Truncate toward zero like an 8-bit cast
    return min(255, max(0, int(value)))


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> RGBColor:
    """
    Standard HSL to RGB conversion.

    Args:
        hue: Degrees, any non-negative value (wrapped by the formula)
        saturation: Percent 0-100
        lightness: Percent 0-100

    Returns:
        RGB tuple with channels truncated to 0-255
    """
    s = saturation / 100.0
    l = lightness / 100.0
    a = s * min(l, 1.0 - l)

    def f(n: float) -> float:
        k = (n + hue / 30.0) % 12.0
        return l - a * max(-1.0, min(k - 3.0, min(9.0 - k, 1.0)))

    return (_channel(255.0 * f(0.0)),
            _channel(255.0 * f(8.0)),
            _channel(255.0 * f(4.0)))


def iteration_color(iteration: int, max_iterations: int) -> RGBColor:
    """Color for an escape count under the given cap"""
    if iteration == max_iterations:
        return INTERIOR_COLOR
    if iteration == 0:
        return IMMEDIATE_ESCAPE_COLOR

    hue = float(iteration) * 360.0 / float(max_iterations)
    return hsl_to_rgb(hue, HUE_SATURATION, HUE_LIGHTNESS)
