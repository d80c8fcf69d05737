#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Zoom Tour Animation Example
=======================================================
Copyright (c) 2025 PNGN-Tec LLC
"""

import argparse
from typing import List

from PIL import Image

from frct_kernel import FractalVariant
from frct_snapshot import render_image
from frct_viewport import DEFAULT_VIEWPORT, Viewport

BASE_TERMINAL_WIDTH = 80
BASE_TERMINAL_HEIGHT = 24
TOTAL_FRAMES = 36
FRAME_DURATION_MS = 83

# Seahorse valley
TARGET_X = -0.743643
TARGET_Y = 0.131825


def tour_viewports(frames: int, target_x: float, target_y: float) -> List[Viewport]:
    """Glide the center toward the target while zooming in every frame"""
    viewport = DEFAULT_VIEWPORT
    viewports = []
    for _ in range(frames):
        viewports.append(viewport)
        cx, cy = viewport.center
        half_w = viewport.width / 2.0
        half_h = viewport.height / 2.0
        cx += (target_x - cx) * 0.25
        cy += (target_y - cy) * 0.25
        viewport = Viewport(top=cy - half_h, bottom=cy + half_h,
                            left=cx - half_w, right=cx + half_w).zoom_in()
    return viewports


def main():
    parser = argparse.ArgumentParser(description='FRCT Zoom Tour Animation')
    parser.add_argument('--frames', type=int, default=TOTAL_FRAMES)
    parser.add_argument('--iterations', type=int, default=200)
    parser.add_argument('--fractal', choices=[variant.value for variant in FractalVariant],
                        default=FractalVariant.MANDELBROT.value)
    parser.add_argument('--cell-pixels', type=int, default=8)
    args = parser.parse_args()

    variant = FractalVariant(args.fractal)

    print(f"🌀 FRCT Zoom Tour ({variant.label})")
    print("=" * 60)
    print(f"Total: {args.frames} frames at 12 FPS ({args.frames / 12:.1f}s)")
    print(f"Cap: {args.iterations} iterations")
    print()

    frames: List[Image.Image] = []
    for frame, viewport in enumerate(tour_viewports(args.frames, TARGET_X, TARGET_Y)):
        img = render_image(BASE_TERMINAL_WIDTH, BASE_TERMINAL_HEIGHT, viewport,
                           args.iterations, variant, cell_pixels=args.cell_pixels)
        frames.append(img)

        if (frame + 1) % 12 == 0:
            print(f"  Frame {frame + 1}/{args.frames} [width {viewport.width:.3g}]")

    output = f"frct_zoom_tour_{variant.value}.gif"
    frames[0].save(
        output,
        format='GIF',
        save_all=True,
        append_images=frames[1:],
        duration=FRAME_DURATION_MS,
        loop=0,
        optimize=False
    )

    print(f"\n✓ Saved {output}")


if __name__ == "__main__":
    main()
