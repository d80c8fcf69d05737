#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Frame Renderer
==========================================
Copyright (c) 2025 PNGN-Tec LLC

Row Composition and Frame Scheduling
====================================
A frame is built one terminal row per task. Rows are independent: each task
reads only the shared viewport, cap and variant, and keeps its own record of
the last emitted colors so repeated colors along the row cost nothing.

The scheduler fans the rows out over a thread pool (numpy releases the GIL
inside the kernel), waits for all of them, and joins them in row order. Every
row starts with an absolute cursor position so the buffer lands correctly
wherever the terminal cursor was. A color reset terminates the buffer.

Performance Characteristics
============================
- One vectorized kernel call per row (2 x 2*width lanes)
- Color directives only on change within a row
- Pool sized to available CPUs unless configured otherwise

Module Interface
================
- render_row(): ANSI text for one row
- FrameScheduler: Thread pool renderer with statistics
- render_frame(): Render through the shared default scheduler
"""

import threading
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Any, List, Optional

from frct_config import (
    ANSI,
    get_performance_config,
    register_config_callback, unregister_config_callback,
)
from frct_kernel import FractalVariant
from frct_sampler import sample_row
from frct_viewport import Viewport

logger = logging.getLogger('FRCT.Render')


# ============================================================================
# ROW RENDERER
# ============================================================================

def render_row(row: int, width: int, height: int, viewport: Viewport,
               max_iterations: int, variant: FractalVariant) -> str:
    """Convert one row of cells to ANSI text with change-only color directives"""
    parts = []
    current_fg = None
    current_bg = None

    for pixel in sample_row(row, width, height, viewport, max_iterations, variant):
        if pixel.foreground != current_fg:
            parts.append(ANSI.fg(pixel.foreground))
            current_fg = pixel.foreground

        if pixel.background is not None and pixel.background != current_bg:
            parts.append(ANSI.bg(pixel.background))
            current_bg = pixel.background

        parts.append(pixel.glyph)

    return ''.join(parts)


# ============================================================================
# FRAME SCHEDULER
# ============================================================================

class FrameScheduler:
    """
    Thread pool frame renderer.

    render_frame() blocks until every row is done; rows are always joined in
    index order regardless of completion order. A failure in any row task is
    raised to the caller.
    """

    def __init__(self, max_workers: Optional[int] = None):
        perf_config = get_performance_config()

        self._max_workers = max_workers or perf_config.max_worker_threads
        self._min_rows_for_pool = perf_config.min_rows_for_pool
        self._executor = None
        self._executor_lock = threading.Lock()

        # Statistics
        self.render_times = []
        self.rows_rendered = 0

        register_config_callback(self._on_config_change)

        logger.info(f"FrameScheduler initialized: max_workers={self._max_workers}")

    def _on_config_change(self, old_config, new_config):
        """Resize the pool on the next frame when the thread count changes"""
        workers = new_config.performance.max_worker_threads
        with self._executor_lock:
            self._min_rows_for_pool = new_config.performance.min_rows_for_pool
            if workers != self._max_workers:
                logger.info(f"Worker threads changed: {self._max_workers} -> {workers}")
                self._max_workers = workers
                if self._executor:
                    self._executor.shutdown(wait=True)
                    self._executor = None

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="FrameScheduler"
                )
                logger.debug(f"Created thread pool executor with {self._max_workers} workers")
            return self._executor

    def render_rows(self, width: int, height: int, viewport: Viewport,
                    max_iterations: int, variant: FractalVariant) -> List[str]:
        """Rendered rows in index order"""
        if width <= 0 or height <= 0:
            return []

        if height < self._min_rows_for_pool or self._max_workers == 1:
            return [render_row(row, width, height, viewport, max_iterations, variant)
                    for row in range(height)]

        executor = self._get_executor()
        futures = [
            executor.submit(render_row, row, width, height, viewport, max_iterations, variant)
            for row in range(height)
        ]
        return [future.result() for future in futures]

    def render_frame(self, width: int, height: int, viewport: Viewport,
                     max_iterations: int, variant: FractalVariant) -> str:
        """
        Render a complete frame buffer.

        Args:
            width: Terminal columns
            height: Terminal rows
            viewport: Plane window to show
            max_iterations: Iteration cap
            variant: Fractal to evaluate

        Returns:
            Rows with cursor-position prefixes, followed by a color reset
        """
        start_time = time.time()

        rows = self.render_rows(width, height, viewport, max_iterations, variant)
        frame = ''.join(ANSI.move_to(0, index) + text for index, text in enumerate(rows))

        render_time = (time.time() - start_time) * 1000
        self.render_times.append(render_time)
        self.rows_rendered += len(rows)
        logger.debug(f"Rendered {width}x{height} {variant.label} frame "
                     f"(cap={max_iterations}) in {render_time:.1f}ms")

        return frame + ANSI.RESET

    def get_stats(self) -> Dict[str, Any]:
        """Render timing statistics"""
        if not self.render_times:
            return {'status': 'No renders yet'}

        return {
            'avg_render_time': sum(self.render_times) / len(self.render_times),
            'min_render_time': min(self.render_times),
            'max_render_time': max(self.render_times),
            'frames_rendered': len(self.render_times),
            'rows_rendered': self.rows_rendered,
            'max_workers': self._max_workers,
        }

    def shutdown(self):
        """Release the worker pool"""
        unregister_config_callback(self._on_config_change)
        with self._executor_lock:
            if self._executor:
                self._executor.shutdown(wait=True)
                self._executor = None
        logger.info("Frame scheduler shutdown complete")

    def __enter__(self) -> 'FrameScheduler':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False


# Convenience functions

_default_scheduler = None
_scheduler_lock = threading.Lock()

def get_scheduler() -> FrameScheduler:
    """Get or create default scheduler"""
    global _default_scheduler

    if _default_scheduler is None:
        with _scheduler_lock:
            if _default_scheduler is None:
                _default_scheduler = FrameScheduler()

    return _default_scheduler

def render_frame(width: int, height: int, viewport: Viewport,
                 max_iterations: int, variant: FractalVariant) -> str:
    """Render a frame using the default scheduler"""
    return get_scheduler().render_frame(width, height, viewport, max_iterations, variant)

def shutdown_scheduler():
    """Shutdown default scheduler cleanly"""
    global _default_scheduler

    if _default_scheduler:
        _default_scheduler.shutdown()
        _default_scheduler = None
