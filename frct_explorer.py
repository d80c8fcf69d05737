#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Interactive Explorer
================================================
Copyright (c) 2025 PNGN-Tec LLC

Control Loop
============
A single thread waits for one event at a time, applies it to the explorer
state and, when something changed, renders a complete frame synchronously
before reading the next event. No state changes while a frame is in flight.

Key Bindings
============
- q: quit
- w / a / s / d: pan up / left / down / right
- Up / Down: zoom in / out
- Enter: redraw
- = / -: raise / lower the iteration cap
- [ / ]: previous / next fractal
- r: reset the view
- p: save a PNG snapshot of the view

Example Usage
=============
```bash
frct-explorer                          # interactive
frct-explorer --fractal julia --print  # one frame to stdout
frct-explorer --snapshot view.png --size 120x40
```
"""

import re
import sys
import argparse
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

from frct_config import ANSI, get_config, describe_config
from frct_kernel import FractalVariant
from frct_viewport import ExplorerState
from frct_render import FrameScheduler
from frct_snapshot import save_snapshot
from frct_terminal import (
    KeyEvent, ResizeEvent, Event,
    EventSource, FrameSink, TerminalSession,
    terminal_size,
)

logger = logging.getLogger('FRCT.Explorer')


class Action(Enum):
    QUIT = "quit"
    PAN_UP = "pan_up"
    PAN_DOWN = "pan_down"
    PAN_LEFT = "pan_left"
    PAN_RIGHT = "pan_right"
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    REDRAW = "redraw"
    MORE_ITERATIONS = "more_iterations"
    FEWER_ITERATIONS = "fewer_iterations"
    PREVIOUS_FRACTAL = "previous_fractal"
    NEXT_FRACTAL = "next_fractal"
    RESET = "reset"
    SNAPSHOT = "snapshot"


KEY_BINDINGS = {
    'q': Action.QUIT,
    'w': Action.PAN_UP,
    's': Action.PAN_DOWN,
    'a': Action.PAN_LEFT,
    'd': Action.PAN_RIGHT,
    'UP': Action.ZOOM_IN,
    'DOWN': Action.ZOOM_OUT,
    'ENTER': Action.REDRAW,
    '=': Action.MORE_ITERATIONS,
    '-': Action.FEWER_ITERATIONS,
    '[': Action.PREVIOUS_FRACTAL,
    ']': Action.NEXT_FRACTAL,
    'r': Action.RESET,
    'p': Action.SNAPSHOT,
}


class Explorer:
    """
    Owns the explorer state and drives redraws.

    Args:
        state: Viewport and render parameters
        scheduler: Frame renderer
        sink: Destination for rendered frames
        size_provider: Callable returning (columns, rows) of the display
    """

    def __init__(self, state: ExplorerState, scheduler: FrameScheduler, sink: FrameSink,
                 size_provider: Callable[[], Tuple[int, int]] = terminal_size):
        self.state = state
        self.scheduler = scheduler
        self.sink = sink
        self.size_provider = size_provider
        self.last_size: Tuple[int, int] = (0, 0)
        self.snapshots = []

        self._state_actions = {
            Action.PAN_UP: state.pan_up,
            Action.PAN_DOWN: state.pan_down,
            Action.PAN_LEFT: state.pan_left,
            Action.PAN_RIGHT: state.pan_right,
            Action.ZOOM_IN: state.zoom_in,
            Action.ZOOM_OUT: state.zoom_out,
            Action.MORE_ITERATIONS: state.increase_iterations,
            Action.FEWER_ITERATIONS: state.decrease_iterations,
            Action.PREVIOUS_FRACTAL: state.previous_variant,
            Action.NEXT_FRACTAL: state.next_variant,
            Action.RESET: state.reset_viewport,
        }

    def apply(self, action: Action) -> bool:
        """Apply an action; True when a redraw is warranted"""
        if action is Action.REDRAW:
            return True
        if action is Action.SNAPSHOT:
            self.snapshot()
            return False
        return self._state_actions[action]()

    def handle(self, event: Event) -> bool:
        """Process one event; False when the loop should stop"""
        should_redraw = False

        if isinstance(event, KeyEvent):
            action = KEY_BINDINGS.get(event.key)
            if action is None:
                logger.debug(f"Ignoring unbound key {event.key!r}")
                return True
            if action is Action.QUIT:
                return False
            should_redraw = self.apply(action)

        elif isinstance(event, ResizeEvent):
            if (event.columns, event.rows) != self.last_size:
                self.sink.clear()
                should_redraw = True

        if should_redraw:
            self.redraw()
        return True

    def redraw(self):
        """Render the current state at the current display size and flush it"""
        columns, rows = self.size_provider()
        frame = self.scheduler.render_frame(columns, rows, self.state.viewport,
                                            self.state.max_iterations, self.state.variant)
        self.sink.write_frame(ANSI.CURSOR_HOME + frame)
        self.last_size = (columns, rows)

    def snapshot(self) -> Optional[Path]:
        """Save the current view as PNG; a failed save is logged and the session goes on"""
        columns, rows = self.last_size if self.last_size != (0, 0) else self.size_provider()
        try:
            path = save_snapshot(columns, rows, self.state.viewport,
                                 self.state.max_iterations, self.state.variant)
        except OSError as e:
            logger.error(f"Snapshot failed: {e}")
            return None
        self.snapshots.append(path)
        return path

    def run(self, events: EventSource):
        """Draw the first frame, then process events until quit"""
        self.redraw()
        while self.handle(events.read()):
            pass
        logger.info(f"Explorer stopped: {self.scheduler.get_stats()}")


# ============================================================================
# COMMAND LINE
# ============================================================================

def parse_size(text: str) -> Tuple[int, int]:
    """Parse COLSxROWS into a positive (columns, rows) pair"""
    match = re.fullmatch(r"(\d+)[xX](\d+)", text.strip())
    if not match or int(match.group(1)) <= 0 or int(match.group(2)) <= 0:
        raise argparse.ArgumentTypeError(f"expected COLSxROWS with positive values, got {text!r}")
    return int(match.group(1)), int(match.group(2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Quadrant-block fractal explorer for truecolor terminals')
    parser.add_argument('--iterations', type=int, default=None,
                        help='starting iteration cap')
    parser.add_argument('--fractal', choices=[variant.value for variant in FractalVariant],
                        default=None, help='starting fractal')
    parser.add_argument('--size', type=parse_size, default=None,
                        help='COLSxROWS for --print/--snapshot (default: terminal size)')
    output = parser.add_mutually_exclusive_group()
    output.add_argument('--print', dest='print_frame', action='store_true',
                        help='write one frame to stdout and exit')
    output.add_argument('--snapshot', type=Path, default=None, metavar='PATH',
                        help='write one PNG to PATH and exit')
    parser.add_argument('--log-file', default=None, help='write logs to this file')
    parser.add_argument('--log-level', default=None, help='logging level name')
    return parser


def configure_logging(log_file: Optional[str], level_name: str, interactive: bool):
    """Interactive sessions log to a file only; stderr shares the display"""
    level = getattr(logging, level_name.upper(), logging.WARNING)
    if log_file:
        logging.basicConfig(filename=log_file, level=level,
                            format='%(asctime)s %(name)s %(levelname)s %(message)s')
    elif not interactive:
        logging.basicConfig(stream=sys.stderr, level=level,
                            format='%(name)s %(levelname)s %(message)s')
    else:
        logging.getLogger('FRCT').addHandler(logging.NullHandler())


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    interactive = not (args.print_frame or args.snapshot)

    level_name = args.log_level or ('DEBUG' if config.debug_mode else config.log_level)
    configure_logging(args.log_file, level_name, interactive)
    logger.debug(f"Configuration: {describe_config(config)}")

    variant_index = FractalVariant(args.fractal).index if args.fractal else None
    try:
        state = ExplorerState(max_iterations=args.iterations, variant_index=variant_index)
    except ValueError as e:
        logger.error(f"Invalid explorer state: {e}")
        return 2

    columns, rows = args.size or terminal_size()

    if args.snapshot:
        save_snapshot(columns, rows, state.viewport, state.max_iterations, state.variant,
                      path=args.snapshot)
        return 0

    sink = FrameSink()

    if args.print_frame:
        with FrameScheduler() as scheduler:
            frame = scheduler.render_frame(columns, rows, state.viewport,
                                           state.max_iterations, state.variant)
        sink.write_frame(frame + "\n")
        return 0

    if not sys.stdin.isatty():
        sys.stderr.write("frct-explorer: interactive mode needs a terminal (try --print)\n")
        return 2

    try:
        with FrameScheduler() as scheduler, \
                TerminalSession(sink, title=config.title), \
                EventSource() as events:
            Explorer(state, scheduler, sink).run(events)
    except OSError as e:
        logger.error(f"Display I/O failed: {e}")
        sys.stderr.write(f"frct-explorer: {e}\n")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
