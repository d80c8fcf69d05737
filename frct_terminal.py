#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Terminal Session
============================================
Copyright (c) 2025 PNGN-Tec LLC

Terminal Collaborators
======================
Everything the renderer needs from the outside world, kept apart from the
rendering core:
- TerminalSession: raw mode, alternate screen, hidden cursor, restore on exit
- EventSource: blocking reader producing key and resize events
- FrameSink: byte sink that writes and flushes one frame at a time

Input Handling
==============
Keys are read from the tty file descriptor in raw mode. Arrow keys arrive as
CSI sequences and are decoded to "UP"/"DOWN"/"LEFT"/"RIGHT"; carriage return
becomes "ENTER"; Ctrl-C is delivered as "q". Resizes are signalled by SIGWINCH
and delivered through a self-pipe so the blocking wait covers both sources.
"""

import os
import sys
import select
import signal
import shutil
import termios
import tty
import logging
from collections import deque
from dataclasses import dataclass
from typing import BinaryIO, Deque, List, Optional, Tuple, Union

from frct_config import ANSI

logger = logging.getLogger('FRCT.Terminal')


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class ResizeEvent:
    columns: int
    rows: int


Event = Union[KeyEvent, ResizeEvent]

_ESCAPE_KEYS = {
    "\x1b[A": "UP",
    "\x1b[B": "DOWN",
    "\x1b[C": "RIGHT",
    "\x1b[D": "LEFT",
    "\x1bOA": "UP",
    "\x1bOB": "DOWN",
    "\x1bOC": "RIGHT",
    "\x1bOD": "LEFT",
}


def terminal_size(fallback: Tuple[int, int] = (80, 24)) -> Tuple[int, int]:
    """(columns, rows) of the controlling terminal"""
    size = shutil.get_terminal_size(fallback)
    return size.columns, size.lines


def decode_keys(text: str) -> List[str]:
    """Split a chunk of raw input into key names"""
    keys = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\x1b":
            sequence = text[index:index + 3]
            if sequence in _ESCAPE_KEYS:
                keys.append(_ESCAPE_KEYS[sequence])
                index += 3
                continue
            # Skip unknown CSI sequences up to their final byte
            if text[index + 1:index + 2] == "[":
                end = index + 2
                while end < len(text) and not ("@" <= text[end] <= "~"):
                    end += 1
                index = end + 1
                continue
            keys.append("ESC")
        elif char in ("\r", "\n"):
            keys.append("ENTER")
        elif char == "\x03":
            keys.append("q")
        else:
            keys.append(char)
        index += 1
    return keys


class FrameSink:
    """Writes complete frames to a binary stream, one flush per frame"""

    def __init__(self, stream: Optional[BinaryIO] = None):
        self.stream = stream if stream is not None else sys.stdout.buffer
        self.frames_written = 0

    def write(self, text: str):
        self.stream.write(text.encode('utf-8'))

    def write_frame(self, text: str):
        """Write a frame buffer and flush it as one unit"""
        self.write(text)
        self.stream.flush()
        self.frames_written += 1

    def clear(self):
        self.write(ANSI.CLEAR_SCREEN)
        self.stream.flush()


class EventSource:
    """
    Blocking source of KeyEvent and ResizeEvent values.

    Reads from fd (default: stdin) and a SIGWINCH self-pipe installed while
    the source is open.
    """

    def __init__(self, fd: Optional[int] = None):
        self.fd = fd if fd is not None else sys.stdin.fileno()
        self._pending: Deque[Event] = deque()
        self._wake_read = None
        self._wake_write = None
        self._previous_handler = None

    def open(self):
        self._wake_read, self._wake_write = os.pipe()
        os.set_blocking(self._wake_write, False)
        self._previous_handler = signal.signal(signal.SIGWINCH, self._on_resize)
        logger.debug("Event source opened")

    def close(self):
        if self._wake_read is None:
            return
        signal.signal(signal.SIGWINCH, self._previous_handler or signal.SIG_DFL)
        os.close(self._wake_read)
        os.close(self._wake_write)
        self._wake_read = self._wake_write = None
        logger.debug("Event source closed")

    def _on_resize(self, signum, frame):
        try:
            os.write(self._wake_write, b"w")
        except BlockingIOError:
            pass

    def read(self) -> Event:
        """Block until the next event is available"""
        while not self._pending:
            watched = [self.fd] + ([self._wake_read] if self._wake_read is not None else [])
            ready, _, _ = select.select(watched, [], [])
            if self._wake_read in ready:
                os.read(self._wake_read, 1024)
                self._pending.append(ResizeEvent(*terminal_size()))
            if self.fd in ready:
                data = os.read(self.fd, 1024)
                if not data:
                    # EOF on input ends the session
                    self._pending.append(KeyEvent("q"))
                for key in decode_keys(data.decode('utf-8', errors='replace')):
                    self._pending.append(KeyEvent(key))
        return self._pending.popleft()

    def __enter__(self) -> 'EventSource':
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class TerminalSession:
    """
    Raw-mode, alternate-screen terminal session.

    Terminal state is restored on exit even when the body raises, so an I/O
    failure in a redraw leaves the user's shell usable.
    """

    def __init__(self, sink: FrameSink, fd: Optional[int] = None, title: str = ""):
        self.sink = sink
        self.fd = fd if fd is not None else sys.stdin.fileno()
        self.title = title
        self._saved_attrs = None

    def __enter__(self) -> 'TerminalSession':
        self._saved_attrs = termios.tcgetattr(self.fd)
        tty.setraw(self.fd)
        self.sink.write(ANSI.title(self.title) + ANSI.ALT_SCREEN_ON + ANSI.DISABLE_BLINK
                        + ANSI.HIDE_CURSOR + ANSI.CLEAR_SCREEN + ANSI.CURSOR_HOME)
        self.sink.stream.flush()
        logger.info("Terminal session started")
        return self

    def __exit__(self, exc_type, exc, tb):
        try:
            self.sink.write(ANSI.CLEAR_SCREEN + ANSI.SHOW_CURSOR + ANSI.ENABLE_BLINK
                            + ANSI.ALT_SCREEN_OFF + ANSI.RESET)
            self.sink.stream.flush()
        finally:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_attrs)
            logger.info("Terminal session restored")
        return False
