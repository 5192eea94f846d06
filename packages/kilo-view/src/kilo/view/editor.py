"""Editor loop: cursor movement, scrolling policy and the read/render cycle.

All mutable viewer state lives in one :class:`EditorState` object that the
loop owns and hands to the renderer on each frame.
"""

from __future__ import annotations

import logging
import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Callable

from kilo.view.config import ViewerConfig
from kilo.view.errors import GeometryError
from kilo.view.keys import Key, KeyDecoder, KeyValue, ctrl_key
from kilo.view.render import CLEAR_SCREEN, CURSOR_HOME, ViewportRenderer
from kilo.view.rows import RowStore
from kilo.view.terminal import Terminal

logger = logging.getLogger(__name__)

# Lines below the text area: status bar and message bar.
RESERVED_ROWS = 2

_VERTICAL_KEYS = (Key.ARROW_UP, Key.ARROW_DOWN, Key.PAGE_UP, Key.PAGE_DOWN)


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


@dataclass
class Cursor:
    """Cursor in file coordinates: ``cy`` is a row index, ``cx`` a byte offset."""

    cx: int = 0
    cy: int = 0


@dataclass
class Viewport:
    """Visible window over the document and the text area's size."""

    screenrows: int
    screencols: int
    rowoff: int = 0
    coloff: int = 0


@dataclass
class EditorState:
    rows: RowStore
    viewport: Viewport
    cursor: Cursor = field(default_factory=Cursor)
    filename: str | None = None
    status_message: str = ""
    status_time: float = 0.0

    def set_status_message(self, message: str, now: float | None = None) -> None:
        self.status_message = message
        self.status_time = time.monotonic() if now is None else now


def new_state(
    rows: RowStore,
    terminal_size: tuple[int, int],
    filename: str | None = None,
) -> EditorState:
    """Create the start-up state for a terminal of *terminal_size* ``(rows, cols)``."""
    term_rows, term_cols = terminal_size
    if term_rows <= RESERVED_ROWS or term_cols < 1:
        raise GeometryError(f"terminal too small ({term_rows}x{term_cols})")

    viewport = Viewport(screenrows=term_rows - RESERVED_ROWS, screencols=term_cols)
    return EditorState(rows=rows, viewport=viewport, filename=filename)


# ---------------------------------------------------------------------------
# Cursor movement and scrolling
# ---------------------------------------------------------------------------


def scroll(cursor: Cursor, viewport: Viewport) -> None:
    """Shift the viewport by the least amount that keeps the cursor visible."""
    if cursor.cy < viewport.rowoff:
        viewport.rowoff = cursor.cy
    if cursor.cy >= viewport.rowoff + viewport.screenrows:
        viewport.rowoff = cursor.cy - viewport.screenrows + 1

    if cursor.cx < viewport.coloff:
        viewport.coloff = cursor.cx
    if cursor.cx >= viewport.coloff + viewport.screencols:
        viewport.coloff = cursor.cx - viewport.screencols + 1


def move_cursor(state: EditorState, key: Key) -> None:
    """Apply a navigation key to the cursor, clamped to the document."""
    cursor = state.cursor
    rows = state.rows
    last_row = max(rows.count - 1, 0)

    if key is Key.ARROW_UP:
        if cursor.cy > 0:
            cursor.cy -= 1
    elif key is Key.ARROW_DOWN:
        if cursor.cy < last_row:
            cursor.cy += 1
    elif key is Key.ARROW_LEFT:
        if cursor.cx > 0:
            cursor.cx -= 1
    elif key is Key.ARROW_RIGHT:
        if cursor.cx < rows.row_size(cursor.cy):
            cursor.cx += 1
    elif key is Key.PAGE_UP:
        cursor.cy = max(cursor.cy - state.viewport.screenrows, 0)
    elif key is Key.PAGE_DOWN:
        cursor.cy = min(cursor.cy + state.viewport.screenrows, last_row)
    elif key is Key.HOME:
        cursor.cx = 0
    elif key is Key.END:
        cursor.cx = rows.row_size(cursor.cy)

    if key in _VERTICAL_KEYS:
        cursor.cx = min(cursor.cx, rows.row_size(cursor.cy))


# ---------------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------------


class Editor:
    """Drives the decode / update / render cycle.

    Parameters
    ----------
    terminal:
        Byte-level I/O backend.
    state:
        The editor state this loop owns.
    mode:
        Context manager that holds the terminal in raw mode for the
        lifetime of :meth:`run`, e.g. :func:`kilo.view.terminal.raw_mode`.
    config:
        Viewer settings; defaults when omitted.
    """

    def __init__(
        self,
        terminal: Terminal,
        state: EditorState,
        mode: AbstractContextManager[object],
        *,
        config: ViewerConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or ViewerConfig()
        self.state = state
        self._terminal = terminal
        self._mode = mode
        self._decoder = KeyDecoder(terminal)
        self._renderer = ViewportRenderer(
            filler=self.config.filler,
            message_timeout=self.config.message_timeout,
            show_welcome=self.config.show_welcome,
            clock=clock,
        )
        self._quit_key = ctrl_key(self.config.quit_key)

    def run(self) -> None:
        """Run until the quit key is pressed.

        The terminal is back in its original mode by the time this returns
        or raises.
        """
        with self._mode:
            self._loop()
            self._terminal.write(CLEAR_SCREEN + CURSOR_HOME)

    def _loop(self) -> None:
        needs_render = True
        while True:
            if needs_render:
                self.refresh_screen()

            key = self._decoder.decode()
            if key is None:
                needs_render = False
                continue

            if not self.process_key(key):
                return
            needs_render = True

    def refresh_screen(self) -> None:
        """Render the current state and write it as one frame."""
        scroll(self.state.cursor, self.state.viewport)
        self._terminal.write(self._renderer.render(self.state))

    def process_key(self, key: KeyValue) -> bool:
        """Apply *key* to the state.  Returns ``False`` when the loop should end."""
        if key == self._quit_key:
            logger.debug("Quit key pressed")
            return False

        if isinstance(key, Key):
            move_cursor(self.state, key)
            scroll(self.state.cursor, self.state.viewport)
        return True
