"""Full-frame rendering of the viewport.

Every call to :meth:`ViewportRenderer.render` produces one complete frame
as a single ``bytes`` object: text rows, status bar, message bar and the
final cursor placement.  The caller writes it with one ``write`` so the
terminal never shows a half-drawn frame.
"""

from __future__ import annotations

import time
import unicodedata
from typing import TYPE_CHECKING, Callable

from kilo.view import __version__
from kilo.view.utils import truncate_to_width, visible_width

if TYPE_CHECKING:
    from kilo.view.editor import EditorState

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
CLEAR_LINE = b"\x1b[K"
CLEAR_SCREEN = b"\x1b[2J"
INVERT = b"\x1b[7m"
RESET_ATTRS = b"\x1b[m"
LINE_END = b"\r\n"

_CURSOR_TO_FMT = "\x1b[{};{}H"

_FILENAME_COLUMNS = 20
WELCOME = f"Kilo viewer -- version {__version__}"


def cursor_to(row: int, col: int) -> bytes:
    """Sequence moving the cursor to 1-based terminal position (*row*, *col*)."""
    return _CURSOR_TO_FMT.format(row, col).encode("ascii")


def _printable(text: str) -> str:
    """Replace control characters so *text* cannot emit terminal sequences."""
    return "".join("?" if unicodedata.category(ch) in ("Cc", "Cs") else ch for ch in text)


class ViewportRenderer:
    """Composes frames from the editor state."""

    def __init__(
        self,
        *,
        filler: str = "~",
        message_timeout: float = 5.0,
        show_welcome: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._filler = filler.encode("utf-8")
        self._message_timeout = message_timeout
        self._show_welcome = show_welcome
        self._clock = clock

    def render(self, state: EditorState) -> bytes:
        """Build the frame for *state*."""
        buf = bytearray()
        buf += HIDE_CURSOR
        buf += CURSOR_HOME

        self._draw_rows(buf, state)
        self._draw_status_bar(buf, state)
        self._draw_message_bar(buf, state)

        vp = state.viewport
        screen_row = max(state.cursor.cy - vp.rowoff, 0)
        screen_col = max(state.cursor.cx - vp.coloff, 0)
        buf += cursor_to(screen_row + 1, screen_col + 1)

        buf += SHOW_CURSOR
        return bytes(buf)

    # -- sections ------------------------------------------------------------

    def _draw_rows(self, buf: bytearray, state: EditorState) -> None:
        vp = state.viewport
        count = state.rows.count

        for y in range(vp.screenrows):
            filerow = vp.rowoff + y
            if filerow >= count:
                buf += self._filler[: vp.screencols]
                if self._show_welcome and count == 0 and y == vp.screenrows // 3:
                    buf += self._welcome(vp.screencols)
            else:
                chars = state.rows[filerow].chars
                buf += chars[vp.coloff : vp.coloff + vp.screencols]

            buf += CLEAR_LINE
            buf += LINE_END

    def _welcome(self, screencols: int) -> bytes:
        """Centered banner text, placed after the filler marker."""
        avail = screencols - len(self._filler)
        text = WELCOME[: max(avail, 0)]
        padding = (screencols - len(text)) // 2 - len(self._filler)
        return (" " * max(padding, 0) + text).encode("ascii")

    def _draw_status_bar(self, buf: bytearray, state: EditorState) -> None:
        cols = state.viewport.screencols
        count = state.rows.count

        name = truncate_to_width(_printable(state.filename or "[No Name]"), _FILENAME_COLUMNS)
        left = truncate_to_width(f"{name} - {count} lines", cols)
        right = f"{state.cursor.cy + 1}/{count}"

        gap = cols - visible_width(left) - len(right)
        if gap >= 0:
            line = left + " " * gap + right
        else:
            line = truncate_to_width(left, cols, pad=True)

        buf += INVERT
        buf += line.encode("utf-8")
        buf += RESET_ATTRS
        buf += LINE_END

    def _draw_message_bar(self, buf: bytearray, state: EditorState) -> None:
        buf += CLEAR_LINE
        message = state.status_message
        if message and self._clock() - state.status_time < self._message_timeout:
            buf += truncate_to_width(message, state.viewport.screencols).encode("utf-8")
