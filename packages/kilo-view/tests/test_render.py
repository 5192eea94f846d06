"""Tests for kilo.view.render -- full-frame composition."""

from __future__ import annotations

from kilo.view.editor import Cursor, EditorState, Viewport
from kilo.view.render import (
    CLEAR_LINE,
    CLEAR_SCREEN,
    CURSOR_HOME,
    HIDE_CURSOR,
    INVERT,
    RESET_ATTRS,
    SHOW_CURSOR,
    WELCOME,
    ViewportRenderer,
    cursor_to,
)
from kilo.view.rows import RowStore
from kilo.view.utils import visible_width

NOW = 100.0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_state(
    lines: list[bytes],
    screenrows: int = 5,
    screencols: int = 20,
    **kwargs,
) -> EditorState:
    rows = RowStore()
    for line in lines:
        rows.append_row(line)
    return EditorState(
        rows=rows,
        viewport=Viewport(screenrows=screenrows, screencols=screencols),
        **kwargs,
    )


def render(state: EditorState, **kwargs) -> bytes:
    kwargs.setdefault("clock", lambda: NOW)
    return ViewportRenderer(**kwargs).render(state)


def split_frame(frame: bytes, screenrows: int) -> tuple[list[bytes], bytes, bytes]:
    """Split a frame into (text rows, status bar, message bar + trailer)."""
    assert frame.startswith(HIDE_CURSOR + CURSOR_HOME)
    body = frame[len(HIDE_CURSOR + CURSOR_HOME) :]
    parts = body.split(b"\r\n")
    assert len(parts) == screenrows + 2
    return parts[:screenrows], parts[screenrows], parts[screenrows + 1]


def filler_lines(text_rows: list[bytes]) -> int:
    return sum(1 for line in text_rows if line.startswith(b"~"))


# ---------------------------------------------------------------------------
# Frame structure
# ---------------------------------------------------------------------------


class TestFrameStructure:
    def test_hides_cursor_first_and_shows_it_last(self) -> None:
        frame = render(make_state([b"hello"]))
        assert frame.startswith(HIDE_CURSOR + CURSOR_HOME)
        assert frame.endswith(SHOW_CURSOR)

    def test_every_text_row_clears_to_end_of_line(self) -> None:
        text_rows, _, _ = split_frame(render(make_state([b"a", b"b"])), 5)
        assert all(line.endswith(CLEAR_LINE) for line in text_rows)

    def test_cursor_to_sequence(self) -> None:
        assert cursor_to(1, 1) == b"\x1b[1;1H"
        assert cursor_to(12, 40) == b"\x1b[12;40H"


# ---------------------------------------------------------------------------
# Text rows
# ---------------------------------------------------------------------------


class TestTextRows:
    def test_filler_count_for_short_document(self) -> None:
        state = make_state([b"one", b"two"], screenrows=6)
        text_rows, _, _ = split_frame(render(state), 6)
        assert filler_lines(text_rows) == 4
        assert text_rows[0] == b"one" + CLEAR_LINE
        assert text_rows[1] == b"two" + CLEAR_LINE

    def test_empty_document_is_all_filler(self) -> None:
        state = make_state([], screenrows=6)
        text_rows, _, _ = split_frame(render(state), 6)
        assert filler_lines(text_rows) == 6

    def test_welcome_banner_on_empty_document(self) -> None:
        state = make_state([], screenrows=6, screencols=60)
        text_rows, _, _ = split_frame(render(state), 6)
        banner = text_rows[6 // 3]
        assert banner.startswith(b"~ ")
        assert WELCOME.encode() in banner
        assert sum(WELCOME.encode() in line for line in text_rows) == 1

    def test_welcome_banner_is_centered(self) -> None:
        state = make_state([], screenrows=3, screencols=60)
        text_rows, _, _ = split_frame(render(state), 3)
        line = text_rows[1][: -len(CLEAR_LINE)]
        padding = (60 - len(WELCOME)) // 2
        assert line == b"~" + b" " * (padding - 1) + WELCOME.encode()

    def test_welcome_banner_clipped_to_width(self) -> None:
        state = make_state([], screenrows=3, screencols=10)
        text_rows, _, _ = split_frame(render(state), 3)
        line = text_rows[1][: -len(CLEAR_LINE)]
        assert line == b"~" + WELCOME[:9].encode()

    def test_no_welcome_when_disabled(self) -> None:
        state = make_state([], screenrows=3)
        text_rows, _, _ = split_frame(render(state, show_welcome=False), 3)
        assert text_rows == [b"~" + CLEAR_LINE] * 3

    def test_no_welcome_when_document_has_rows(self) -> None:
        state = make_state([b"x"], screenrows=6, screencols=60)
        frame = render(state)
        assert WELCOME.encode() not in frame

    def test_custom_filler(self) -> None:
        state = make_state([], screenrows=2)
        text_rows, _, _ = split_frame(render(state, filler="|", show_welcome=False), 2)
        assert text_rows == [b"|" + CLEAR_LINE] * 2

    def test_row_clipped_to_screen_width(self) -> None:
        state = make_state([b"abcdefghij"], screenrows=1, screencols=4)
        text_rows, _, _ = split_frame(render(state), 1)
        assert text_rows[0] == b"abcd" + CLEAR_LINE

    def test_column_offset(self) -> None:
        state = make_state([b"abcdefghij"], screenrows=1, screencols=4)
        state.viewport.coloff = 3
        text_rows, _, _ = split_frame(render(state), 1)
        assert text_rows[0] == b"defg" + CLEAR_LINE

    def test_column_offset_past_row_end(self) -> None:
        state = make_state([b"abc", b"abcdefgh"], screenrows=2, screencols=4)
        state.viewport.coloff = 5
        text_rows, _, _ = split_frame(render(state), 2)
        assert text_rows[0] == CLEAR_LINE
        assert text_rows[1] == b"fgh" + CLEAR_LINE

    def test_row_offset(self) -> None:
        lines = [f"line {n}".encode() for n in range(10)]
        state = make_state(lines, screenrows=3)
        state.viewport.rowoff = 4
        text_rows, _, _ = split_frame(render(state), 3)
        assert text_rows == [
            b"line 4" + CLEAR_LINE,
            b"line 5" + CLEAR_LINE,
            b"line 6" + CLEAR_LINE,
        ]

    def test_row_offset_near_end_shows_filler(self) -> None:
        lines = [b"a", b"b", b"c"]
        state = make_state(lines, screenrows=3)
        state.viewport.rowoff = 2
        text_rows, _, _ = split_frame(render(state), 3)
        assert text_rows[0] == b"c" + CLEAR_LINE
        assert filler_lines(text_rows) == 2

    def test_non_utf8_bytes_pass_through(self) -> None:
        state = make_state([b"\xff\xfe"], screenrows=1)
        text_rows, _, _ = split_frame(render(state), 1)
        assert text_rows[0] == b"\xff\xfe" + CLEAR_LINE


# ---------------------------------------------------------------------------
# Cursor placement
# ---------------------------------------------------------------------------


class TestCursorPlacement:
    def test_home_position(self) -> None:
        frame = render(make_state([b"abc"]))
        assert frame.endswith(cursor_to(1, 1) + SHOW_CURSOR)

    def test_screen_coordinates_subtract_offsets(self) -> None:
        lines = [b"x" * 30] * 10
        state = make_state(lines, cursor=Cursor(cx=12, cy=6))
        state.viewport.rowoff = 3
        state.viewport.coloff = 10
        frame = render(state)
        assert frame.endswith(cursor_to(4, 3) + SHOW_CURSOR)

    def test_negative_coordinates_clamped(self) -> None:
        lines = [b"x" * 30] * 10
        state = make_state(lines, cursor=Cursor(cx=1, cy=1))
        state.viewport.rowoff = 5
        state.viewport.coloff = 5
        frame = render(state)
        assert frame.endswith(cursor_to(1, 1) + SHOW_CURSOR)


# ---------------------------------------------------------------------------
# Status and message bars
# ---------------------------------------------------------------------------


class TestStatusBar:
    def test_shows_name_line_count_and_position(self) -> None:
        state = make_state(
            [b"a", b"b", b"c"],
            screencols=40,
            filename="notes.txt",
            cursor=Cursor(cx=0, cy=1),
        )
        _, status, _ = split_frame(render(state), 5)
        assert status.startswith(INVERT)
        assert status.endswith(RESET_ATTRS)
        text = status[len(INVERT) : -len(RESET_ATTRS)].decode()
        assert text.startswith("notes.txt - 3 lines")
        assert text.endswith("2/3")
        assert len(text) == 40

    def test_no_name(self) -> None:
        _, status, _ = split_frame(render(make_state([], screencols=40)), 5)
        assert b"[No Name] - 0 lines" in status

    def test_long_filename_truncated(self) -> None:
        state = make_state([], screencols=60, filename="a" * 50 + ".txt")
        _, status, _ = split_frame(render(state), 5)
        assert b"a" * 20 + b" - 0 lines" in status
        assert b"a" * 21 not in status

    def test_narrow_screen_fills_exact_width(self) -> None:
        state = make_state([b"x"] * 100, screencols=12, filename="report.md")
        _, status, _ = split_frame(render(state), 5)
        text = status[len(INVERT) : -len(RESET_ATTRS)].decode()
        assert visible_width(text) == 12
        assert text.startswith("report.md")

    def test_wide_characters_in_filename(self) -> None:
        state = make_state([], screencols=30, filename="日本語.txt")
        _, status, _ = split_frame(render(state), 5)
        text = status[len(INVERT) : -len(RESET_ATTRS)].decode()
        assert text.startswith("日本語.txt - 0 lines")
        assert visible_width(text) == 30

    def test_control_characters_in_filename_replaced(self) -> None:
        state = make_state([], screencols=40, filename="a\x1b[2Jb\x07\n.txt")
        frame = render(state)
        _, status, _ = split_frame(frame, 5)
        assert b"a?[2Jb??.txt - 0 lines" in status
        assert CLEAR_SCREEN not in frame
        assert b"\x07" not in frame

    def test_undecodable_filename_bytes_replaced(self) -> None:
        state = make_state([], screencols=40, filename="doc\udcff.txt")
        _, status, _ = split_frame(render(state), 5)
        assert b"doc?.txt - 0 lines" in status


class TestMessageBar:
    def test_fresh_message_shown(self) -> None:
        state = make_state([], status_message="HELP: Ctrl-Q = quit", status_time=NOW - 1)
        _, _, tail = split_frame(render(state), 5)
        assert tail.startswith(CLEAR_LINE + b"HELP: Ctrl-Q = quit")

    def test_expired_message_hidden(self) -> None:
        state = make_state([], status_message="old news", status_time=NOW - 10)
        _, _, tail = split_frame(render(state), 5)
        assert b"old news" not in tail
        assert tail.startswith(CLEAR_LINE + b"\x1b[")

    def test_custom_timeout(self) -> None:
        state = make_state([], status_message="hello", status_time=NOW - 10)
        _, _, tail = split_frame(render(state, message_timeout=30.0), 5)
        assert b"hello" in tail

    def test_message_truncated_to_width(self) -> None:
        state = make_state(
            [], screencols=10, status_message="0123456789abcdef", status_time=NOW
        )
        _, _, tail = split_frame(render(state), 5)
        assert tail.startswith(CLEAR_LINE + b"0123456789\x1b[")
