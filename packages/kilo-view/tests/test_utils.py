"""Tests for kilo.view.utils -- display width helpers."""

from __future__ import annotations

from kilo.view.utils import truncate_to_width, visible_width


class TestVisibleWidth:
    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_wide_cjk_characters_count_as_two(self) -> None:
        assert visible_width("世") == 2

    def test_mixed_ascii_and_wide(self) -> None:
        assert visible_width("A世B") == 4

    def test_combining_mark_adds_nothing(self) -> None:
        # "e" + COMBINING ACUTE ACCENT is one column.
        assert visible_width("e\u0301") == 1

    def test_control_characters_are_zero_width(self) -> None:
        assert visible_width("a\x07b") == 2


class TestTruncateToWidth:
    def test_short_text_unchanged(self) -> None:
        assert truncate_to_width("abc", 10) == "abc"

    def test_cut_at_width(self) -> None:
        assert truncate_to_width("abcdef", 4) == "abcd"

    def test_zero_width(self) -> None:
        assert truncate_to_width("abc", 0) == ""

    def test_wide_character_not_split(self) -> None:
        # Two wide characters need 4 columns; only one fits in 3.
        assert truncate_to_width("世世", 3) == "世"

    def test_pad(self) -> None:
        assert truncate_to_width("ab", 5, pad=True) == "ab   "

    def test_pad_after_wide_character_cut(self) -> None:
        assert truncate_to_width("世世", 3, pad=True) == "世 "

    def test_keeps_grapheme_clusters_whole(self) -> None:
        assert truncate_to_width("e\u0301x", 1) == "e\u0301"
