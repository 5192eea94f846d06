"""Display-width helpers for the status and message bars.

Document rows are drawn as raw bytes clipped by byte count, but the bar
texts are ordinary strings (file names may be non-ASCII) and are fitted to
the screen by display columns.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _grapheme_width(g: str) -> int:
    """Terminal columns taken by one grapheme cluster.

    Control characters and combining marks take no columns; clusters that
    carry an emoji presentation selector or a ZWJ take two.
    """
    if not g:
        return 0

    cp = ord(g[0])
    if len(g) == 1:
        if cp < 0x20 or 0x7F <= cp <= 0x9F:
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    if "\ufe0f" in g or "\u200d" in g:  # VS16, ZWJ
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0
    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Number of terminal columns *text* occupies."""
    if not text:
        return 0

    if text.isascii() and text.isprintable():
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(text))
    return _cache_width(text, total)


def truncate_to_width(text: str, max_width: int, pad: bool = False) -> str:
    """Cut *text* at a grapheme boundary so it fits in *max_width* columns.

    With *pad* the result is right-padded with spaces to exactly
    *max_width* columns.
    """
    if max_width <= 0:
        return ""

    parts: list[str] = []
    cols = 0
    for g in grapheme.graphemes(text):
        w = _grapheme_width(g)
        if cols + w > max_width:
            break
        parts.append(g)
        cols += w

    result = "".join(parts)
    if pad and cols < max_width:
        result += " " * (max_width - cols)
    return result
