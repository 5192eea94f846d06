"""Ordered, indexed collection of text rows.

Every row remembers its own position in the store.  ``RowStore`` keeps those
positions contiguous (``0..count-1``) across every insert.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

logger = logging.getLogger(__name__)


@dataclass
class Row:
    """A single line of the document, stored as raw bytes."""

    idx: int
    chars: bytes

    @property
    def size(self) -> int:
        return len(self.chars)


class RowStore:
    """Owns the document's rows.

    Rows are only ever added; there is no delete or in-place edit.
    """

    def __init__(self) -> None:
        self._rows: list[Row] = []

    # -- queries -------------------------------------------------------------

    @property
    def count(self) -> int:
        return len(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __getitem__(self, index: int) -> Row:
        # No negative wrap-around: row -1 is an error, not the last row.
        if not 0 <= index < len(self._rows):
            raise IndexError(f"row index {index} out of range")
        return self._rows[index]

    def row_size(self, index: int) -> int:
        """Length of row *index*, or 0 when it does not exist."""
        if 0 <= index < len(self._rows):
            return self._rows[index].size
        return 0

    # -- mutation ------------------------------------------------------------

    def insert_row(self, at: int, content: bytes) -> None:
        """Insert a copy of *content* as a new row at position *at*.

        Rows at positions ``>= at`` move one slot later and their stored
        index grows by one.  An index outside ``0..count`` is ignored on
        purpose: the insert has no effect and no error is raised.
        """
        if not 0 <= at <= len(self._rows):
            logger.debug("Ignoring row insert at %d (count=%d)", at, len(self._rows))
            return

        self._rows.insert(at, Row(idx=at, chars=bytes(content)))
        for row in self._rows[at + 1 :]:
            row.idx += 1

    def append_row(self, content: bytes) -> None:
        self.insert_row(len(self._rows), content)
