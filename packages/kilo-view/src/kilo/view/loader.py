"""Populate a :class:`RowStore` from a file on disk."""

from __future__ import annotations

import enum
import logging
from pathlib import Path

from kilo.view.rows import RowStore

logger = logging.getLogger(__name__)


class LoadStatus(enum.Enum):
    LOADED = "loaded"
    # The file does not exist yet; the document starts empty.
    NEW_FILE = "new-file"


def load_file(path: str | Path, rows: RowStore) -> LoadStatus:
    """Append every line of *path* to *rows*, line terminators stripped.

    Errors other than a missing file (permissions, *path* being a
    directory, ...) propagate.
    """
    try:
        f = open(path, "rb")
    except FileNotFoundError:
        logger.info("%s does not exist, starting empty", path)
        return LoadStatus.NEW_FILE

    with f:
        for line in f:
            rows.append_row(line.rstrip(b"\r\n"))

    logger.info("Loaded %d rows from %s", rows.count, path)
    return LoadStatus.LOADED
