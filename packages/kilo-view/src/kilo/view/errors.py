"""Error types raised by the viewer core."""

from __future__ import annotations


class ViewerError(Exception):
    """Base class for fatal viewer errors."""


class TTYError(ViewerError):
    """Raw mode could not be entered or the terminal attributes could not be
    read or written."""


class GeometryError(ViewerError):
    """The terminal size is unknown or too small to render into."""
