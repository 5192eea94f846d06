"""kilo-view: raw-mode terminal viewer core."""

__version__ = "0.1.0"

from kilo.view.config import ViewerConfig, load_config
from kilo.view.editor import (
    Cursor,
    Editor,
    EditorState,
    Viewport,
    move_cursor,
    new_state,
    scroll,
)
from kilo.view.errors import GeometryError, TTYError, ViewerError
from kilo.view.keys import Key, KeyDecoder, KeyValue, ctrl_key
from kilo.view.loader import LoadStatus, load_file
from kilo.view.render import ViewportRenderer
from kilo.view.rows import Row, RowStore
from kilo.view.terminal import (
    ProcessTerminal,
    Terminal,
    TerminalModeController,
    get_window_size,
    raw_mode,
)

__all__ = [
    "__version__",
    # Config
    "ViewerConfig",
    "load_config",
    # Editor loop
    "Cursor",
    "Editor",
    "EditorState",
    "Viewport",
    "move_cursor",
    "new_state",
    "scroll",
    # Errors
    "GeometryError",
    "TTYError",
    "ViewerError",
    # Keys
    "Key",
    "KeyDecoder",
    "KeyValue",
    "ctrl_key",
    # Loading
    "LoadStatus",
    "load_file",
    # Rendering
    "ViewportRenderer",
    # Rows
    "Row",
    "RowStore",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    "TerminalModeController",
    "get_window_size",
    "raw_mode",
]
