"""Viewer configuration.

Defaults live on :class:`ViewerConfig`; ``$KILO_CONFIG_DIR/config.json``
(``~/.kilo/config.json`` by default) may override any field, and a few
environment variables supply paths.
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class ViewerConfig:
    """Runtime settings for the viewer."""

    # Bounded-wait read timeout, in deciseconds (termios VTIME).
    read_timeout: int = 1
    # Letter that quits together with Ctrl.
    quit_key: str = "q"
    filler: str = "~"
    message_timeout: float = 5.0
    show_welcome: bool = True
    write_log: str = field(default_factory=lambda: os.environ.get("KILO_WRITE_LOG", ""))
    log_file: str = field(default_factory=lambda: os.environ.get("KILO_LOG_FILE", ""))
    log_level: str = "warning"

    def validate(self) -> None:
        for name, expected in _FIELD_TYPES.items():
            value = getattr(self, name)
            # bool is an int subclass but never a valid number here.
            if isinstance(value, bool) != (expected is bool) or not isinstance(value, expected):
                raise ValueError(f"{name} must be of type {_type_name(expected)}, got {value!r}")

        if not 1 <= self.read_timeout <= 255:
            raise ValueError(f"read_timeout must be 1..255, got {self.read_timeout}")
        if len(self.quit_key) != 1 or not (
            self.quit_key.isascii() and self.quit_key.isalpha()
        ):
            raise ValueError(f"quit_key must be a single letter, got {self.quit_key!r}")
        if not self.filler:
            raise ValueError("filler must not be empty")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")


_FIELD_TYPES: dict[str, type | tuple[type, ...]] = {
    "read_timeout": int,
    "quit_key": str,
    "filler": str,
    "message_timeout": (int, float),
    "show_welcome": bool,
    "write_log": str,
    "log_file": str,
    "log_level": str,
}


def _type_name(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


def _get_config_dir() -> Path:
    return Path(os.environ.get("KILO_CONFIG_DIR", Path.home() / ".kilo"))


def _get_config_path() -> Path:
    return _get_config_dir() / "config.json"


def load_config() -> ViewerConfig:
    """Build the configuration from defaults and the optional config file."""
    config = ViewerConfig()
    config_path = _get_config_path()
    if not config_path.exists():
        return config

    try:
        data = json.loads(config_path.read_text())
    except (OSError, ValueError) as e:
        print(f"Error reading config: {e}", file=sys.stderr)
        return config

    if not isinstance(data, dict):
        print(f"Error reading config: {config_path} is not a JSON object", file=sys.stderr)
        return config

    known = {f.name for f in fields(ViewerConfig)}
    overrides = {k: v for k, v in data.items() if k in known}
    config = replace(config, **overrides)
    config.validate()
    return config
