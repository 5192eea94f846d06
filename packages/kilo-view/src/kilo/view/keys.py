"""Keyboard input decoding.

Turns the raw byte stream of a terminal in raw mode into logical key
values.  Plain bytes are passed through as integers; the escape sequences
that terminals emit for navigation keys are folded into :class:`Key`
members.  Decoding is a small bounded-lookahead state machine: after an
escape byte at most three more bytes are read, each under the reader's
own timeout, so a lone ESC is reported as :attr:`Key.ESCAPE` instead of
blocking for a sequence that never arrives.
"""

from __future__ import annotations

import enum
import logging
from typing import Protocol, Union

logger = logging.getLogger(__name__)

ESC = 0x1B


class Key(str, enum.Enum):
    """Named keys produced from multi-byte escape sequences."""

    ARROW_UP = "up"
    ARROW_DOWN = "down"
    ARROW_LEFT = "left"
    ARROW_RIGHT = "right"
    PAGE_UP = "pageUp"
    PAGE_DOWN = "pageDown"
    HOME = "home"
    END = "end"
    DELETE = "delete"
    ESCAPE = "escape"


# A decoded key: either a literal input byte (0..255) or a named key.
KeyValue = Union[int, Key]


def ctrl_key(ch: str) -> int:
    """Byte produced by pressing Ctrl together with *ch* (``ctrl_key("q") == 0x11``)."""
    return ord(ch) & 0x1F


# ---------------------------------------------------------------------------
# Sequence tables
# ---------------------------------------------------------------------------

# ESC [ <letter>
_CSI_FINAL: dict[int, Key] = {
    ord("A"): Key.ARROW_UP,
    ord("B"): Key.ARROW_DOWN,
    ord("C"): Key.ARROW_RIGHT,
    ord("D"): Key.ARROW_LEFT,
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

# ESC [ <digit> ~
_CSI_TILDE: dict[int, Key] = {
    ord("3"): Key.DELETE,
    ord("5"): Key.PAGE_UP,
    ord("6"): Key.PAGE_DOWN,
}

# ESC O <letter>
_SS3_FINAL: dict[int, Key] = {
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

_SS3_PREFIXES = (ord("O"), ord("o"))


class _State(enum.Enum):
    ESC = "esc"
    CSI = "csi"
    CSI_PARAM = "csi-param"
    SS3 = "ss3"


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------


class ByteReader(Protocol):
    """Source of single input bytes with a bounded wait."""

    def read_byte(self) -> int | None:
        """Return the next byte, or ``None`` if none arrived in time."""
        ...


class KeyDecoder:
    """Decodes one logical key per :meth:`decode` call."""

    def __init__(self, reader: ByteReader) -> None:
        self._reader = reader

    def decode(self) -> KeyValue | None:
        """Read and decode the next key.

        Returns ``None`` when no byte arrived within the read timeout.
        """
        first = self._reader.read_byte()
        if first is None:
            return None
        if first != ESC:
            return first

        key = self._decode_escape()
        logger.debug("Decoded key %s", key.name)
        return key

    def _decode_escape(self) -> Key:
        state = _State.ESC
        param = 0

        while True:
            byte = self._reader.read_byte()
            if byte is None:
                return Key.ESCAPE

            if state is _State.ESC:
                if byte == ord("["):
                    state = _State.CSI
                elif byte in _SS3_PREFIXES:
                    state = _State.SS3
                else:
                    return Key.ESCAPE

            elif state is _State.CSI:
                if byte in _CSI_FINAL:
                    return _CSI_FINAL[byte]
                if ord("0") <= byte <= ord("9"):
                    param = byte
                    state = _State.CSI_PARAM
                else:
                    return Key.ESCAPE

            elif state is _State.CSI_PARAM:
                if byte == ord("~") and param in _CSI_TILDE:
                    return _CSI_TILDE[param]
                return Key.ESCAPE

            else:  # _State.SS3
                return _SS3_FINAL.get(byte, Key.ESCAPE)
