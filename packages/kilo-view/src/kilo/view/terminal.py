"""Terminal access: raw mode, bounded-wait byte I/O and geometry.

``TerminalModeController`` captures the terminal attributes once, switches
the descriptor into raw mode and puts the captured attributes back exactly
on release.  :func:`raw_mode` wraps it in a context manager that also
turns termination signals into ``SystemExit`` and registers an ``atexit``
hook, so the terminal is restored on every way out of the process.

``ProcessTerminal`` is the concrete byte-level I/O backend used by the
editor loop.
"""

from __future__ import annotations

import atexit
import logging
import os
import signal
import termios
from contextlib import contextmanager
from typing import Any, Iterator, Protocol

from kilo.view.errors import GeometryError, TTYError

logger = logging.getLogger(__name__)

_TERMINATION_SIGNALS = (
    signal.SIGTERM,
    signal.SIGHUP,
    signal.SIGINT,
    signal.SIGQUIT,
)


# ---------------------------------------------------------------------------
# Raw mode
# ---------------------------------------------------------------------------


class TerminalModeController:
    """Acquires and releases raw input mode on a terminal descriptor.

    Parameters
    ----------
    fd:
        Descriptor of the controlling terminal (normally stdin).
    read_timeout:
        Read timeout in deciseconds (``VTIME``).  Reads return as soon as
        one byte is available or when the timeout elapses.
    """

    def __init__(self, fd: int, *, read_timeout: int = 1) -> None:
        self._fd = fd
        self._read_timeout = read_timeout
        self._snapshot: list[Any] | None = None

    @property
    def active(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> list[Any] | None:
        """Attributes captured when raw mode was entered."""
        return self._snapshot

    def enter_raw_mode(self) -> None:
        """Switch the terminal into raw mode.  A no-op when already active."""
        if self._snapshot is not None:
            return

        if not os.isatty(self._fd):
            raise TTYError(f"file descriptor {self._fd} is not a terminal")

        try:
            snapshot = termios.tcgetattr(self._fd)
        except termios.error as exc:
            raise TTYError(f"tcgetattr failed: {exc}") from exc

        try:
            termios.tcsetattr(
                self._fd,
                termios.TCSAFLUSH,
                _make_raw(snapshot, self._read_timeout),
            )
        except termios.error as exc:
            raise TTYError(f"tcsetattr failed: {exc}") from exc

        self._snapshot = snapshot
        logger.debug("Entered raw mode on fd %d", self._fd)

    def exit_restore(self) -> None:
        """Put back the captured attributes.  A no-op when not active."""
        if self._snapshot is None:
            return

        snapshot, self._snapshot = self._snapshot, None
        try:
            termios.tcsetattr(self._fd, termios.TCSAFLUSH, snapshot)
        except termios.error as exc:
            raise TTYError(f"tcsetattr failed: {exc}") from exc
        logger.debug("Restored terminal attributes on fd %d", self._fd)

    def __enter__(self) -> TerminalModeController:
        self.enter_raw_mode()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.exit_restore()


@contextmanager
def raw_mode(fd: int, *, read_timeout: int = 1) -> Iterator[TerminalModeController]:
    """Hold the terminal in raw mode for the duration of the block.

    Termination signals raise ``SystemExit`` inside the block so that the
    ``finally`` clause restores the terminal before the process ends; the
    ``atexit`` hook covers interpreter shutdown paths that skip it.
    """
    controller = TerminalModeController(fd, read_timeout=read_timeout)
    controller.enter_raw_mode()
    atexit.register(controller.exit_restore)
    previous: dict[int, Any] = {}
    try:
        _install_signal_handlers(previous)
        yield controller
    finally:
        _restore_signal_handlers(previous)
        atexit.unregister(controller.exit_restore)
        controller.exit_restore()


def _make_raw(mode: list[Any], read_timeout: int) -> list[Any]:
    """Return a raw-mode copy of the attribute list *mode*."""
    iflag, oflag, cflag, lflag, ispeed, ospeed, cc = mode

    iflag &= ~(
        termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
    )
    oflag &= ~termios.OPOST
    cflag |= termios.CS8
    lflag &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)

    cc = list(cc)
    cc[termios.VMIN] = 0
    cc[termios.VTIME] = read_timeout

    return [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]


def _on_termination_signal(signum: int, frame: object) -> None:
    logger.info("Received %s, leaving raw mode", signal.Signals(signum).name)
    raise SystemExit(128 + signum)


def _install_signal_handlers(previous: dict[int, Any]) -> None:
    for signum in _TERMINATION_SIGNALS:
        previous[signum] = signal.getsignal(signum)
        signal.signal(signum, _on_termination_signal)


def _restore_signal_handlers(previous: dict[int, Any]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


def get_window_size(fd: int) -> tuple[int, int]:
    """Return ``(rows, columns)`` of the terminal behind *fd*."""
    try:
        size = os.get_terminal_size(fd)
    except OSError as exc:
        raise GeometryError(f"unable to query terminal size: {exc}") from exc

    if size.lines <= 0 or size.columns <= 0:
        raise GeometryError(
            f"terminal reported an empty size ({size.lines}x{size.columns})"
        )
    return size.lines, size.columns


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Byte-level terminal I/O used by the editor loop."""

    def read_byte(self) -> int | None: ...

    def write(self, data: bytes) -> None: ...

    def size(self) -> tuple[int, int]: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Terminal backed by the process's stdin/stdout descriptors.

    Reads rely on the ``VMIN``/``VTIME`` settings applied by
    :class:`TerminalModeController`: each read returns after at most the
    configured timeout.
    """

    def __init__(
        self,
        in_fd: int = 0,
        out_fd: int = 1,
        *,
        write_log: str = "",
    ) -> None:
        self._in_fd = in_fd
        self._out_fd = out_fd
        self._write_log_path = write_log

    @property
    def in_fd(self) -> int:
        return self._in_fd

    @property
    def out_fd(self) -> int:
        return self._out_fd

    def read_byte(self) -> int | None:
        try:
            data = os.read(self._in_fd, 1)
        except BlockingIOError:
            return None
        if not data:
            return None
        return data[0]

    def write(self, data: bytes) -> None:
        """Write *data* in full, then append it to the write log if set."""
        view = memoryview(data)
        while view:
            written = os.write(self._out_fd, view)
            view = view[written:]

        if self._write_log_path:
            try:
                with open(self._write_log_path, "ab") as f:
                    f.write(data)
            except OSError:
                pass

    def size(self) -> tuple[int, int]:
        return get_window_size(self._out_fd)
