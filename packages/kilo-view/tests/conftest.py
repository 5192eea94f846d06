from __future__ import annotations

import fcntl
import os
import struct
import termios
from typing import Iterator

import pytest


@pytest.fixture
def pty_pair() -> Iterator[tuple[int, int]]:
    """A pseudo-terminal as ``(master_fd, slave_fd)``, sized 24x80."""
    master, slave = os.openpty()
    fcntl.ioctl(slave, termios.TIOCSWINSZ, struct.pack("HHHH", 24, 80, 0, 0))
    yield master, slave
    os.close(slave)
    os.close(master)


@pytest.fixture
def pipe_fds() -> Iterator[tuple[int, int]]:
    """A pipe as ``(read_fd, write_fd)``: a descriptor that is not a terminal."""
    r, w = os.pipe()
    yield r, w
    os.close(r)
    os.close(w)


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("KILO_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("KILO_WRITE_LOG", raising=False)
    monkeypatch.delenv("KILO_LOG_FILE", raising=False)
