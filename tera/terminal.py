"""Raw terminal mode, key decoding and window size queries."""

from __future__ import annotations

import enum
import fcntl
import os
import re
import struct
import termios
from typing import Callable, Optional

ESC = 0x1B


class Key(enum.IntEnum):
    """Special keys decoded from terminal input."""

    BACKSPACE = 127
    ARROW_LEFT = 1000
    ARROW_RIGHT = 1001
    ARROW_UP = 1002
    ARROW_DOWN = 1003
    DEL_KEY = 1004
    HOME_KEY = 1005
    END_KEY = 1006
    PAGE_UP = 1007
    PAGE_DOWN = 1008


def ctrl_key(k: str) -> int:
    """Return the code produced by pressing Ctrl together with ``k``."""
    return ord(k) & 0x1F


_TILDE_KEYS = {
    b"1": Key.HOME_KEY,
    b"2": Key.END_KEY,
    b"3": Key.DEL_KEY,
    b"5": Key.PAGE_UP,
    b"6": Key.PAGE_DOWN,
    b"7": Key.HOME_KEY,
    b"8": Key.END_KEY,
}

_CSI_KEYS = {
    b"A": Key.ARROW_UP,
    b"B": Key.ARROW_DOWN,
    b"C": Key.ARROW_RIGHT,
    b"D": Key.ARROW_LEFT,
    b"H": Key.HOME_KEY,
    b"F": Key.END_KEY,
}

_SS3_KEYS = {
    b"H": Key.HOME_KEY,
    b"F": Key.END_KEY,
}


class RawMode:
    """Context manager that puts a terminal into raw mode and restores it."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._saved: Optional[list] = None

    def __enter__(self) -> "RawMode":
        self._saved = termios.tcgetattr(self.fd)
        iflag, oflag, cflag, lflag, ispeed, ospeed, cc = termios.tcgetattr(self.fd)
        cc = list(cc)
        cflag &= ~termios.CS8
        iflag &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        lflag &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        oflag &= ~termios.OPOST
        cc[termios.VMIN] = 0
        cc[termios.VTIME] = 1
        termios.tcsetattr(
            self.fd, termios.TCSAFLUSH, [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]
        )
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, self._saved)
            self._saved = None


def decode_key(read_byte: Callable[[], Optional[bytes]]) -> int:
    """Read one keypress using ``read_byte`` and return its key code.

    ``read_byte`` returns one byte, or an empty value when nothing arrived in
    time. The first byte is waited for; an incomplete escape sequence yields ESC.
    """
    c = read_byte()
    while not c:
        c = read_byte()
    if c != b"\x1b":
        return c[0]

    first = read_byte()
    if not first:
        return ESC
    second = read_byte()
    if not second:
        return ESC

    if first == b"[":
        if second.isdigit():
            third = read_byte()
            if not third:
                return ESC
            if third == b"~":
                return _TILDE_KEYS.get(second, ESC)
            return ESC
        return _CSI_KEYS.get(second, ESC)
    if first == b"O":
        return _SS3_KEYS.get(second, ESC)
    return ESC


def _read_byte(fd: int) -> bytes:
    try:
        return os.read(fd, 1)
    except BlockingIOError:
        return b""


def read_key(fd: int) -> int:
    """Read and decode one keypress from file descriptor ``fd``."""
    return decode_key(lambda: _read_byte(fd))


_CURSOR_REPORT = re.compile(rb"\s*([+-]?\d+);\s*([+-]?\d+)")


def parse_cursor_position(response: bytes) -> tuple[int, int]:
    """Parse a cursor position report ``ESC [ rows ; cols R``."""
    report = response.split(b"R", 1)[0]
    if not report.startswith(b"\x1b["):
        raise ValueError("cursor position report must start with ESC [")
    match = _CURSOR_REPORT.match(report, 2)
    if match is None:
        raise ValueError("malformed cursor position report")
    return int(match[1]), int(match[2])


def _write_exact(fd: int, data: bytes) -> None:
    if os.write(fd, data) != len(data):
        raise OSError("short write to terminal")


def _query_cursor_position(fd_in: int, fd_out: int) -> tuple[int, int]:
    _write_exact(fd_out, b"\x1b[6n")
    response = bytearray()
    while len(response) < 31:
        byte = _read_byte(fd_in)
        if not byte or byte == b"R":
            break
        response += byte
    try:
        return parse_cursor_position(bytes(response))
    except ValueError as exc:
        raise OSError("unable to determine window size") from exc


def get_window_size(fd_in: int, fd_out: int) -> tuple[int, int]:
    """Return the terminal size as ``(rows, cols)``.

    Falls back to moving the cursor to the far corner and asking for its
    position when the size cannot be read directly.
    """
    try:
        packed = fcntl.ioctl(fd_out, termios.TIOCGWINSZ, struct.pack("HHHH", 0, 0, 0, 0))
        rows, cols, _, _ = struct.unpack("HHHH", packed)
    except OSError:
        rows, cols = 0, 0
    if cols:
        return rows, cols
    _write_exact(fd_out, b"\x1b[999C\x1b[999B")
    return _query_cursor_position(fd_in, fd_out)