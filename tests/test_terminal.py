import os
import termios
from unittest import mock

import pytest

from tera.terminal import (
    ESC,
    Key,
    RawMode,
    ctrl_key,
    decode_key,
    get_window_size,
    parse_cursor_position,
    read_key,
)


def make_reader(data, leading_empty=0):
    items = [b""] * leading_empty + [bytes([b]) for b in data]
    iterator = iter(items)
    return lambda: next(iterator, b"")


def test_ctrl_key():
    assert ctrl_key("a") == 1
    assert ctrl_key("h") == ctrl_key("H")


@pytest.mark.parametrize(
    "data, key",
    [
        (b"\x1b[A", Key.ARROW_UP),
        (b"\x1b[B", Key.ARROW_DOWN),
        (b"\x1b[C", Key.ARROW_RIGHT),
        (b"\x1b[D", Key.ARROW_LEFT),
        (b"\x1b[H", Key.HOME_KEY),
        (b"\x1b[F", Key.END_KEY),
        (b"\x1b[1~", Key.HOME_KEY),
        (b"\x1b[2~", Key.END_KEY),
        (b"\x1b[3~", Key.DEL_KEY),
        (b"\x1b[5~", Key.PAGE_UP),
        (b"\x1b[6~", Key.PAGE_DOWN),
        (b"\x1b[7~", Key.HOME_KEY),
        (b"\x1b[8~", Key.END_KEY),
        (b"\x1bOH", Key.HOME_KEY),
        (b"\x1bOF", Key.END_KEY),
    ],
)
def test_decode_escape_sequences(data, key):
    assert decode_key(make_reader(data)) == key


@pytest.mark.parametrize("data", [b"\x1b", b"\x1b[", b"\x1b[5", b"\x1b[9~", b"\x1b[Z", b"\x1bx1"])
def test_incomplete_or_unknown_sequences_give_escape(data):
    assert decode_key(make_reader(data)) == ESC


def test_plain_byte_after_timeouts():
    assert decode_key(make_reader(b"q", leading_empty=3)) == ord("q")


def test_backspace_byte_is_key():
    assert decode_key(make_reader(b"\x7f")) == Key.BACKSPACE


def test_read_key_from_pipe():
    r, w = os.pipe()
    try:
        os.write(w, b"\x1b[B")
        os.close(w)
        w = None
        assert read_key(r) == Key.ARROW_DOWN
    finally:
        os.close(r)
        if w is not None:
            os.close(w)


def test_parse_cursor_position():
    assert parse_cursor_position(b"\x1b[24;80R") == (24, 80)
    assert parse_cursor_position(b"\x1b[24;80") == (24, 80)


@pytest.mark.parametrize("response", [b"", b"24;80R", b"\x1b[24R", b"\x1b[x;yR"])
def test_parse_cursor_position_rejects_garbage(response):
    with pytest.raises(ValueError):
        parse_cursor_position(response)


def test_get_window_size_falls_back_to_cursor_query():
    in_r, in_w = os.pipe()
    out_r, out_w = os.pipe()
    try:
        os.write(in_w, b"\x1b[24;80R")
        os.close(in_w)
        assert get_window_size(in_r, out_w) == (24, 80)
        os.close(out_w)
        written = os.read(out_r, 64)
        assert written == b"\x1b[999C\x1b[999B\x1b[6n"
    finally:
        os.close(in_r)
        os.close(out_r)


def test_get_window_size_bad_reply_raises():
    in_r, in_w = os.pipe()
    out_r, out_w = os.pipe()
    try:
        os.write(in_w, b"garbage")
        os.close(in_w)
        with pytest.raises(OSError):
            get_window_size(in_r, out_w)
    finally:
        os.close(in_r)
        os.close(out_r)
        os.close(out_w)


def test_raw_mode_on_pipe_fails():
    r, w = os.pipe()
    try:
        with pytest.raises(termios.error):
            with RawMode(r):
                pass
    finally:
        os.close(r)
        os.close(w)


def _cooked_attrs():
    cc = [b"\x00"] * 32
    cc[termios.VMIN] = b"\x01"
    cc[termios.VTIME] = b"\x00"
    iflag = termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
    oflag = termios.OPOST
    cflag = termios.CS8
    lflag = termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG
    return [iflag, oflag, cflag, lflag, 38400, 38400, cc]


def test_raw_mode_sets_and_restores():
    with mock.patch("termios.tcgetattr", side_effect=lambda fd: _cooked_attrs()), mock.patch(
        "termios.tcsetattr"
    ) as setattr_mock:
        raw_mode = RawMode(7)
        raw_mode.__enter__()
        assert setattr_mock.call_count == 1
        raw = setattr_mock.call_args.args[2]
        assert setattr_mock.call_args.args[0] == 7
        assert not raw[3] & termios.ECHO
        assert not raw[3] & termios.ICANON
        assert not raw[3] & termios.ISIG
        assert not raw[0] & termios.IXON
        assert not raw[1] & termios.OPOST
        assert raw[6][termios.VMIN] in (0, b"\x00")
        assert raw[6][termios.VTIME] in (1, b"\x01")

        suppressed = raw_mode.__exit__(None, None, None)
        assert not suppressed
        assert setattr_mock.call_count == 2
        restored = setattr_mock.call_args.args[2]
        assert restored == _cooked_attrs()


def test_raw_mode_restores_and_propagates_errors():
    with mock.patch("termios.tcgetattr", side_effect=lambda fd: _cooked_attrs()), mock.patch(
        "termios.tcsetattr"
    ) as setattr_mock:
        raw_mode = RawMode(7)
        raw_mode.__enter__()
        error = RuntimeError("boom")
        suppressed = raw_mode.__exit__(RuntimeError, error, None)
        assert not suppressed
        assert setattr_mock.call_count == 2
        assert setattr_mock.call_args.args[2] == _cooked_attrs()

        with pytest.raises(RuntimeError, match="boom"):
            with RawMode(7):
                raise RuntimeError("boom")
        assert setattr_mock.call_count == 4
        assert setattr_mock.call_args.args[2] == _cooked_attrs()