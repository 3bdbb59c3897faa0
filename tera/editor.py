"""The interactive editor: cursor movement, editing, search, saving and drawing."""

from __future__ import annotations

import os
import sys
import termios
import time
from typing import Callable, Optional

from tera.highlight import Highlight, syntax_to_color
from tera.rows import Document
from tera.syntax import select_syntax
from tera.terminal import Key, RawMode, ctrl_key, get_window_size, read_key

VERSION = "0.0.1"
QUIT_TIMES = 1
MESSAGE_TIMEOUT = 5
_STATUS_LIMIT = 79

ENTER = ord("\r")
ESCAPE = 0x1B

_CLEAR_SCREEN = "\x1b[2J\x1b[H"


def _is_control(code: int) -> bool:
    return 0 <= code < 32 or code == 127


class Editor:
    """Editor state bound to a key source and an output sink.

    ``screenrows`` is the number of text rows, not counting the status and
    message bars. ``read_key`` returns one key code per call and ``write``
    receives each finished frame as bytes. The cursor column ``cx`` counts the
    line-number gutter of ``ln_width + 1`` columns.
    """

    def __init__(
        self,
        screenrows: int,
        screencols: int,
        read_key: Callable[[], int],
        write: Callable[[bytes], object],
    ) -> None:
        self.screenrows = screenrows
        self.screencols = screencols
        self.read_key = read_key
        self.write = write
        self.clock: Callable[[], float] = time.time
        self.doc = Document()
        self.cx = 0
        self.cy = 0
        self.rx = 0
        self.rowoff = 0
        self.coloff = 0
        self.ln_width = 0
        self.filename: Optional[str] = None
        self.status_message = ""
        self.status_time = 0.0
        self._quit_times = QUIT_TIMES
        self._last_match = -1
        self._direction = 1
        self._saved_hl: Optional[tuple[int, list[Highlight]]] = None

    # File I/O

    def open(self, filename: str) -> None:
        """Load ``filename`` into the document; errors opening it propagate."""
        self.filename = filename
        self.doc.set_syntax(select_syntax(filename))
        with open(filename, "rb") as handle:
            data = handle.read().decode("latin-1")
        lines = data.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        for line in lines:
            self.doc.insert_row(len(self.doc), line.rstrip("\r\n"))
        self.doc.dirty = 0

    def save(self) -> None:
        """Write the document to its file, asking for a name if it has none."""
        if self.filename is None:
            self.filename = self.prompt("Save as: {} (ESC to cancel)", None)
            if self.filename is None:
                self.set_status_message("Save aborted")
                return
            self.doc.set_syntax(select_syntax(self.filename))

        data = self.doc.to_string().encode("latin-1", errors="replace")
        try:
            fd = os.open(self.filename, os.O_RDWR | os.O_CREAT, 0o644)
            try:
                os.ftruncate(fd, len(data))
                if os.write(fd, data) != len(data):
                    raise OSError("short write")
            finally:
                os.close(fd)
        except OSError as exc:
            reason = exc.strerror or str(exc)
            self.set_status_message(f"Can't save! I/O error: {reason}")
            return
        self.doc.dirty = 0
        self.set_status_message(f"{len(data)} bytes written to disk")

    # Editing

    def insert_char(self, c: int) -> None:
        """Insert the character with code ``c`` at the cursor."""
        if self.cy == len(self.doc):
            self.doc.insert_row(len(self.doc), "")
            offset = 2 if len(self.doc) % 10 == 0 else 1
            self.cx = self.ln_width + offset
        self.doc.insert_char(self.cy, self.cx - self.ln_width - 1, chr(c))
        self.cx += 1

    def insert_newline(self) -> None:
        """Split the current line at the cursor."""
        if self.cx == self.ln_width + 1 or self.cy >= len(self.doc):
            self.doc.insert_row(self.cy, "")
        else:
            chars = self.doc[self.cy].chars
            at = min(max(self.cx - self.ln_width - 1, 0), len(chars))
            self.doc.insert_row(self.cy + 1, chars[at:])
            self.doc.truncate_row(self.cy, at)
        self.cy += 1
        self.cx = self.ln_width + 1

    def delete_char(self) -> None:
        """Delete the character left of the cursor, joining lines at line start."""
        if self.cy == len(self.doc):
            return
        if self.cx == 0 and self.cy == 0:
            return
        if self.cx > self.ln_width + 1:
            self.doc.delete_char(self.cy, self.cx - self.ln_width - 2)
            self.cx -= 1
            return
        if self.cy == 0:
            return
        chars = self.doc[self.cy].chars
        self.cx = len(self.doc[self.cy - 1].chars) + self.ln_width + 1
        self.doc.append_string(self.cy - 1, chars)
        self.doc.delete_row(self.cy)
        self.cy -= 1

    def move_cursor(self, key: int) -> None:
        """Move the cursor for an arrow key."""
        row = self.doc[self.cy] if self.cy < len(self.doc) else None
        start = self.ln_width + 1

        if key == Key.ARROW_LEFT:
            if self.cx != start:
                self.cx -= 1
            elif self.cy > 0:
                self.cy -= 1
                self.cx = len(self.doc[self.cy].chars) + start
        elif key == Key.ARROW_RIGHT:
            if row is not None:
                end = len(row.chars) + start
                if self.cx < end:
                    self.cx += 1
                elif self.cx == end:
                    self.cy += 1
                    self.cx = start
        elif key == Key.ARROW_UP:
            if self.cy != 0:
                self.cy -= 1
                self.cx = max(self.cx, start)
        elif key == Key.ARROW_DOWN:
            if self.cy < len(self.doc):
                self.cy += 1

        row = self.doc[self.cy] if self.cy < len(self.doc) else None
        rowlen = len(row.chars) + self.ln_width if row is not None else 0
        if self.cx > rowlen:
            self.cx = rowlen + 1

    # Output

    def scroll(self) -> None:
        """Adjust the offsets so the cursor stays on screen."""
        self.rx = 0
        if self.cy < len(self.doc):
            self.rx = self.doc[self.cy].cx_to_rx(max(self.cx, 0))
        if self.cy < self.rowoff:
            self.rowoff = self.cy
        if self.cy >= self.rowoff + self.screenrows:
            self.rowoff = self.cy - self.screenrows + 1
        if self.rx < self.coloff:
            self.coloff = self.rx
        if self.rx >= self.coloff + self.screencols:
            self.coloff = self.rx - self.screencols + 1

    def _draw_rows(self, out: list[str]) -> None:
        for y in range(self.screenrows):
            filerow = y + self.rowoff
            if filerow >= len(self.doc):
                if len(self.doc) == 0 and y == self.screenrows // 3:
                    welcome = f"Tera Editor -- Version {VERSION}"[: max(self.screencols, 0)]
                    padding = (self.screencols - len(welcome)) // 2
                    if padding:
                        out.append("~")
                        padding -= 1
                    out.append(" " * max(padding, 0))
                    out.append(welcome)
                else:
                    out.append("~")
            else:
                self._draw_text_row(out, filerow)
            out.append("\x1b[K")
            out.append("\r\n")

    def _draw_text_row(self, out: list[str], filerow: int) -> None:
        row = self.doc[filerow]
        out.append("\x1b[30m")
        out.append(str(filerow + 1).rjust(self.ln_width) + " ")
        out.append("\x1b[39m")

        length = max(len(row.render) - self.coloff, 0)
        length = max(min(length, self.screencols - self.ln_width - 2), 0)
        end = self.coloff + length
        current_color = -1
        for ch, hl in zip(row.render[self.coloff:end], row.hl[self.coloff:end]):
            code = ord(ch)
            if _is_control(code):
                symbol = chr(ord("@") + code) if code <= 26 else "?"
                out.append("\x1b[7m")
                out.append(symbol)
                out.append("\x1b[m")
                if current_color != -1:
                    out.append(f"\x1b[{current_color}m")
            elif hl == Highlight.NORMAL:
                if current_color != -1:
                    out.append("\x1b[39m")
                    current_color = -1
                out.append(ch)
            else:
                color = syntax_to_color(hl)
                if color != current_color:
                    current_color = color
                    out.append(f"\x1b[{color}m")
                out.append(ch)
        out.append("\x1b[39m")

    def _draw_status_bar(self, out: list[str]) -> None:
        out.append("\x1b[7m")
        name = (self.filename if self.filename is not None else "[No Name]")[:20]
        modified = "(modified)" if self.doc.dirty else ""
        status = f"{name} - {len(self.doc)} lines {modified}"[:_STATUS_LIMIT]
        filetype = self.doc.syntax.filetype if self.doc.syntax else "no ft"
        rstatus = f"{filetype} | {self.cy + 1}/{len(self.doc)}"[:_STATUS_LIMIT]

        length = min(len(status), self.screencols)
        out.append(status[: max(length, 0)])
        while length < self.screencols:
            if self.screencols - length == len(rstatus):
                out.append(rstatus)
                break
            out.append(" ")
            length += 1
        out.append("\x1b[m")
        out.append("\r\n")

    def _draw_message_bar(self, out: list[str]) -> None:
        out.append("\x1b[K")
        message = self.status_message[: max(self.screencols, 0)]
        if message and self.clock() - self.status_time < MESSAGE_TIMEOUT:
            out.append(message)

    def draw_screen(self) -> bytes:
        """Return one full frame for the current state, without scrolling."""
        out: list[str] = ["\x1b[?25l", "\x1b[H"]
        self._draw_rows(out)
        self._draw_status_bar(out)
        self._draw_message_bar(out)
        out.append(f"\x1b[{self.cy - self.rowoff + 1};{self.rx - self.coloff + 1}H")
        out.append("\x1b[?25h")
        return "".join(out).encode("latin-1", errors="replace")

    def refresh_screen(self) -> None:
        """Scroll to the cursor and write a new frame."""
        self.scroll()
        self.write(self.draw_screen())

    def set_status_message(self, message: str) -> None:
        """Show ``message`` in the message bar for a few seconds."""
        self.status_message = message[:_STATUS_LIMIT]
        self.status_time = self.clock()

    # Input

    def prompt(
        self,
        template: str,
        callback: Optional[Callable[[str, int], None]],
    ) -> Optional[str]:
        """Read a line in the message bar; return it, or None when cancelled.

        ``template`` holds one ``{}`` where the typed text is shown.
        ``callback`` is told the text and the key after every keypress.
        """
        text = ""
        while True:
            self.set_status_message(template.format(text))
            self.refresh_screen()

            c = self.read_key()
            if c in (Key.DEL_KEY, ctrl_key("h"), Key.BACKSPACE):
                text = text[:-1]
            elif c == ESCAPE:
                self.set_status_message("")
                if callback is not None:
                    callback(text, c)
                return None
            elif c == ENTER:
                if text:
                    self.set_status_message("")
                    if callback is not None:
                        callback(text, c)
                    return text
            elif 0 <= c < 128 and not _is_control(c):
                text += chr(c)

            if callback is not None:
                callback(text, c)

    def _find_callback(self, query: str, key: int) -> None:
        if self._saved_hl is not None:
            line, saved = self._saved_hl
            if line < len(self.doc):
                self.doc[line].hl = saved
            self._saved_hl = None

        if key in (ENTER, ESCAPE):
            self._last_match = -1
            self._direction = 1
            return
        if key in (Key.ARROW_RIGHT, Key.ARROW_DOWN):
            self._direction = 1
        elif key in (Key.ARROW_LEFT, Key.ARROW_UP):
            self._direction = -1
        else:
            self._last_match = -1
            self._direction = 1

        if self._last_match == -1:
            self._direction = 1
        current = self._last_match
        count = len(self.doc)
        for _ in range(count):
            current += self._direction
            if current == -1:
                current = count - 1
            elif current == count:
                current = 0

            row = self.doc[current]
            pos = row.render.find(query)
            if pos >= 0:
                self._last_match = current
                self.cy = current
                self.cx = row.rx_to_cx(pos)
                self.rowoff = count

                self._saved_hl = (current, list(row.hl))
                row.hl[pos:pos + len(query)] = [Highlight.MATCH] * len(query)
                break

    def find(self) -> None:
        """Search interactively; cancelling puts the cursor back."""
        saved = (self.cx, self.cy, self.coloff, self.rowoff)
        query = self.prompt("Search: {} (Use Arrows/Enter/ESC)", self._find_callback)
        if query is None:
            self.cx, self.cy, self.coloff, self.rowoff = saved

    def process_keypress(self, key: int) -> bool:
        """Handle one key; return False when the editor should quit."""
        if key == ENTER:
            self.insert_newline()
        elif key == ctrl_key("q"):
            if self.doc.dirty and self._quit_times > 0:
                self.set_status_message(
                    "WARNING: File has unsaved changes. "
                    f"Press Ctrl-Q {self._quit_times} more times to quit."
                )
                self._quit_times -= 1
                return True
            self.write(_CLEAR_SCREEN.encode("ascii"))
            return False
        elif key == ctrl_key("s"):
            self.save()
        elif key == Key.HOME_KEY:
            self.cx = self.ln_width + 1
        elif key == Key.END_KEY:
            if self.cy < len(self.doc):
                self.cx = len(self.doc[self.cy].chars) + self.ln_width + 1
        elif key == ctrl_key("f"):
            self.find()
        elif key in (Key.BACKSPACE, ctrl_key("h"), Key.DEL_KEY):
            if key == Key.DEL_KEY:
                self.move_cursor(Key.ARROW_RIGHT)
            self.delete_char()
        elif key in (Key.PAGE_UP, Key.PAGE_DOWN):
            if key == Key.PAGE_UP:
                self.cy = self.rowoff
            else:
                self.cy = min(self.rowoff + self.screenrows - 1, len(self.doc))
            direction = Key.ARROW_UP if key == Key.PAGE_UP else Key.ARROW_DOWN
            for _ in range(self.screenrows):
                self.move_cursor(direction)
        elif key in (Key.ARROW_UP, Key.ARROW_DOWN, Key.ARROW_LEFT, Key.ARROW_RIGHT):
            self.move_cursor(key)
        elif key in (ctrl_key("l"), ESCAPE):
            pass
        else:
            self.insert_char(key)

        self._quit_times = QUIT_TIMES
        return True


def _write_all(fd: int, data: bytes) -> None:
    while data:
        written = os.write(fd, data)
        data = data[written:]


def main(argv: Optional[list[str]] = None) -> int:
    """Run the editor on the terminal; ``argv`` holds the arguments after the program name."""
    args = sys.argv[1:] if argv is None else list(argv)
    fd_in = sys.stdin.fileno()
    fd_out = sys.stdout.fileno()
    try:
        with RawMode(fd_in):
            rows, cols = get_window_size(fd_in, fd_out)
            editor = Editor(
                rows - 2,
                cols,
                lambda: read_key(fd_in),
                lambda data: _write_all(fd_out, data),
            )
            if args:
                editor.open(args[0])
            editor.ln_width = editor.doc.line_number_width()
            editor.cx = editor.ln_width + 1
            editor.set_status_message("HELP: Ctrl-F = Find | Ctrl-S = Save | Ctrl-Q = Quit")
            while True:
                editor.refresh_screen()
                if not editor.process_keypress(editor.read_key()):
                    return 0
    except (OSError, termios.error) as exc:
        try:
            _write_all(fd_out, _CLEAR_SCREEN.encode("ascii"))
        except OSError:
            pass
        print(f"tera: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())