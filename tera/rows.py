"""Text rows of an open document and their rendered form."""

from __future__ import annotations

from dataclasses import dataclass, field

from tera.highlight import Highlight, highlight_line
from tera.syntax import Syntax

TAB_STOP = 8


def render_tabs(chars: str) -> str:
    """Expand tabs in ``chars`` to spaces up to the next tab stop."""
    out: list[str] = []
    width = 0
    for ch in chars:
        if ch == "\t":
            pad = TAB_STOP - width % TAB_STOP
            out.append(" " * pad)
            width += pad
        else:
            out.append(ch)
            width += 1
    return "".join(out)


@dataclass
class Row:
    """One line of text with its rendered form and highlighting."""

    chars: str = ""
    render: str = ""
    hl: list[Highlight] = field(default_factory=list)
    open_comment: bool = False

    def cx_to_rx(self, cx: int) -> int:
        """Convert a character index to a rendered column."""
        rx = 0
        for ch in self.chars[:cx]:
            if ch == "\t":
                rx += (TAB_STOP - 1) - rx % TAB_STOP
            rx += 1
        return rx + max(0, cx - len(self.chars))

    def rx_to_cx(self, rx: int) -> int:
        """Convert a rendered column to a character index."""
        cur_rx = 0
        for cx, ch in enumerate(self.chars):
            if ch == "\t":
                cur_rx += (TAB_STOP - 1) - cur_rx % TAB_STOP
            cur_rx += 1
            if cur_rx > rx:
                return cx
        return len(self.chars)


class Document:
    """The rows of a file being edited, kept rendered and highlighted.

    ``dirty`` counts modifications since it was last reset.
    """

    def __init__(self, syntax: Syntax | None = None) -> None:
        self.syntax = syntax
        self.rows: list[Row] = []
        self.dirty = 0

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    def set_syntax(self, syntax: Syntax | None) -> None:
        """Switch filetype and re-highlight every row."""
        self.syntax = syntax
        for index in range(len(self.rows)):
            self._update_syntax(index)

    def _update_syntax(self, index: int) -> None:
        while index < len(self.rows):
            row = self.rows[index]
            previous_open = index > 0 and self.rows[index - 1].open_comment
            row.hl, open_comment = highlight_line(row.render, self.syntax, previous_open)
            changed = row.open_comment != open_comment
            row.open_comment = open_comment
            if not changed:
                break
            index += 1

    def _update_row(self, index: int) -> None:
        row = self.rows[index]
        row.render = render_tabs(row.chars)
        self._update_syntax(index)

    def insert_row(self, at: int, text: str) -> None:
        """Insert a row holding ``text`` before ``at``; out-of-range is ignored."""
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, Row(chars=text))
        self._update_row(at)
        self.dirty += 1

    def delete_row(self, at: int) -> None:
        """Remove row ``at``; out-of-range is ignored."""
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.dirty += 1

    def insert_char(self, row: int, at: int, c: str) -> None:
        """Insert character ``c`` into a row; a bad position appends it."""
        target = self.rows[row]
        if at < 0 or at > len(target.chars):
            at = len(target.chars)
        target.chars = target.chars[:at] + c + target.chars[at:]
        self._update_row(row)
        self.dirty += 1

    def append_string(self, row: int, text: str) -> None:
        """Append ``text`` to the end of a row."""
        self.rows[row].chars += text
        self._update_row(row)
        self.dirty += 1

    def delete_char(self, row: int, at: int) -> None:
        """Delete the character at ``at`` in a row; out-of-range is ignored."""
        target = self.rows[row]
        if at < 0 or at >= len(target.chars):
            return
        target.chars = target.chars[:at] + target.chars[at + 1:]
        self._update_row(row)
        self.dirty += 1

    def truncate_row(self, row: int, length: int) -> None:
        """Cut a row down to its first ``length`` characters."""
        self.rows[row].chars = self.rows[row].chars[:length]
        self._update_row(row)

    def to_string(self) -> str:
        """Join all rows, each ended by a newline."""
        return "".join(row.chars + "\n" for row in self.rows)

    def line_number_width(self) -> int:
        """Number of digits needed for the largest line number."""
        return len(str(max(len(self.rows), 1)))