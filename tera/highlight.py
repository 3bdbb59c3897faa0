"""Syntax highlighting of a single rendered line."""

from __future__ import annotations

import enum
import string

from tera.syntax import HighlightFlag, Syntax

_SEPARATORS = ",.()+-/*=~%<>[];"
_WHITESPACE = " \t\n\v\f\r"


class Highlight(enum.IntEnum):
    """Highlight class of one rendered character."""

    NORMAL = 0
    COMMENT = 1
    MLCOMMENT = 2
    KEYWORD1 = 3
    KEYWORD2 = 4
    STRING = 5
    NUMBER = 6
    MATCH = 7


_COLORS = {
    Highlight.COMMENT: 36,
    Highlight.MLCOMMENT: 36,
    Highlight.KEYWORD1: 33,
    Highlight.KEYWORD2: 32,
    Highlight.STRING: 35,
    Highlight.NUMBER: 31,
    Highlight.MATCH: 34,
}


def is_separator(c: str) -> bool:
    """Return True if ``c`` separates words; an empty string means end of line."""
    return c in ("", "\0") or c in _WHITESPACE or c in _SEPARATORS


def syntax_to_color(hl: int) -> int:
    """Return the ANSI foreground colour code for a highlight class."""
    return _COLORS.get(hl, 37)


def _split_keywords(syntax: Syntax) -> list[tuple[str, Highlight]]:
    words = []
    for keyword in syntax.keywords:
        if keyword.endswith("|"):
            words.append((keyword[:-1], Highlight.KEYWORD2))
        else:
            words.append((keyword, Highlight.KEYWORD1))
    return [(word, kind) for word, kind in words if word]


def highlight_line(
    render: str, syntax: Syntax | None, in_comment: bool = False
) -> tuple[list[Highlight], bool]:
    """Highlight ``render`` and report whether a multi-line comment stays open.

    ``in_comment`` says whether the previous line left a multi-line comment open.
    """
    size = len(render)
    hl = [Highlight.NORMAL] * size
    if syntax is None:
        return hl, False

    scs = syntax.singleline_comment_start
    mcs = syntax.multiline_comment_start
    mce = syntax.multiline_comment_end
    strings = bool(syntax.flags & HighlightFlag.STRINGS)
    numbers = bool(syntax.flags & HighlightFlag.NUMBERS)
    keywords = _split_keywords(syntax)

    prev_sep = True
    quote = ""
    i = 0
    while i < size:
        c = render[i]
        prev_hl = hl[i - 1] if i > 0 else Highlight.NORMAL

        if scs and not quote and not in_comment and render.startswith(scs, i):
            hl[i:] = [Highlight.COMMENT] * (size - i)
            break

        if mcs and mce and not quote:
            if in_comment:
                hl[i] = Highlight.MLCOMMENT
                if render.startswith(mce, i):
                    hl[i:i + len(mce)] = [Highlight.MLCOMMENT] * len(mce)
                    i += len(mce)
                    in_comment = False
                    prev_sep = True
                else:
                    i += 1
                continue
            if render.startswith(mcs, i):
                hl[i:i + len(mcs)] = [Highlight.MLCOMMENT] * len(mcs)
                i += len(mcs)
                in_comment = True
                continue

        if strings:
            if quote:
                hl[i] = Highlight.STRING
                if c == "\\" and i + 1 < size:
                    hl[i + 1] = Highlight.STRING
                    i += 2
                    continue
                if c == quote:
                    quote = ""
                i += 1
                prev_sep = True
                continue
            if c in ('"', "'"):
                quote = c
                hl[i] = Highlight.STRING
                i += 1
                continue

        if numbers:
            is_digit = c in string.digits
            if (is_digit and (prev_sep or prev_hl == Highlight.NUMBER)) or (
                c == "." and prev_hl == Highlight.NUMBER
            ):
                hl[i] = Highlight.NUMBER
                i += 1
                prev_sep = False
                continue

        if prev_sep:
            matched = next(
                (
                    (word, kind)
                    for word, kind in keywords
                    if render.startswith(word, i)
                    and is_separator(render[i + len(word):i + len(word) + 1])
                ),
                None,
            )
            if matched is not None:
                word, kind = matched
                hl[i:i + len(word)] = [kind] * len(word)
                i += len(word)
                prev_sep = False
                continue

        prev_sep = is_separator(c)
        i += 1

    return hl, in_comment