from __future__ import annotations

import unicodedata
from typing import Any


def char_width(c: str) -> int:
    """Terminal columns taken by a single character."""
    if unicodedata.combining(c) or unicodedata.category(c) in ("Me", "Mn", "Cf"):
        return 0
    return 2 if unicodedata.east_asian_width(c) in "WF" else 1


def display_width(text: str, tab_width: int | None = None) -> int:
    """Calculate the display width of a string in terminal columns.

    With tab_width set, tabs advance to the next multiple of tab_width.
    """
    width = 0
    for c in text:
        if c == "\t" and tab_width:
            width += tab_width - width % tab_width
        else:
            width += char_width(c)
    return width


def expand_tabs(text: str, tab_width: int) -> str:
    """Replace tabs with spaces up to the next tab stop in display columns.

    Unlike str.expandtabs, wide characters count as two columns, so the
    result lines up with display_width(text, tab_width).
    """
    out = []
    width = 0
    for c in text:
        if c == "\t":
            spaces = tab_width - width % tab_width
            out.append(" " * spaces)
            width += spaces
        else:
            out.append(c)
            width += char_width(c)
    return "".join(out)


def _prefix(text: str, index: int, start: bool) -> tuple[str, bool]:
    """Text before a byte index, and whether the index was inside the text.

    An index inside a multi-byte character rounds down for starts and up
    otherwise.
    """
    consumed = 0
    for i, c in enumerate(text):
        if consumed >= index:
            return text[:i], True
        size = len(c.encode("utf-8"))
        if consumed + size > index:
            return (text[:i] if start else text[: i + 1]), True
        consumed += size
    return text, consumed >= index


def safe_column(text: str, offset: int, start: bool) -> int:
    """1-based column for a byte offset into text.

    Starts are inclusive and ends exclusive, so a start column is one past
    the width of everything before it while an end column equals that
    width. Offsets inside a character never raise.
    """
    prefix, _ = _prefix(text, offset, start)
    column = display_width(prefix)
    if start:
        column += 1
    return column


def visual_offset(
    line: Any, offset: int, start: bool, tab_width: int | None = None
) -> int:
    """0-based drawing column of an absolute byte offset on a line.

    Offsets past the visible text of the line (into its terminator, or at
    end of file) map to one column past the end of the text.
    """
    content = line.content
    index = offset - line.offset
    prefix, inside = _prefix(content, index, start)
    width = display_width(prefix, tab_width)
    if not inside or index > len(content.encode("utf-8")):
        return width + 1
    return width
