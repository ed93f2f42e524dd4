"""Syntax highlighters for snippet source lines.

A highlighter is a callable taking a line of text (without terminator) and
the source name, and returning ``[(style, text), ...]`` runs whose texts
join back into the line. Styles are ANSI start sequences, ``""`` for none.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Callable

from pygments.console import codes
from pygments.formatters.terminal import TERMINAL_COLORS
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.util import ClassNotFound

Highlighter = Callable[..., list[tuple[str, str]]]


def blank_highlighter(line: str, name: str | None = None) -> list[tuple[str, str]]:
    """No highlighting at all."""
    return [("", line)]


def _ansi(attr: str) -> str:
    """ANSI start sequence for a Pygments console attribute like ``*blue*``."""
    seq = ""
    if attr[:1] == attr[-1:] == "*" and len(attr) > 1:
        seq += codes["bold"]
        attr = attr[1:-1]
    if attr[:1] == attr[-1:] == "_" and len(attr) > 1:
        seq += codes["underline"]
        attr = attr[1:-1]
    return seq + codes.get(attr, "")


@lru_cache(maxsize=64)
def _lexer(language: str | None, name: str | None) -> Any:
    try:
        if language:
            return get_lexer_by_name(language, stripnl=False, ensurenl=False)
        if name:
            return get_lexer_for_filename(name, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return None
    return None


class PygmentsHighlighter:
    """Highlight lines with a Pygments lexer and the terminal color scheme.

    The lexer is chosen by ``language`` if given, else guessed from the
    source name. Lines of unknown languages are left unstyled.
    """

    def __init__(self, language: str | None = None, dark: bool = True):
        self.language = language
        self.dark = dark

    def __repr__(self):
        return f"PygmentsHighlighter(language={self.language!r})"

    def style_of(self, ttype: Any) -> str:
        while ttype not in TERMINAL_COLORS:
            ttype = ttype.parent
        light, dark = TERMINAL_COLORS[ttype]
        return _ansi(dark if self.dark else light)

    def __call__(self, line: str, name: str | None = None) -> list[tuple[str, str]]:
        lexer = _lexer(self.language, name)
        if lexer is None:
            return blank_highlighter(line)
        runs: list[tuple[str, str]] = []
        for ttype, value in lexer.get_tokens(line):
            if not value:
                continue
            style = self.style_of(ttype)
            if runs and runs[-1][0] == style:
                runs[-1] = (style, runs[-1][1] + value)
            else:
                runs.append((style, value))
        return runs
