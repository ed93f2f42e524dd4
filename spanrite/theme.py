from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Any

from .diagnostic import Severity

# ANSI escape codes
ESC = "\x1b["
RESET = f"{ESC}0m"
BOLD = f"{ESC}1m"
DIM = f"{ESC}2m"
UNDERLINE = f"{ESC}4m"
RED = f"{ESC}31m"
YELLOW = f"{ESC}33m"
CYAN = f"{ESC}36m"

# Regex pattern to strip ANSI escape sequences (including OSC 8 hyperlinks)
ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|\x1b\]8;;.*?\x1b\\")


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


@dataclass(frozen=True)
class ThemeCharacters:
    """Glyphs used for drawing snippets."""

    hbar: str
    vbar: str
    vbar_break: str
    uarrow: str
    rarrow: str
    ltop: str
    lbot: str
    lcross: str
    rcross: str
    rbot: str
    underbar: str
    underline: str
    error: str
    warning: str
    advice: str

    @classmethod
    def unicode(cls) -> ThemeCharacters:
        return cls(
            hbar="─",
            vbar="│",
            vbar_break="·",
            uarrow="▲",
            rarrow="▶",
            ltop="╭",
            lbot="╰",
            lcross="├",
            rcross="┤",
            rbot="╯",
            underbar="┬",
            underline="─",
            error="×",
            warning="⚠",
            advice="☞",
        )

    @classmethod
    def ascii(cls) -> ThemeCharacters:
        return cls(
            hbar="-",
            vbar="|",
            vbar_break=":",
            uarrow="^",
            rarrow=">",
            ltop=",",
            lbot="`",
            lcross="|",
            rcross="|",
            rbot="'",
            underbar="|",
            underline="^",
            error="x",
            warning="!",
            advice=">",
        )


@dataclass(frozen=True)
class ThemeStyles:
    """ANSI start sequences; an empty string means unstyled."""

    error: str = RED
    warning: str = YELLOW
    advice: str = CYAN
    help: str = CYAN
    link: str = f"{CYAN}{UNDERLINE}{BOLD}"
    linum: str = DIM
    highlights: tuple[str, ...] = (f"{RED}{BOLD}", f"{YELLOW}{BOLD}", f"{CYAN}{BOLD}")

    @classmethod
    def plain(cls) -> ThemeStyles:
        return cls("", "", "", "", "", "", ("",))


@dataclass(frozen=True)
class GraphicalTheme:
    characters: ThemeCharacters = field(default_factory=ThemeCharacters.unicode)
    styles: ThemeStyles = field(default_factory=ThemeStyles)

    @classmethod
    def unicode(cls) -> GraphicalTheme:
        return cls(ThemeCharacters.unicode(), ThemeStyles())

    @classmethod
    def unicode_nocolor(cls) -> GraphicalTheme:
        return cls(ThemeCharacters.unicode(), ThemeStyles.plain())

    @classmethod
    def ascii(cls) -> GraphicalTheme:
        return cls(ThemeCharacters.ascii(), ThemeStyles())

    @classmethod
    def none(cls) -> GraphicalTheme:
        """ASCII drawing without colors, for the dumbest of terminals."""
        return cls(ThemeCharacters.ascii(), ThemeStyles.plain())

    @classmethod
    def for_file(cls, file: Any) -> GraphicalTheme:
        """Pick a theme suitable for the given output stream."""
        is_tty = file.isatty() if hasattr(file, "isatty") else False
        if not is_tty or os.environ.get("NO_COLOR"):
            return cls.unicode_nocolor()
        return cls.unicode()

    @property
    def colored(self) -> bool:
        return bool(self.styles.error or self.styles.highlights[0])

    def severity(self, severity: Severity) -> tuple[str, str]:
        """Icon and style of a severity."""
        icon_name, style_name = SEVERITY_TABLE[severity]
        return getattr(self.characters, icon_name), getattr(self.styles, style_name)

    def highlight(self, index: int) -> str:
        """Style for the n-th label of a snippet, cycling through the palette."""
        highlights = self.styles.highlights
        return highlights[index % len(highlights)]


SEVERITY_TABLE = {
    Severity.ERROR: ("error", "error"),
    Severity.WARNING: ("warning", "warning"),
    Severity.ADVICE: ("advice", "advice"),
}


def style(text: str, ansi: str) -> str:
    """Wrap text in an ANSI style, or return it as is when unstyled."""
    if not ansi or not text:
        return text
    return f"{ansi}{text}{RESET}"
