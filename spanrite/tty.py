from __future__ import annotations

import os
import sys
import textwrap
from collections.abc import Sequence
from typing import Any, TextIO

from .columns import expand_tabs, visual_offset
from .diagnostic import Diagnostic, Severity, causes, cause_message, into_diagnostic
from .highlight import Highlighter
from .layout import (
    ENDS,
    STARTS,
    classify,
    contained_spans,
    gutter_spans,
    max_gutter,
)
from .lines import Line, window_lines
from .logging import logger
from .merge import Window, anchor_position, display_label, merge_windows
from .source import LabeledSpan, Source, source_bytes, source_name
from .theme import GraphicalTheme, strip_ansi, style

DEFAULT_WIDTH = 80
DEFAULT_TAB_WIDTH = 4
DEFAULT_CONTEXT_LINES = 1
MAX_RELATED_DEPTH = 16

SEVERITY_PREFIX = {
    Severity.ERROR: "Error: ",
    Severity.WARNING: "Warning: ",
    Severity.ADVICE: "Advice: ",
}

# Multi-line label rows at the end of a span
FIRST = "first"
REST = "rest"


def failure_notice(label: LabeledSpan) -> str:
    """Inline text shown instead of a snippet for a label outside its source."""
    text = "<none>" if label.label is None else label.label
    return (
        f"Failed to read contents for label '{text}' "
        f"(offset: {label.offset}, length: {label.length}): OutOfBounds"
    )


def _fill(text: str, width: int, initial: str, subsequent: str) -> str:
    """Wrap text paragraph by paragraph, keeping its explicit line breaks.

    Indents may contain ANSI styling; wrapping is computed on their plain
    text so that escape sequences do not count towards the width.
    """
    plain_initial = strip_ansi(initial)
    plain_subsequent = strip_ansi(subsequent)
    out = []
    for paragraph in text.split("\n"):
        indent = subsequent if out else initial
        plain_indent = plain_subsequent if out else plain_initial
        wrapped = textwrap.wrap(
            paragraph,
            width=max(width, len(plain_indent) + 1),
            initial_indent=plain_indent,
            subsequent_indent=plain_subsequent,
            break_long_words=False,
            break_on_hyphens=False,
        )
        if not wrapped:
            out.append(indent)
            continue
        for i, row in enumerate(wrapped):
            plain = plain_indent if i == 0 else plain_subsequent
            styled = indent if i == 0 else subsequent
            out.append(styled + row[len(plain) :])
    return "\n".join(out)


class GraphicalReportHandler:
    """Render diagnostics as annotated source snippets for terminals.

    Args:
        theme: Glyphs and colors. Defaults to unicode with colors.
        width: Width used for wrapping messages and help text.
        tab_width: Tab stops used when showing source lines.
        context_lines: Lines of context shown around each label.
        footer: Text appended after every report.
        links: Show the url as a terminal hyperlink on the code.
        highlighter: Callable styling source lines, see highlight.py.
        with_cause_chain: Whether to show the causes of a diagnostic.
    """

    def __init__(
        self,
        *,
        theme: GraphicalTheme | None = None,
        width: int = DEFAULT_WIDTH,
        tab_width: int = DEFAULT_TAB_WIDTH,
        context_lines: int = DEFAULT_CONTEXT_LINES,
        footer: str | None = None,
        links: bool = False,
        highlighter: Highlighter | None = None,
        with_cause_chain: bool = True,
    ):
        if width < 1 or tab_width < 1 or context_lines < 0:
            raise ValueError(
                "width and tab_width must be positive, context_lines not negative"
            )
        self.theme = theme or GraphicalTheme.unicode()
        self.width = width
        self.tab_width = tab_width
        self.context_lines = context_lines
        self.footer = footer
        self.links = links
        self.highlighter = highlighter
        self.with_cause_chain = with_cause_chain

    def render_report(
        self,
        diagnostic: BaseException,
        *,
        parent_source: Source | None = None,
        depth: int = 0,
    ) -> str:
        """Render a whole report: header, causes, snippets, help and related."""
        diagnostic = into_diagnostic(diagnostic)
        source = diagnostic.source_code
        if source is None:
            source = parent_source
        out = [
            self._render_header(diagnostic),
            self._render_causes(diagnostic),
            self._render_snippets(diagnostic, source),
            self._render_help(diagnostic),
            self._render_related(diagnostic, source, depth),
        ]
        if self.footer and depth == 0:
            out.append("\n" + _fill(self.footer, self.width - 4, "  ", "  ") + "\n")
        return "".join(out)

    # Report sections

    def _render_header(self, diagnostic: Diagnostic) -> str:
        _, severity_style = self.theme.severity(diagnostic.effective_severity)
        code = diagnostic.code
        url = diagnostic.url
        if self.links and url:
            text = f"{style(code, severity_style)} " if code else ""
            text += style("(link)", self.theme.styles.link)
            return f"\x1b]8;;{url}\x1b\\{text}\x1b]8;;\x1b\\\n\n"
        if code:
            header = style(code, severity_style)
            if url:
                header += f" ({style(url, self.theme.styles.link)})"
            return f"{header}\n\n"
        return "\n"

    def _render_causes(self, diagnostic: Diagnostic) -> str:
        chars = self.theme.characters
        icon, severity_style = self.theme.severity(diagnostic.effective_severity)
        width = self.width - 2
        out = [
            _fill(
                diagnostic.message,
                width,
                f"  {style(icon, severity_style)} ",
                f"  {style(chars.vbar, severity_style)} ",
            )
        ]
        if self.with_cause_chain:
            chain = list(causes(diagnostic))
            for i, exc in enumerate(chain):
                is_last = i == len(chain) - 1
                corner = chars.lbot if is_last else chars.lcross
                arrow = f"  {corner}{chars.hbar}{chars.rarrow} "
                initial = style(arrow, severity_style)
                rest = style(f"  {' ' if is_last else chars.vbar}   ", severity_style)
                out.append(_fill(cause_message(exc), width, initial, rest))
        return "\n".join(out) + "\n"

    def _render_help(self, diagnostic: Diagnostic) -> str:
        if not diagnostic.help:
            return ""
        initial = style("  help: ", self.theme.styles.help)
        return _fill(diagnostic.help, self.width - 4, initial, " " * 8) + "\n"

    def _render_related(
        self, diagnostic: Diagnostic, source: Source | None, depth: int
    ) -> str:
        if not diagnostic.related:
            return ""
        if depth + 1 >= MAX_RELATED_DEPTH:
            logger.warning(
                "Related diagnostics nested deeper than %d levels were not rendered",
                MAX_RELATED_DEPTH,
            )
            return ""
        out = []
        for related in diagnostic.related:
            related = into_diagnostic(related)
            _, severity_style = self.theme.severity(related.effective_severity)
            prefix = style(SEVERITY_PREFIX[related.effective_severity], severity_style)
            inner = self.render_report(related, parent_source=source, depth=depth + 1)
            out.append(f"\n{prefix}{inner}")
        return "".join(out)

    # Snippets

    def _render_snippets(self, diagnostic: Diagnostic, source: Source | None) -> str:
        if source is None or not diagnostic.labels:
            return ""
        data = source_bytes(source)
        labels = [display_label(label, data) for label in diagnostic.labels]
        windows, failures = merge_windows(
            source, labels, self.context_lines, self.context_lines
        )
        blocks: list[tuple[int, str]] = [
            (window.span.offset, self._render_window(source, data, window))
            for window in windows
        ]
        blocks += [(label.offset, f"  {failure_notice(label)}\n") for label in failures]
        blocks.sort(key=lambda block: block[0])
        return "".join(block for _, block in blocks)

    def _render_window(self, source: Source, data: bytes, window: Window) -> str:
        chars = self.theme.characters
        contents = window.contents
        lines = window_lines(
            data, contents.span.offset, contents.span.end, contents.line + 1
        )
        labels = window.labels
        gutter = max_gutter(lines, labels)
        linum_width = len(str(lines[-1].line_number))

        line_number, column = anchor_position(source, labels)
        position = f"{line_number}:{column}"
        name = source_name(source)
        if name is not None:
            position = f"{style(name, self.theme.styles.link)}:{position}"
        out = [f"{' ' * (linum_width + 2)}{chars.ltop}{chars.hbar}[{position}]\n"]

        for line in lines:
            text = self._highlight(expand_tabs(line.content, self.tab_width), source)
            out.append(
                f"{self._linum(linum_width, line.line_number)}"
                f"{self._line_gutter(gutter, line, labels)}{text}\n"
            )
            single = contained_spans(line, labels)
            if single:
                out += self._single_line_rows(gutter, linum_width, line, labels, single)
            ending = [
                span for span in gutter_spans(line, labels)
                if span.label is not None and classify(line, span) == ENDS
            ]
            done: list[LabeledSpan] = []
            for span in reversed(ending):
                out += self._multi_line_end_rows(
                    gutter, linum_width, line, labels, span, done
                )
                done.append(span)

        out.append(f"{' ' * (linum_width + 2)}{chars.lbot}{chars.hbar * 4}\n")
        return "".join(out)

    def _style_of(self, labels: list[LabeledSpan], span: LabeledSpan) -> str:
        for i, label in enumerate(labels):
            if label is span:
                return self.theme.highlight(i)
        return ""

    def _linum(self, width: int, number: int) -> str:
        linum = style(f"{number:>{width}}", self.theme.styles.linum)
        return f" {linum} {self.theme.characters.vbar} "

    def _no_linum(self, width: int) -> str:
        return f" {'':>{width}} {self.theme.characters.vbar_break} "

    def _highlight(self, text: str, source: Source) -> str:
        if self.highlighter is None:
            return text
        try:
            runs = self.highlighter(text, source_name(source))
        except Exception:
            logger.exception("Highlighter failed, showing the line unstyled")
            return text
        if "".join(part for _, part in runs) != text:
            return text
        return "".join(style(part, ansi) for ansi, part in runs)

    def _line_gutter(self, gutter: int, line: Line, labels: list[LabeledSpan]) -> str:
        """Gutter beside a source line: arrows where spans start or end."""
        if gutter == 0:
            return ""
        chars = self.theme.characters
        parts = []
        width = 0
        arrow = False
        for i, span in enumerate(gutter_spans(line, labels)):
            st = self._style_of(labels, span)
            kind = classify(line, span)
            if kind in (STARTS, ENDS):
                if kind == STARTS:
                    corner = chars.ltop
                else:
                    corner = chars.lcross if span.label is not None else chars.lbot
                arrow_text = corner + chars.hbar * (gutter - i) + chars.rarrow
                parts.append(style(arrow_text, st))
                width += gutter - i + 2
                arrow = True
                break
            parts.append(style(chars.vbar, st))
            width += 1
        padding = (1 if arrow else 3) + max(0, gutter - width)
        return "".join(parts) + " " * padding

    def _highlight_gutter(
        self,
        gutter: int,
        line: Line,
        labels: list[LabeledSpan],
        target: LabeledSpan | None = None,
        mode: str | None = None,
        done: Sequence[LabeledSpan] = (),
    ) -> str:
        """Gutter beside the rows drawn under a source line."""
        if gutter == 0:
            return ""
        chars = self.theme.characters
        parts = []
        width = 0
        for i, span in enumerate(gutter_spans(line, labels)):
            st = self._style_of(labels, span)
            if span is target:
                run = gutter - i + 2
                if mode == REST:
                    parts.append(" " * (run + 1))
                else:
                    parts.append(style(chars.lbot + chars.hbar * run, st))
                width += run + 1
                break
            if any(span is finished for finished in done):
                parts.append(" ")
            else:
                parts.append(style(chars.vbar, st))
            width += 1
        return "".join(parts) + " " * max(0, gutter + 3 - width)

    def _single_line_rows(
        self,
        gutter: int,
        linum_width: int,
        line: Line,
        labels: list[LabeledSpan],
        single: list[LabeledSpan],
    ) -> list[str]:
        """Underline row and label rows for spans contained in one line."""
        chars = self.theme.characters
        prefix = self._no_linum(linum_width)
        prefix += self._highlight_gutter(gutter, line, labels)
        underlines = []
        highest = 0
        marks: list[tuple[int, LabeledSpan]] = []
        for span in single:
            st = self._style_of(labels, span)
            start = visual_offset(line, span.offset, True, self.tab_width)
            if span.length == 0:
                end = start + 1
            else:
                end = visual_offset(line, span.end, False, self.tab_width)
                end = max(end, start + 1)
            vbar = (start + end) // 2
            draw_start = max(start, highest)
            if draw_start < end:
                run = []
                for column in range(draw_start, end):
                    if column != vbar:
                        run.append(chars.underline)
                    elif span.length == 0:
                        run.append(chars.uarrow)
                    elif span.label is not None:
                        run.append(chars.underbar)
                    else:
                        run.append(chars.underline)
                padding = " " * (draw_start - highest)
                underlines.append(padding + style("".join(run), st))
                highest = end
            if span.label is not None:
                marks.append((vbar, span))
        rows = [prefix + "".join(underlines) + "\n"]

        for n in range(len(marks) - 1, -1, -1):
            vbar, span = marks[n]
            st = self._style_of(labels, span)
            cells = [" "] * vbar
            for earlier, other in marks[:n]:
                if earlier < vbar:
                    cells[earlier] = style(chars.vbar, self._style_of(labels, other))
            first, *rest = span.label.split("\n")
            elbow = chars.rcross if rest else chars.hbar
            rows.append(
                prefix + "".join(cells)
                + style(f"{chars.lbot}{chars.hbar}{elbow} {first}", st) + "\n"
            )
            for text in rest:
                rows.append(
                    prefix + "".join(cells) + style(f"  {chars.vbar} {text}", st) + "\n"
                )
        return rows

    def _multi_line_end_rows(
        self,
        gutter: int,
        linum_width: int,
        line: Line,
        labels: list[LabeledSpan],
        span: LabeledSpan,
        done: list[LabeledSpan],
    ) -> list[str]:
        """Rows naming a labeled multi-line span on the line where it ends."""
        chars = self.theme.characters
        st = self._style_of(labels, span)
        first, *rest = span.label.split("\n")
        no_linum = self._no_linum(linum_width)
        elbow = chars.rcross if rest else chars.hbar
        gutter_text = self._highlight_gutter(gutter, line, labels, span, FIRST, done)
        rows = [f"{no_linum}{gutter_text}{style(f'{elbow} {first}', st)}\n"]
        for text in rest:
            gutter_text = self._highlight_gutter(gutter, line, labels, span, REST, done)
            rows.append(f"{no_linum}{gutter_text}{style(f'{chars.vbar} {text}', st)}\n")
        return rows


def render_report(
    diagnostic: BaseException, handler: GraphicalReportHandler | None = None
) -> str:
    """Render a diagnostic (or any exception) to a string."""
    handler = handler or GraphicalReportHandler()
    return handler.render_report(diagnostic)


def tty_report(
    diagnostic: BaseException,
    handler: Any = None,
    *,
    file: TextIO | None = None,
) -> None:
    """Write a report to a terminal or stream.

    Without a handler, one is created to suit the stream: colors only on
    terminals (unless NO_COLOR is set) and the terminal width for wrapping.
    ANSI escapes are stripped when the stream is not a terminal.

    Args:
        diagnostic: The diagnostic, or any exception.
        handler: Report handler with a render_report method.
        file: Output stream. Defaults to sys.stderr.
    """
    if file is None:
        file = sys.stderr
    is_tty = file.isatty() if hasattr(file, "isatty") else False
    if handler is None:
        try:
            width = os.get_terminal_size(file.fileno()).columns
        except (AttributeError, OSError, ValueError):
            width = DEFAULT_WIDTH
        theme = GraphicalTheme.for_file(file)
        handler = GraphicalReportHandler(theme=theme, width=width)
    output = handler.render_report(diagnostic)
    if not is_tty:
        output = strip_ansi(output)
    file.write(output)
