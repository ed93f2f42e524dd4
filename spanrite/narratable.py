"""Plain text reports for screen readers and non-graphical output."""

from __future__ import annotations

from .columns import safe_column
from .diagnostic import Diagnostic, causes, cause_message, into_diagnostic
from .layout import CONTAINED, ENDS, STARTS, classify
from .lines import Line, window_lines
from .logging import logger
from .merge import Window, anchor_position, display_label, merge_windows
from .source import LabeledSpan, Source, source_bytes, source_name
from .tty import (
    DEFAULT_CONTEXT_LINES,
    MAX_RELATED_DEPTH,
    SEVERITY_PREFIX,
    failure_notice,
)


class NarratableReportHandler:
    """Describe diagnostics in words instead of drawing them."""

    def __init__(
        self,
        *,
        context_lines: int = DEFAULT_CONTEXT_LINES,
        footer: str | None = None,
        with_cause_chain: bool = True,
    ):
        if context_lines < 0:
            raise ValueError("context_lines must not be negative")
        self.context_lines = context_lines
        self.footer = footer
        self.with_cause_chain = with_cause_chain

    def render_report(self, diagnostic: BaseException) -> str:
        diagnostic = into_diagnostic(diagnostic)
        out = self._render_body(diagnostic, diagnostic.source_code)
        out += self._render_related(diagnostic, diagnostic.source_code, 0)
        if self.footer:
            out += f"{self.footer}\n"
        return out

    def _render_body(self, diagnostic: Diagnostic, source: Source | None) -> str:
        severity = diagnostic.effective_severity.value
        out = f"{diagnostic.message}\n    Diagnostic severity: {severity}\n"
        if self.with_cause_chain:
            for exc in causes(diagnostic):
                out += f"    Caused by: {cause_message(exc)}\n"
        out += self._render_snippets(diagnostic, source)
        if diagnostic.help:
            out += f"diagnostic help: {diagnostic.help}\n"
        if diagnostic.code:
            out += f"diagnostic code: {diagnostic.code}\n"
        if diagnostic.url:
            out += f"For more details, see:\n{diagnostic.url}\n"
        return out

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
        out = "\n"
        for related in diagnostic.related:
            related = into_diagnostic(related)
            related_source = related.source_code or source
            out += SEVERITY_PREFIX[related.effective_severity]
            out += self._render_body(related, related_source)
            out += self._render_related(related, related_source, depth + 1)
        return out

    def _render_snippets(self, diagnostic: Diagnostic, source: Source | None) -> str:
        if source is None or not diagnostic.labels:
            return ""
        data = source_bytes(source)
        labels = [display_label(label, data) for label in diagnostic.labels]
        windows, failures = merge_windows(
            source, labels, self.context_lines, self.context_lines
        )
        blocks = [
            (window.span.offset, self._render_window(source, data, window))
            for window in windows
        ]
        blocks += [(label.offset, f"{failure_notice(label)}\n") for label in failures]
        blocks.sort(key=lambda block: block[0])
        return "".join(block for _, block in blocks)

    def _render_window(self, source: Source, data: bytes, window: Window) -> str:
        contents = window.contents
        lines = window_lines(
            data, contents.span.offset, contents.span.end, contents.line + 1
        )
        line_number, column = anchor_position(source, window.labels)
        out = "Begin snippet"
        name = source_name(source)
        if name is not None:
            out += f" for {name}"
        out += f" starting at line {line_number}, column {column}\n\n"
        for line in lines:
            out += f"snippet line {line.line_number}: {line.content}\n"
            for label in window.labels:
                attached = describe_label(line, label)
                if attached is not None:
                    out += f"    {attached}\n"
        return out


def describe_label(line: Line, label: LabeledSpan) -> str | None:
    """Sentence locating a label on a line, or None if it has no end there."""
    kind = classify(line, label)
    text = line.content
    start = safe_column(text, label.offset - line.offset, True)
    end = safe_column(text, label.end - line.offset, False)
    if kind == CONTAINED:
        if start >= end:
            where = f"label at line {line.line_number}, column {start}"
        else:
            where = f"label at line {line.line_number}, columns {start} to {end}"
    elif kind == STARTS:
        where = f"label starting at line {line.line_number}, column {start}"
    elif kind == ENDS:
        where = f"label ending at line {line.line_number}, column {end}"
    else:
        return None
    if label.label is not None:
        where += f": {label.label}"
    return where
