from .diagnostic import Diagnostic, Severity, into_diagnostic
from .highlight import PygmentsHighlighter, blank_highlighter
from .html import html_report
from .jsonreport import JSONReportHandler
from .narratable import NarratableReportHandler
from .source import (
    LabeledSpan,
    NamedSource,
    OutOfBounds,
    SourceSpan,
    SpanContents,
    SpanriteError,
    read_span,
)
from .theme import GraphicalTheme
from .tty import GraphicalReportHandler, render_report, tty_report

__all__ = [
    "Diagnostic",
    "Severity",
    "into_diagnostic",
    "SourceSpan",
    "LabeledSpan",
    "NamedSource",
    "SpanContents",
    "SpanriteError",
    "OutOfBounds",
    "read_span",
    "GraphicalTheme",
    "GraphicalReportHandler",
    "NarratableReportHandler",
    "JSONReportHandler",
    "render_report",
    "tty_report",
    "html_report",
    "PygmentsHighlighter",
    "blank_highlighter",
]
