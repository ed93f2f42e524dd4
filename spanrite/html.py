from __future__ import annotations

from importlib.resources import files
from typing import Any, cast

from html5tagger import E  # type: ignore[import]

from .diagnostic import Diagnostic, cause_message, causes, into_diagnostic
from .layout import CONTAINED, ENDS, classify
from .lines import Line, window_lines
from .logging import logger
from .merge import Window, anchor_position, display_label, merge_windows
from .source import LabeledSpan, Source, source_bytes, source_name
from .tty import DEFAULT_CONTEXT_LINES, MAX_RELATED_DEPTH, failure_notice

style = files(cast(str, __package__)).joinpath("style.css").read_text(encoding="UTF-8")


def html_report(
    diagnostic: BaseException,
    *,
    include_css: bool = True,
    context_lines: int = DEFAULT_CONTEXT_LINES,
    autodark: bool = True,
) -> Any:
    """Render a diagnostic as an HTML fragment.

    Returns an html5tagger builder; ``str()`` of it is the markup.
    """
    diagnostic = into_diagnostic(diagnostic)
    severity = diagnostic.effective_severity.value
    classes = f"spanrite {severity}"
    if autodark:
        classes += " autodark"
    with E.div(class_=classes) as doc:
        if include_css:
            doc._style(style)
        _diagnostic(doc, diagnostic, diagnostic.source_code, context_lines, 0)
    return doc


def _diagnostic(
    doc: Any,
    diagnostic: Diagnostic,
    source: Source | None,
    context_lines: int,
    depth: int,
) -> None:
    if diagnostic.code:
        if diagnostic.url:
            doc.p(E.a(diagnostic.code, href=diagnostic.url), class_="code")
        else:
            doc.p(diagnostic.code, class_="code")
    doc.h2(diagnostic.message)
    chain = list(causes(diagnostic))
    if chain:
        with doc.ul(class_="causes"):
            for exc in chain:
                doc.li(cause_message(exc))

    if source is not None and diagnostic.labels:
        _snippets(doc, diagnostic, source, context_lines)

    if diagnostic.help:
        doc.p(diagnostic.help, class_="help")
    if diagnostic.url and not diagnostic.code:
        doc.p(E.a(diagnostic.url, href=diagnostic.url), class_="url")

    if not diagnostic.related:
        return
    if depth + 1 >= MAX_RELATED_DEPTH:
        logger.warning(
            "Related diagnostics nested deeper than %d levels were not rendered",
            MAX_RELATED_DEPTH,
        )
        return
    for related in diagnostic.related:
        related = into_diagnostic(related)
        severity = related.effective_severity.value
        with doc.div(class_=f"related {severity}"):
            _diagnostic(
                doc, related, related.source_code or source, context_lines, depth + 1
            )


def _snippets(
    doc: Any, diagnostic: Diagnostic, source: Source, context_lines: int
) -> None:
    data = source_bytes(source)
    labels = [display_label(label, data) for label in diagnostic.labels]
    windows, failures = merge_windows(source, labels, context_lines, context_lines)
    for window in windows:
        _window(doc, source, data, window)
    for label in failures:
        doc.p(failure_notice(label), class_="notice")


def _window(doc: Any, source: Source, data: bytes, window: Window) -> None:
    contents = window.contents
    lines = window_lines(
        data, contents.span.offset, contents.span.end, contents.line + 1
    )
    line_number, column = anchor_position(source, window.labels)
    position = f"{line_number}:{column}"
    name = source_name(source)
    if name is not None:
        position = f"{name}:{position}"
    doc.p(position, class_="location")
    with doc.pre, doc.code:
        for line in lines:
            with doc.span(class_="codeline", data_lineno=line.line_number):
                _fragments(doc, line, window.labels)
            doc("\n")
            for i, label in enumerate(window.labels):
                if label.label is None:
                    continue
                if classify(line, label) in (CONTAINED, ENDS):
                    doc.span(label.label, class_=f"annotation label-{i % 3}")
                    doc("\n")


def _fragments(doc: Any, line: Line, labels: list[LabeledSpan]) -> None:
    """Line content with the parts covered by labels marked."""
    raw = line.content.encode("utf-8")
    lo = line.offset
    cuts = {0, len(raw)}
    points: dict[int, list[int]] = {}
    for i, label in enumerate(labels):
        if label.length == 0:
            if classify(line, label) == CONTAINED:
                points.setdefault(min(label.offset - lo, len(raw)), []).append(i)
            continue
        start = min(max(label.offset - lo, 0), len(raw))
        end = min(max(label.end - lo, 0), len(raw))
        if start < end:
            cuts.update((start, end))
    cuts.update(points)
    edges = sorted(cuts)
    for start, end in zip(edges, edges[1:] + [None]):
        for i in points.get(start, ()):
            doc.span(class_=f"point label-{i % 3}", title=labels[i].label)
        if end is None or start == end:
            continue
        text = raw[start:end].decode("utf-8", errors="replace")
        covering = [
            i
            for i, label in enumerate(labels)
            if label.length and label.offset - lo <= start and label.end - lo >= end
        ]
        if covering:
            first = covering[0]
            doc.mark(text, class_=f"label-{first % 3}", title=labels[first].label)
        else:
            doc(text)
